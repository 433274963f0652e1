import json

from phone_sms_api.schemas.sms import SessionCookie
from phone_sms_api.services.cookies import (
    file_cookie_source,
    load_cookie_file,
    no_cookies,
    to_playwright_cookies,
)

BASE_URL = "https://sms24.me"


def _write(tmp_path, payload) -> str:
    path = tmp_path / "cookies.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return str(path)


def test_load_cookie_file(tmp_path):
    path = _write(
        tmp_path,
        [
            {"name": "cf_clearance", "value": "abc", "domain": ".sms24.me", "sameSite": "no_restriction"},
            {"name": "session", "value": "xyz"},
        ],
    )

    cookies = load_cookie_file(path)

    assert [c.name for c in cookies] == ["cf_clearance", "session"]
    assert cookies[0].domain == ".sms24.me"


def test_missing_or_unset_file_yields_nothing(tmp_path):
    assert load_cookie_file(None) == []
    assert load_cookie_file("") == []
    assert load_cookie_file(tmp_path / "nope.json") == []


def test_malformed_json_yields_nothing(tmp_path):
    assert load_cookie_file(_write(tmp_path, "{not json")) == []


def test_non_array_yields_nothing(tmp_path):
    assert load_cookie_file(_write(tmp_path, {"name": "a", "value": "b"})) == []


def test_bad_entries_skipped(tmp_path):
    path = _write(tmp_path, ["junk", {"value": "no name"}, {"name": "ok", "value": "1"}])
    assert [c.name for c in load_cookie_file(path)] == ["ok"]


def test_to_playwright_defaults():
    [cookie] = to_playwright_cookies([SessionCookie(name="a", value="1")], BASE_URL)

    assert cookie["domain"] == "sms24.me"
    assert cookie["path"] == "/"
    assert "expires" not in cookie
    assert "sameSite" not in cookie


def test_to_playwright_expiry_and_flags():
    [cookie] = to_playwright_cookies(
        [
            SessionCookie(
                name="a",
                value="1",
                domain=".sms24.me",
                path="/en",
                expirationDate=1767225600.75,
                secure=True,
                httpOnly=True,
            )
        ],
        BASE_URL,
    )

    assert cookie["domain"] == ".sms24.me"
    assert cookie["path"] == "/en"
    assert cookie["expires"] == 1767225600
    assert cookie["secure"] is True
    assert cookie["httpOnly"] is True


def test_same_site_mapping():
    values = ["lax", "strict", "none", "no_restriction", "unspecified", None]
    converted = to_playwright_cookies(
        [SessionCookie(name=f"c{i}", value="v", sameSite=v) for i, v in enumerate(values)],
        BASE_URL,
    )

    assert [c.get("sameSite") for c in converted] == ["Lax", "Strict", "None", "None", None, None]


def test_file_cookie_source_rereads(tmp_path):
    path = tmp_path / "cookies.json"
    source = file_cookie_source(path)
    assert source() == []

    path.write_text(json.dumps([{"name": "a", "value": "1"}]), encoding="utf-8")
    assert [c.name for c in source()] == ["a"]
    assert no_cookies() == []
