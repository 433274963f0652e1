"""Tests for InboxService against a scripted PageFetcher."""

from datetime import datetime, timezone

import pytest

from phone_sms_api.exceptions.custom import NavigationError
from phone_sms_api.services.diagnostics import FileDiagnosticSink
from phone_sms_api.services.inbox import InboxService

BASE_URL = "https://sms24.me"
INBOX_URL = "https://sms24.me/en/numbers/12025550123"
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

PRIMARY = """
<html><body>
  <dl>
    <dt><div data-created="2024-05-01T10:00:00Z">2 hours ago</div></dt>
    <dd><label><a href="#">Google</a></label>
        <span class="text-break">G-482913 is your Google verification code.</span></dd>
  </dl>
  <dl>
    <dt><div data-created="2024-05-01T10:00:00Z">2 hours ago</div></dt>
    <dd><label><a href="#">Copycat</a></label>
        <span class="text-break">G-482913 is your Google verification code.</span></dd>
  </dl>
  <dl>
    <dt><div>just now</div></dt>
    <dd><label>+12025550999</label><p>Hello from sms24 support</p></dd>
  </dl>
</body></html>
"""

LEGACY = """
<html><body>
  <div class="list-group-item"><strong>WhatsApp</strong><p>Your WhatsApp code 739201</p></div>
  <div class="list-group-item"><strong>Uber</strong><p>Uber code 8812</p></div>
  <div class="list-group-item"><strong>Bank</strong><p>Your balance changed</p></div>
  <div class="list-group-item"><p>Refresh this page to get new messages</p></div>
</body></html>
"""

EMPTY = "<html><body><h1>Just a moment...</h1></body></html>"


class _MemorySink:
    def __init__(self):
        self.saved: dict[str, str] = {}

    async def save(self, name: str, html: str) -> str | None:
        self.saved[name] = html
        return f"memory://{name}"


def _service(fetcher, **kwargs) -> InboxService:
    return InboxService(fetcher, BASE_URL, "/en/numbers", clock=lambda: NOW, **kwargs)


async def test_warm_up_then_inbox(fake_fetcher):
    fetcher = fake_fetcher({BASE_URL: "<html></html>", INBOX_URL: PRIMARY})

    await _service(fetcher).list_messages("+12025550123")

    assert fetcher.calls == [BASE_URL, INBOX_URL]
    assert fetcher.opened == fetcher.closed == 1


async def test_primary_layout_messages(fake_fetcher):
    fetcher = fake_fetcher({BASE_URL: "<html></html>", INBOX_URL: PRIMARY})

    messages = await _service(fetcher).list_messages("+12025550123")

    assert len(messages) == 2
    first, second = messages
    assert first.id == "msg-0"
    assert first.from_ == "Google"
    assert first.otp == "482913"
    assert first.time == "2024-05-01T10:00:00.000Z"
    # Brand mentions are only filtered on the legacy path
    assert second.text == "Hello from sms24 support"
    assert second.from_ == "unknown"
    assert second.otp is None
    assert second.time == "2024-05-01T12:00:00.000Z"


async def test_fallback_layout_only(fake_fetcher):
    fetcher = fake_fetcher({BASE_URL: "<html></html>", INBOX_URL: LEGACY})

    messages = await _service(fetcher).list_messages("+12025550123")

    assert [m.from_ for m in messages] == ["WhatsApp", "Uber", "Bank"]
    assert [m.otp for m in messages] == ["739201", "8812", None]
    assert all(m.id.startswith("fb-") for m in messages)
    assert all(m.time == "2024-05-01T12:00:00.000Z" for m in messages)


async def test_nothing_parsed_saves_snapshot(fake_fetcher):
    fetcher = fake_fetcher({BASE_URL: "<html></html>", INBOX_URL: EMPTY})
    sink = _MemorySink()

    messages = await _service(fetcher, diagnostics=sink).list_messages("+12025550123")

    assert messages == []
    assert sink.saved == {"last_failed.html": EMPTY}


async def test_nothing_parsed_without_sink(fake_fetcher):
    fetcher = fake_fetcher({BASE_URL: "<html></html>", INBOX_URL: EMPTY})
    assert await _service(fetcher).list_messages("+12025550123") == []


async def test_snapshot_written_to_disk(fake_fetcher, tmp_path):
    fetcher = fake_fetcher({BASE_URL: "<html></html>", INBOX_URL: EMPTY})
    sink = FileDiagnosticSink(tmp_path / "debug")

    await _service(fetcher, diagnostics=sink).list_messages("12025550123")

    assert (tmp_path / "debug" / "last_failed.html").read_text(encoding="utf-8") == EMPTY


async def test_inbox_navigation_failure_propagates(fake_fetcher):
    fetcher = fake_fetcher({BASE_URL: "<html></html>"})

    with pytest.raises(NavigationError) as exc_info:
        await _service(fetcher).list_messages("+12025550123")

    assert exc_info.value.url == INBOX_URL
    assert fetcher.closed == 1


async def test_warm_up_failure_propagates(fake_fetcher):
    fetcher = fake_fetcher({INBOX_URL: PRIMARY})

    with pytest.raises(NavigationError):
        await _service(fetcher).list_messages("+12025550123")

    assert fetcher.calls == [BASE_URL]


def test_inbox_url_strips_plus():
    service = _service(None)
    assert service.inbox_url("+12025550123") == INBOX_URL
    assert service.inbox_url("12025550123") == INBOX_URL


async def test_unwritable_snapshot_still_returns_empty(fake_fetcher, tmp_path):
    blocked = "<html><body>\ud800</body></html>"
    fetcher = fake_fetcher({BASE_URL: "<html></html>", INBOX_URL: blocked})
    sink = FileDiagnosticSink(tmp_path / "debug")

    assert await _service(fetcher, diagnostics=sink).list_messages("12025550123") == []
