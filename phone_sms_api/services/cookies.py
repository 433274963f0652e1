import json
import logging
import math
from collections.abc import Callable
from pathlib import Path
from urllib.parse import urlparse

from pydantic import ValidationError

from phone_sms_api.schemas.sms import SessionCookie

logger = logging.getLogger(__name__)

# Cookie-editor exports use lower-case / Chrome extension values
_SAME_SITE = {
    "lax": "Lax",
    "strict": "Strict",
    "none": "None",
    "no_restriction": "None",
}


def load_cookie_file(path: str | Path | None) -> list[SessionCookie]:
    """Load exported session cookies. Best-effort: problems yield no cookies."""
    if not path:
        return []
    file = Path(path)
    if not file.is_file():
        logger.debug("Cookie file %s not found, browsing unauthenticated", file)
        return []

    try:
        exported = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Could not read cookie file %s", file, exc_info=True)
        return []
    if not isinstance(exported, list):
        logger.warning("Cookie file %s is not a JSON array", file)
        return []

    cookies: list[SessionCookie] = []
    for entry in exported:
        if not isinstance(entry, dict):
            continue
        try:
            cookies.append(SessionCookie(**entry))
        except ValidationError:
            logger.debug("Skipping malformed cookie entry: %s", entry.get("name"))
    return cookies


def to_playwright_cookies(cookies: list[SessionCookie], base_url: str) -> list[dict]:
    """Convert exported cookies to the dicts accepted by BrowserContext.add_cookies."""
    default_domain = urlparse(base_url).hostname or ""
    out: list[dict] = []
    for c in cookies:
        cookie: dict = {
            "name": c.name,
            "value": c.value,
            "domain": c.domain or default_domain,
            "path": c.path or "/",
            "httpOnly": c.httpOnly,
            "secure": c.secure,
        }
        if c.expirationDate:
            cookie["expires"] = math.floor(c.expirationDate)
        same_site = _SAME_SITE.get((c.sameSite or "").lower())
        if same_site:
            cookie["sameSite"] = same_site
        out.append(cookie)
    return out


CookieSource = Callable[[], list[SessionCookie]]


def no_cookies() -> list[SessionCookie]:
    return []


def file_cookie_source(path: str | Path | None) -> CookieSource:
    """Cookie source that re-reads the export on every call, so edits apply without restart."""
    return lambda: load_cookie_file(path)
