import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from phone_sms_api.schemas.sms import PhoneNumber

_ANCHOR_SELECTOR = 'a.callout[href*="/numbers/"]'
_NUMBER_HREF_RE = re.compile(r"/numbers/(\d{7,15})(?!\d)", re.ASCII)


def _decoration(anchor: Tag, selector: str, attr: str | None = None) -> str:
    node = anchor.select_one(selector)
    if node is None:
        return ""
    if attr is None:
        return node.get_text().strip()
    value = node.get(attr)
    return value.strip() if isinstance(value, str) else ""


def parse_listing_page(
    html: str,
    base_url: str,
    provider: str,
    seen: set[str] | None = None,
) -> list[PhoneNumber]:
    """Extract number listings from one listing page.

    `seen` holds phones already emitted by earlier pages and is updated in
    place; a phone already in it is skipped, so the first occurrence wins.
    """
    if seen is None:
        seen = set()

    soup = BeautifulSoup(html, "html.parser")
    numbers: list[PhoneNumber] = []
    for anchor in soup.select(_ANCHOR_SELECTOR):
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        m = _NUMBER_HREF_RE.search(href)
        if not m:
            continue

        digits = m.group(1)
        phone = f"+{digits}"
        if phone in seen:
            continue
        seen.add(phone)

        numbers.append(
            PhoneNumber(
                id=digits,
                phone=phone,
                provider=provider,
                countryCode=_decoration(anchor, "span.fi", "data-flag").lower() or None,
                country=_decoration(anchor, "h5.text-secondary") or None,
                sourceUrl=urljoin(base_url, href),
            )
        )
    return numbers
