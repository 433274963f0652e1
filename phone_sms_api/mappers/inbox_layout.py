"""Inbox page layouts, tried in priority order.

Each strategy turns a parsed document into raw message candidates. The first
strategy that yields anything wins; later ones are not consulted.
"""

import re
from collections.abc import Callable

from bs4 import BeautifulSoup, Tag

from phone_sms_api.mappers.classifier import is_likely_noise
from phone_sms_api.schemas.sms import RawMessage

Strategy = Callable[[BeautifulSoup, str], list[RawMessage]]

_LEGACY_CONTAINERS = ".list-group-item, .sms-item, .inbox-item, .media, .panel-body, .card-body"
_LEGACY_SENDER = ".from, .sender, .name"
_LEGACY_BODY = ".body, .text, .message-text, p"
_LEGACY_TIME = ".time, .date, .created"

# "From: <sender>\n<body>" glued together in one container
_FROM_PREFIX_RE = re.compile(r"From:\s*([^\n]+)\s*(.*)$", re.IGNORECASE)


def _text(node: Tag | None) -> str:
    return node.get_text().strip() if node is not None else ""


def _attr(node: Tag | None, name: str) -> str:
    if node is None:
        return ""
    value = node.get(name)
    return value.strip() if isinstance(value, str) else ""


def _raw_time(scope: Tag, *text_selectors: str) -> str | None:
    value = (
        _attr(scope.select_one("[data-created]"), "data-created")
        or _attr(scope.select_one("time[datetime]"), "datetime")
    )
    for selector in text_selectors:
        if value:
            break
        value = _text(scope.select_one(selector))
    return value or None


def primary_layout(soup: BeautifulSoup, brand: str) -> list[RawMessage]:
    """Current layout: one <dl> per message, meta in <dt>, content in <dd>."""
    candidates: list[RawMessage] = []
    for index, group in enumerate(soup.select("dl")):
        header = group.select_one("dt")
        time_raw = _raw_time(header, "div") if header is not None else None

        sender = (
            _text(group.select_one("dd label a"))
            or _text(group.select_one("dd label"))
            or _text(group.select_one("dd strong"))
        )
        text = (
            _text(group.select_one("dd span.text-break"))
            or _text(group.select_one("dd p"))
            or " ".join(dd.get_text(" ", strip=True) for dd in group.select("dd")).strip()
        )
        if not text:
            continue

        candidates.append(
            RawMessage(index=index, strategy="primary", sender=sender, text=text, time=time_raw)
        )
    return candidates


def legacy_layout(soup: BeautifulSoup, brand: str) -> list[RawMessage]:
    """Older/generic container layouts. Noisy, so boilerplate is filtered here."""
    candidates: list[RawMessage] = []
    for index, container in enumerate(soup.select(_LEGACY_CONTAINERS)):
        sender = _text(container.select_one(_LEGACY_SENDER)) or _text(
            container.select_one("strong, b")
        )

        text = _text(container.select_one(_LEGACY_BODY)) or container.get_text().strip()
        cut = _FROM_PREFIX_RE.search(text)
        if cut and cut.group(2).strip():
            text = cut.group(2).strip()

        if not text or is_likely_noise(text, brand=brand):
            continue

        candidates.append(
            RawMessage(
                index=index,
                strategy="fallback",
                sender=sender,
                text=text,
                time=_raw_time(container, _LEGACY_TIME),
            )
        )
    return candidates


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("primary", primary_layout),
    ("fallback", legacy_layout),
)


def parse_inbox(
    html: str,
    brand: str = "sms24",
    strategies: tuple[tuple[str, Strategy], ...] = STRATEGIES,
) -> list[RawMessage]:
    soup = BeautifulSoup(html, "html.parser")
    for _name, strategy in strategies:
        candidates = strategy(soup, brand)
        if candidates:
            return candidates
    return []
