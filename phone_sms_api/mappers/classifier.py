"""Content heuristics applied to raw inbox candidates.

Pure functions only: no I/O, no clock reads. Callers pass "now" explicitly.
"""

import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

UNKNOWN_SENDER = "unknown"

# 4-8 digits with no digit on either side
_OTP_RE = re.compile(r"(?<!\d)\d{4,8}(?!\d)", re.ASCII)
_PHONE_SHAPED_RE = re.compile(r"\+\d{7,}", re.ASCII)
_BARE_PHONE_RE = re.compile(r"^\+?\d{7,15}$", re.ASCII)
_FROM_LABEL_RE = re.compile(r"^From:\s*", re.IGNORECASE)

_NOISE_RES = (
    re.compile(r"new number from", re.IGNORECASE),
    re.compile(r"refresh (?:this|the) page", re.IGNORECASE),
    re.compile(r"short-?term|rental|aggregator|our platform|pricing model", re.IGNORECASE),
)
_NOISE_MAX_PLAIN_LENGTH = 200

_NUMERIC_RE = re.compile(r"^-?\d+(?:\.\d+)?$", re.ASCII)
_RELATIVE_RE = re.compile(
    r"^([0-9]+|an?|one)\s+(second|sec|minute|min|hour|hr|day|week|month|year)s?\s+ago$",
    re.IGNORECASE,
)
_UNIT_SECONDS = {
    "second": 1, "sec": 1,
    "minute": 60, "min": 60,
    "hour": 3600, "hr": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "month": 30 * 86400,
    "year": 365 * 86400,
}
_DATE_FORMATS = (
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%b %d, %Y %H:%M:%S",
    "%b %d, %Y %H:%M",
    "%B %d, %Y %H:%M",
    "%b %d, %Y",
    "%B %d, %Y",
)
# Epoch values above this are milliseconds
_EPOCH_MS_THRESHOLD = 1e11


def extract_otp(text: str | None) -> str | None:
    """Return the first isolated run of 4-8 digits, or None."""
    if not text:
        return None
    match = _OTP_RE.search(text)
    return match.group(0) if match else None


def clean_from(raw: str | None) -> str:
    """Normalize a sender label; bare phone numbers are not useful senders."""
    value = _FROM_LABEL_RE.sub("", (raw or "").strip()).strip()
    if not value or _BARE_PHONE_RE.match(value):
        return UNKNOWN_SENDER
    return value


def is_likely_noise(text: str | None, brand: str = "sms24") -> bool:
    """Heuristic for page boilerplate picked up by the generic layout scan."""
    t = (text or "").strip()
    if not t:
        return True
    if brand and brand.lower() in t.lower():
        return True
    if any(pattern.search(t) for pattern in _NOISE_RES):
        return True
    if len(t) > _NOISE_MAX_PLAIN_LENGTH and not _OTP_RE.search(t):
        return True
    if len(_PHONE_SHAPED_RE.findall(t)) >= 2:
        return True
    return False


def _from_epoch(value: float) -> datetime | None:
    if abs(value) >= _EPOCH_MS_THRESHOLD:
        value /= 1000
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_relative(text: str, now: datetime) -> datetime | None:
    lowered = text.lower()
    if lowered in ("now", "just now"):
        return now
    if lowered == "yesterday":
        return now - timedelta(days=1)
    m = _RELATIVE_RE.match(text)
    if not m:
        return None
    amount = int(m.group(1)) if m.group(1).isdigit() else 1
    return now - timedelta(seconds=amount * _UNIT_SECONDS[m.group(2).lower()])


def parse_timestamp(raw: object, now: datetime) -> datetime | None:
    """Best-effort conversion of a scraped timestamp. Returns None if unparseable."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, (int, float)):
        return _from_epoch(float(raw))

    text = str(raw).strip()
    if not text:
        return None
    if _NUMERIC_RE.match(text):
        return _from_epoch(float(text))

    relative = _parse_relative(text, now)
    if relative is not None:
        return relative

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def format_iso(dt: datetime) -> str:
    """UTC, millisecond precision, trailing Z. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_iso(raw: object, now: datetime) -> str:
    """Normalize a raw timestamp; anything unparseable becomes `now`."""
    parsed = parse_timestamp(raw, now)
    try:
        return format_iso(parsed or now)
    except (OverflowError, ValueError):
        return format_iso(now)
