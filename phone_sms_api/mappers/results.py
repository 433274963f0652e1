import re

from phone_sms_api.schemas.responses import CountryCount, OtpResponse
from phone_sms_api.schemas.sms import Message, PhoneNumber

_PHONE_NOISE_RE = re.compile(r"[\s()\-]")
_PHONE_ID_RE = re.compile(r"^\d{7,15}$", re.ASCII)


def normalize_phone(value: str | None) -> str:
    """Drop spaces, parentheses, dashes and non-breaking spaces."""
    if not value:
        return ""
    return _PHONE_NOISE_RE.sub("", value)


def phone_from_id(raw_id: str) -> str:
    """Turn a route id ("12064072001", "+1 206-407-2001") into "+digits".

    Raises ValueError when the id is not 7-15 digits.
    """
    digits = normalize_phone(raw_id).lstrip("+")
    if not _PHONE_ID_RE.match(digits):
        raise ValueError(f"Invalid phone number id: {raw_id!r}")
    return f"+{digits}"


def filter_by_country(numbers: list[PhoneNumber], query: str | None) -> list[PhoneNumber]:
    """Match on ISO code ("cn") or country name ("china"), case-insensitive substring."""
    if not query or not query.strip():
        return numbers
    q = query.strip().lower()
    return [
        n for n in numbers
        if q in (n.countryCode or "").lower() or q in (n.country or "").lower()
    ]


def group_countries(numbers: list[PhoneNumber]) -> list[CountryCount]:
    groups: dict[str, CountryCount] = {}
    for n in numbers:
        if not n.country or not n.countryCode:
            continue
        key = n.country.lower()
        if key not in groups:
            groups[key] = CountryCount(country=n.country, code=n.countryCode, count=0)
        groups[key].count += 1
    return sorted(groups.values(), key=lambda c: c.country.casefold())


def latest_otp(phone: str, messages: list[Message]) -> OtpResponse:
    """First message carrying an OTP; messages are in page order, newest first."""
    for m in messages:
        if m.otp:
            return OtpResponse(phone=phone, otp=m.otp, from_=m.from_, time=m.time)
    return OtpResponse(phone=phone, otp=None, message="No OTP found")
