from collections.abc import Iterable
from datetime import datetime

from phone_sms_api.mappers.classifier import clean_from, extract_otp, to_iso
from phone_sms_api.mappers.windowing import window_messages
from phone_sms_api.schemas.sms import Message, RawMessage


def _message_id(raw: RawMessage, now: datetime) -> str:
    if raw.strategy == "primary":
        return f"msg-{raw.index}"
    return f"fb-{int(now.timestamp() * 1000)}-{raw.index}"


def build_message(raw: RawMessage, now: datetime) -> Message:
    return Message(
        id=_message_id(raw, now),
        from_=clean_from(raw.sender),
        text=raw.text,
        otp=extract_otp(raw.text),
        time=to_iso(raw.time, now),
    )


def build_messages(candidates: Iterable[RawMessage], now: datetime) -> list[Message]:
    """Classify candidates, then dedupe on (text, time) and cap the result."""
    return window_messages(build_message(raw, now) for raw in candidates)
