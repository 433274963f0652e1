from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

from phone_sms_api.schemas.sms import Message, PhoneNumber

MAX_NUMBERS = 300
MAX_MESSAGES = 50

T = TypeVar("T")


def dedupe(items: Iterable[T], key: Callable[[T], Hashable], limit: int) -> list[T]:
    """Keep the first item per key, in input order, up to `limit` items."""
    seen: set[Hashable] = set()
    out: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        out.append(item)
        if len(out) >= limit:
            break
    return out


def window_numbers(numbers: Iterable[PhoneNumber], limit: int = MAX_NUMBERS) -> list[PhoneNumber]:
    return dedupe(numbers, lambda n: n.phone, limit)


def window_messages(messages: Iterable[Message], limit: int = MAX_MESSAGES) -> list[Message]:
    return dedupe(messages, lambda m: f"{m.text}|{m.time}", limit)
