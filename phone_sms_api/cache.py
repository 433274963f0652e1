from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from phone_sms_api.schemas.sms import PhoneNumber

ListingLoader = Callable[[], Awaitable[list[PhoneNumber]]]


class CachedListing(BaseModel):
    data: list[PhoneNumber]
    captured_at: float


class ListingCache:
    """TTL cache for the number listing.

    Concurrent callers that miss share a single upstream load.
    """

    def __init__(
        self,
        loader: ListingLoader,
        ttl: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl
        self._clock = clock
        self._entry: CachedListing | None = None
        self._lock = asyncio.Lock()

    def _fresh(self) -> list[PhoneNumber] | None:
        entry = self._entry
        if entry is not None and self._clock() - entry.captured_at < self._ttl:
            return entry.data
        return None

    async def get(self) -> list[PhoneNumber]:
        if (data := self._fresh()) is not None:
            return data
        async with self._lock:
            # Another caller may have refreshed while we waited
            if (data := self._fresh()) is not None:
                return data
            data = await self._loader()
            self._entry = CachedListing(data=data, captured_at=self._clock())
            return data
