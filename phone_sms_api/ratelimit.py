import time
from collections import deque
from collections.abc import Callable

from fastapi import Request

from phone_sms_api.exceptions.custom import RateLimitError


class RateLimiter:
    """Sliding-window request limit per client key."""

    def __init__(
        self,
        max_requests: int = 25,
        window_seconds: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max = max_requests
        self._window = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def _sweep(self, now: float) -> None:
        # At most once per window: forget clients with no hit inside the window
        if now - self._last_sweep < self._window:
            return
        self._last_sweep = now
        stale = [k for k, hits in self._hits.items() if not hits or now - hits[-1] >= self._window]
        for key in stale:
            del self._hits[key]

    def hit(self, key: str) -> None:
        """Record a request for `key`; raises RateLimitError when over the limit."""
        now = self._clock()
        self._sweep(now)
        hits = self._hits.setdefault(key, deque())
        while hits and now - hits[0] >= self._window:
            hits.popleft()
        if len(hits) >= self._max:
            raise RateLimitError("api")
        hits.append(now)


async def enforce_rate_limit(request: Request) -> None:
    limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return
    client = request.client.host if request.client else "unknown"
    limiter.hit(client)
