import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://localhost:4000/api"


async def fetch_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    retries: int = 2,
    backoff: float = 0.6,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    **kwargs: Any,
) -> httpx.Response:
    """Request with linear backoff (backoff * attempt) on transport errors and non-2xx."""
    attempt = 0
    while True:
        try:
            resp = await client.request(method, url, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.HTTPError as exc:
            if attempt >= retries:
                raise
            attempt += 1
            logger.debug("Retry %d/%d for %s: %s", attempt, retries, url, exc)
            await sleep(backoff * attempt)


class SmsApiClient:
    """Thin client for the HTTP API, used by the CLI."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_base: str = DEFAULT_API_BASE,
        retries: int = 2,
        backoff: float = 0.6,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._client = client
        self._api_base = api_base.rstrip("/")
        self._retries = retries
        self._backoff = backoff
        self._sleep = sleep

    async def _get(self, path: str, params: dict | None = None) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        resp = await fetch_retry(
            self._client,
            "GET",
            f"{self._api_base}{path}",
            retries=self._retries,
            backoff=self._backoff,
            sleep=self._sleep,
            params=params or None,
        )
        return resp.json()

    async def health(self) -> dict:
        return await self._get("/health")

    async def status(self) -> dict:
        return await self._get("/status")

    async def countries(self) -> list[dict]:
        return (await self._get("/countries"))["countries"]

    async def numbers(self, country: str | None = None) -> list[dict]:
        return (await self._get("/numbers", {"country": country}))["numbers"]

    async def messages(self, number_id: str) -> list[dict]:
        return (await self._get(f"/numbers/{number_id}/messages"))["messages"]

    async def otp(self, number_id: str) -> dict:
        return await self._get(f"/numbers/{number_id}/otp")
