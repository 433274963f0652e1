from contextlib import asynccontextmanager

import httpx
import pytest
from httpx import ASGITransport

from phone_sms_api.exceptions.custom import NavigationError

BASE_URL = "https://sms24.me"
LIST_PATH = "/en/numbers"


class FakeSession:
    def __init__(self, fetcher: "FakeFetcher"):
        self._fetcher = fetcher

    async def load(self, url: str) -> str:
        self._fetcher.calls.append(url)
        outcome = self._fetcher.pages.get(url)
        if outcome is None:
            raise NavigationError(url, 3, RuntimeError("net::ERR_TIMED_OUT"))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeFetcher:
    """PageFetcher double: serves scripted HTML per URL, unknown URLs fail."""

    def __init__(self, pages: dict[str, str | Exception] | None = None):
        self.pages = pages or {}
        self.calls: list[str] = []
        self.cookies_seen: list = []
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def session(self, cookies=None):
        self.cookies_seen.append(cookies)
        self.opened += 1
        try:
            yield FakeSession(self)
        finally:
            self.closed += 1


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    monkeypatch.setenv("COOKIE_FILE", "")
    monkeypatch.setenv("DEBUG_DIR", str(tmp_path / "debug"))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


@pytest.fixture
async def client(mock_env):
    from phone_sms_api.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c


@pytest.fixture
def app_state(client):
    from phone_sms_api.main import app

    return app.state
