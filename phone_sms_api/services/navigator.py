import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

from playwright.async_api import BrowserContext, async_playwright
from playwright.async_api import Error as PlaywrightError

from phone_sms_api.exceptions.custom import NavigationError
from phone_sms_api.schemas.sms import SessionCookie
from phone_sms_api.services.cookies import to_playwright_cookies

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3
DEFAULT_TIMEOUT = 30.0
_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)


class PageSession(Protocol):
    async def load(self, url: str) -> str: ...


class PageFetcher(Protocol):
    def session(
        self, cookies: list[SessionCookie] | None = None
    ) -> AbstractAsyncContextManager[PageSession]: ...


class BrowserSession:
    """Page loads inside one browser context, with bounded retries."""

    def __init__(
        self,
        context: BrowserContext,
        cookies: list[dict] | None = None,
        attempts: int = DEFAULT_ATTEMPTS,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._context = context
        self._cookies = cookies or []
        self._attempts = attempts
        self._timeout_ms = int(timeout * 1000)

    async def load(self, url: str) -> str:
        """Return the document HTML once the DOM is parsed.

        Attempts are sequential with no delay between them. Raises
        NavigationError when every attempt failed.
        """
        last_cause: Exception | None = None
        for attempt in range(1, self._attempts + 1):
            page = None
            try:
                if self._cookies:
                    await self._context.add_cookies(self._cookies)
                page = await self._context.new_page()
                await page.goto(url, wait_until="domcontentloaded", timeout=self._timeout_ms)
                return await page.content()
            except PlaywrightError as exc:
                last_cause = exc
                logger.warning("Retry %d/%d for %s: %s", attempt, self._attempts, url, exc)
            finally:
                if page is not None:
                    with contextlib.suppress(PlaywrightError):
                        await page.close()
        raise NavigationError(url, self._attempts, last_cause)


class PlaywrightFetcher:
    """Headless Chromium; each session owns its own browser and context."""

    def __init__(
        self,
        base_url: str,
        headless: bool = True,
        attempts: int = DEFAULT_ATTEMPTS,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._base_url = base_url
        self._headless = headless
        self._attempts = attempts
        self._timeout = timeout

    @asynccontextmanager
    async def session(
        self, cookies: list[SessionCookie] | None = None
    ) -> AsyncIterator[BrowserSession]:
        async with contextlib.AsyncExitStack() as stack:
            # Setup failures (missing browser binary, driver crash) count as
            # one failed attempt against the site
            try:
                p = await stack.enter_async_context(async_playwright())
                browser = await p.chromium.launch(headless=self._headless, args=_LAUNCH_ARGS)
                stack.push_async_callback(browser.close)
                context = await browser.new_context(user_agent=_USER_AGENT, locale="en-US")
                stack.push_async_callback(context.close)
            except PlaywrightError as exc:
                raise NavigationError(self._base_url, 1, exc) from exc

            yield BrowserSession(
                context,
                to_playwright_cookies(cookies or [], self._base_url),
                attempts=self._attempts,
                timeout=self._timeout,
            )
