import asyncio
import logging
from collections.abc import Awaitable, Callable

from phone_sms_api.mappers.listing_page import parse_listing_page
from phone_sms_api.mappers.windowing import window_numbers
from phone_sms_api.schemas.sms import PhoneNumber
from phone_sms_api.services.cookies import CookieSource, no_cookies
from phone_sms_api.services.navigator import PageFetcher

logger = logging.getLogger(__name__)


class ListingService:
    def __init__(
        self,
        fetcher: PageFetcher,
        base_url: str,
        list_path: str,
        provider: str = "sms24",
        pages: int = 5,
        page_delay: float = 2.0,
        cookie_source: CookieSource | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")
        self._list_path = list_path
        self._provider = provider
        self._pages = pages
        self._page_delay = page_delay
        self._cookie_source = cookie_source or no_cookies
        self._sleep = sleep

    def page_url(self, page_num: int) -> str:
        return f"{self._base_url}{self._list_path}/page/{page_num}"

    async def list_numbers(self) -> list[PhoneNumber]:
        """Scan the listing pages in order. Best-effort, never raises.

        A page that fails to load is skipped; numbers from the other pages
        are still returned.
        """
        seen: set[str] = set()
        found: list[PhoneNumber] = []
        try:
            async with self._fetcher.session(self._cookie_source()) as session:
                for page_num in range(1, self._pages + 1):
                    if page_num > 1:
                        await self._sleep(self._page_delay)
                    try:
                        html = await session.load(self.page_url(page_num))
                        found.extend(
                            parse_listing_page(html, self._base_url, self._provider, seen)
                        )
                    except Exception as exc:
                        logger.warning("Skipping page %d: %s", page_num, exc)
        except Exception:
            logger.exception("Listing scrape aborted after %d numbers", len(found))

        logger.info("Scraped %d numbers across %d pages", len(found), self._pages)
        return window_numbers(found)
