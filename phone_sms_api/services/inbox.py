import logging
from collections.abc import Callable
from datetime import datetime, timezone

from phone_sms_api.mappers.inbox_layout import parse_inbox
from phone_sms_api.mappers.message_builder import build_messages
from phone_sms_api.schemas.sms import Message
from phone_sms_api.services.cookies import CookieSource, no_cookies
from phone_sms_api.services.diagnostics import DiagnosticSink
from phone_sms_api.services.navigator import PageFetcher

logger = logging.getLogger(__name__)

FAILED_SNAPSHOT = "last_failed.html"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InboxService:
    def __init__(
        self,
        fetcher: PageFetcher,
        base_url: str,
        list_path: str,
        provider: str = "sms24",
        cookie_source: CookieSource | None = None,
        diagnostics: DiagnosticSink | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")
        self._list_path = list_path
        self._provider = provider
        self._cookie_source = cookie_source or no_cookies
        self._diagnostics = diagnostics
        self._clock = clock

    def inbox_url(self, phone: str) -> str:
        return f"{self._base_url}{self._list_path}/{phone.lstrip('+')}"

    async def list_messages(self, phone: str) -> list[Message]:
        """Messages received by `phone`, newest first as the page lists them.

        NavigationError propagates. A page that loads but matches no known
        layout yields [] and a diagnostic snapshot.
        """
        async with self._fetcher.session(self._cookie_source()) as session:
            # Warm-up visit establishes session state before the inbox
            await session.load(self._base_url)
            html = await session.load(self.inbox_url(phone))

        now = self._clock()
        candidates = parse_inbox(html, brand=self._provider)
        if not candidates:
            saved = None
            if self._diagnostics is not None:
                saved = await self._diagnostics.save(FAILED_SNAPSHOT, html)
            logger.warning(
                "No messages parsed for %s (snapshot: %s)", phone, saved or "not saved"
            )
            return []

        return build_messages(candidates, now)
