from phone_sms_api.config import Settings
from phone_sms_api.services.cookies import file_cookie_source
from phone_sms_api.services.diagnostics import FileDiagnosticSink
from phone_sms_api.services.inbox import InboxService
from phone_sms_api.services.listing import ListingService
from phone_sms_api.services.navigator import PlaywrightFetcher


def build_services(settings: Settings) -> tuple[ListingService, InboxService]:
    """Wire the listing and inbox scrapers for the configured provider."""
    fetcher = PlaywrightFetcher(
        settings.base_url,
        headless=settings.headless,
        attempts=settings.nav_attempts,
        timeout=settings.nav_timeout_seconds,
    )
    cookies = file_cookie_source(settings.cookie_file)

    listing = ListingService(
        fetcher,
        settings.base_url,
        settings.list_path,
        provider=settings.provider,
        pages=settings.listing_pages,
        page_delay=settings.page_delay_seconds,
        cookie_source=cookies,
    )

    diagnostics: FileDiagnosticSink | None = None
    if settings.debug_dir:
        diagnostics = FileDiagnosticSink(settings.debug_dir)

    inbox = InboxService(
        fetcher,
        settings.base_url,
        settings.list_path,
        provider=settings.provider,
        cookie_source=cookies,
        diagnostics=diagnostics,
    )
    return listing, inbox
