import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from phone_sms_api.cache import ListingCache
from phone_sms_api.config import Settings
from phone_sms_api.exceptions.custom import NavigationError, RateLimitError
from phone_sms_api.exceptions.handlers import (
    navigation_error_handler,
    rate_limit_error_handler,
)
from phone_sms_api.ratelimit import RateLimiter
from phone_sms_api.routers.numbers import router as numbers_router
from phone_sms_api.services.provider import build_services


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    configure_logging(settings.log_level)

    listing, inbox = build_services(settings)

    app.state.settings = settings
    app.state.listing_cache = ListingCache(listing.list_numbers, ttl=settings.cache_ttl_seconds)
    app.state.inbox_service = inbox
    app.state.rate_limiter = RateLimiter(
        settings.rate_limit_max, settings.rate_limit_window_seconds
    )

    yield


app = FastAPI(title="Phone SMS API", lifespan=lifespan)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.add_exception_handler(NavigationError, navigation_error_handler)
app.add_exception_handler(RateLimitError, rate_limit_error_handler)

app.include_router(numbers_router)
