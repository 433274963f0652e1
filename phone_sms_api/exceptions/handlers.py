import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import NavigationError, RateLimitError

logger = logging.getLogger(__name__)


async def navigation_error_handler(_request: Request, exc: NavigationError) -> JSONResponse:
    logger.error("Upstream navigation failed: %s (attempts=%s)", exc.url, exc.attempts)
    return JSONResponse(
        status_code=502,
        content={"error": "upstream_failed", "detail": exc.message},
    )


async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    logger.warning("Rate limit hit for %s", exc.service)
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests, slow down."},
    )
