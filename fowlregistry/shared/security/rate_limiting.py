"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits. Limits come from
settings so deployments can tune them without code changes.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from fowlregistry.core.config import settings

DEFAULT_RATE_LIMIT = settings.rate_limit_default
HEAVY_RATE_LIMIT = settings.rate_limit_heavy

limiter = Limiter(key_func=get_remote_address, default_limits=[DEFAULT_RATE_LIMIT])


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Return a 429 in the same {"error", "detail"} shape as other errors."""
    return JSONResponse(
        status_code=429,
        content={"error": "resource-exhausted", "detail": str(exc.detail)},
    )
