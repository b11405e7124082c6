"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits. Clients are keyed by
tenant header when present so that tenants behind one proxy do not
share a budget; otherwise by remote address.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from pattern_intel.core.config import settings

TENANT_HEADER = "x-tenant-id"


def tenant_or_remote_address(request: Request) -> str:
    """Return the rate-limit key for a request."""
    tenant = request.headers.get(TENANT_HEADER)
    if tenant:
        return f"tenant:{tenant}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=tenant_or_remote_address,
    default_limits=[settings.rate_limit_default],
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Return a 429 JSON body in the ErrorResponse shape."""
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
    )
