"""
Secure HTTP headers middleware.

Every response gets restrictive browser headers. Responses under the
pattern API additionally carry Cache-Control: no-store, since they
contain tenant-scoped strategy data that shared caches must not keep.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SECURE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}

TENANT_DATA_PREFIX = "/api/v1/patterns"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds SECURE_HEADERS to all responses and no-store to tenant data."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        response.headers.update(SECURE_HEADERS)
        if request.url.path.startswith(TENANT_DATA_PREFIX):
            response.headers["Cache-Control"] = "no-store"
        return response
