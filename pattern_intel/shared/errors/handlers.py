"""
Centralized error handlers for FastAPI.

Maps pattern domain errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pattern_intel.domain.patterns.errors import (
    PatternDomainError,
    StrategyNotFoundError,
    VectorIndexUnavailableError,
)

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_500 = 500
HTTP_503 = 503


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(StrategyNotFoundError)
    async def handle_strategy_not_found(
        _request: Request, exc: StrategyNotFoundError
    ) -> JSONResponse:
        """Handle unknown strategy ids."""
        logger.warning("Strategy not found: %s", exc.strategy_id)
        return _error_response(HTTP_404, "Strategy not found", exc.message)

    @app.exception_handler(VectorIndexUnavailableError)
    async def handle_index_unavailable(
        _request: Request, exc: VectorIndexUnavailableError
    ) -> JSONResponse:
        """Handle vector index outages."""
        logger.error("Vector index unavailable: %s", exc.reason)
        return _error_response(HTTP_503, "Pattern store unavailable")

    @app.exception_handler(PatternDomainError)
    async def handle_pattern_domain(
        _request: Request, exc: PatternDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled pattern domain errors."""
        logger.error("Unhandled pattern domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
