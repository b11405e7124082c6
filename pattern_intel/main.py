"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (liveness and the patterns context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from pattern_intel.core.config import settings
from pattern_intel.interfaces.health import router as health_router
from pattern_intel.interfaces.patterns.dependencies import (
    get_db_engine,
    get_http_client,
)
from pattern_intel.interfaces.patterns.router import router as patterns_router
from pattern_intel.shared.errors.handlers import register_error_handlers
from pattern_intel.shared.logging import configure_logging
from pattern_intel.shared.security.headers import SecurityHeadersMiddleware
from pattern_intel.shared.security.rate_limiting import (
    limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled connections built lazily by the dependency layer."""
    logger.info(
        "Pattern service starting (backend=%s, dimension=%d)",
        settings.vector_index_backend,
        settings.embedding_dimension,
    )

    yield

    if get_db_engine.cache_info().currsize:
        await get_db_engine().dispose()
    if get_http_client.cache_info().currsize:
        await get_http_client().aclose()
    logger.info("Pattern service stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(patterns_router, prefix="/api/v1")

    return app


app = create_app()
