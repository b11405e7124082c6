"""
Liveness endpoint.

Answers without touching the vector index or the database; use
/patterns/health for a dependency probe.
"""

from fastapi import APIRouter

from pattern_intel.core.config import settings
from pattern_intel.interfaces.patterns.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Returns service status and version.",
)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=settings.version)
