"""
Use case: Report the health of the pattern store.

Input: None
Output: PatternHealthResult
Side effects: None.
Failure cases: None. An unreachable index reports "unhealthy".
"""

import logging
from datetime import datetime, timezone

from pattern_intel.application.patterns.dtos import PatternHealthResult
from pattern_intel.domain.patterns.ports import VectorIndexPort

logger = logging.getLogger(__name__)


class CheckPatternHealthUseCase:
    """Probes the vector index and stamps the result."""

    def __init__(self, vector_index: VectorIndexPort) -> None:
        self._vector_index = vector_index

    async def execute(self) -> PatternHealthResult:
        health = await self._vector_index.ping()
        if not health.healthy:
            logger.warning("Vector index reported status=%s", health.status.value)

        return PatternHealthResult(
            healthy=health.healthy,
            status=health.status.value,
            version=health.version,
            latency_ms=health.latency_ms,
            checked_at=datetime.now(timezone.utc),
        )
