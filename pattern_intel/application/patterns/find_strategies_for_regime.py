"""
Use case: Find strategies that meet a performance bar for a regime.

Input: FindStrategiesForRegimeQuery (tenant_id, regime, min_performance?, limit)
Output: RegimeSearchResult
Side effects: None.
Failure cases: None.
"""

import logging
from typing import Optional

from pattern_intel.application.patterns.dtos import (
    FindStrategiesForRegimeQuery,
    MinPerformance,
    RegimeSearchResult,
)
from pattern_intel.domain.patterns.entities import (
    STRATEGY_NAMESPACE,
    BacktestMetrics,
    RegimeStrategyMatch,
    StrategyMetadata,
)
from pattern_intel.domain.patterns.feature_encoder import FeatureEncoder
from pattern_intel.domain.patterns.ports import VectorIndexPort

logger = logging.getLogger(__name__)

OVERFETCH_FACTOR = 2


def meets_minimum(metrics: BacktestMetrics, minimum: Optional[MinPerformance]) -> bool:
    """Return True when metrics clear every threshold that is set.

    A missing metric counts as zero.
    """
    if minimum is None:
        return True
    if (
        minimum.sharpe_ratio is not None
        and (metrics.sharpe_ratio or 0.0) < minimum.sharpe_ratio
    ):
        return False
    if (
        minimum.total_return is not None
        and (metrics.total_return or 0.0) < minimum.total_return
    ):
        return False
    return True


class FindStrategiesForRegimeUseCase:
    """Searches strategies by regime and drops those below the bar."""

    def __init__(
        self,
        vector_index: VectorIndexPort,
        encoder: FeatureEncoder,
        namespace: str = STRATEGY_NAMESPACE,
    ) -> None:
        self._vector_index = vector_index
        self._encoder = encoder
        self._namespace = namespace

    async def execute(self, query: FindStrategiesForRegimeQuery) -> RegimeSearchResult:
        logger.info("Matching strategies to regime for tenant=%s", query.tenant_id)

        hits = await self._vector_index.search(
            self._namespace,
            self._encoder.encode_regime(query.regime),
            top_k=query.limit * OVERFETCH_FACTOR,
            filter={"tenantId": query.tenant_id},
        )

        matches: list[RegimeStrategyMatch] = []
        for hit in hits:
            metadata = StrategyMetadata.from_hit(hit, default_name="Unknown")
            metrics = metadata.backtest_metrics
            if not meets_minimum(metrics, query.min_performance):
                continue
            matches.append(
                RegimeStrategyMatch(
                    strategy_id=metadata.strategy_id,
                    name=metadata.name,
                    sharpe_ratio=metrics.sharpe_ratio,
                    total_return=metrics.total_return,
                    regime_match=hit.score,
                )
            )

        return RegimeSearchResult(strategies=matches[: query.limit])
