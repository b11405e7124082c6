"""
Use case: Recommend strategies for the current market regime.

Input: RecommendForRegimeQuery (tenant_id, user_id, current_regime,
    user_tier?, limit)
Output: list[Recommendation]
Side effects: None.
Failure cases: None. An empty index yields an empty list.
"""

import logging

from pattern_intel.application.patterns.dtos import RecommendForRegimeQuery
from pattern_intel.domain.patterns.entities import (
    STRATEGY_NAMESPACE,
    Recommendation,
    StrategyMetadata,
)
from pattern_intel.domain.patterns.feature_encoder import FeatureEncoder
from pattern_intel.domain.patterns.narratives import recommendation_explanation
from pattern_intel.domain.patterns.ports import VectorIndexPort

logger = logging.getLogger(__name__)

FREE_TIER = "free"
PRO_TIER = "pro"
OVERFETCH_FACTOR = 2


class RecommendForRegimeUseCase:
    """Ranks indexed strategies against an encoded regime.

    Over-fetches from the index so that tier filtering can still fill
    the requested number of recommendations. Candidates keep the
    index's score order.
    """

    def __init__(
        self,
        vector_index: VectorIndexPort,
        encoder: FeatureEncoder,
        namespace: str = STRATEGY_NAMESPACE,
    ) -> None:
        self._vector_index = vector_index
        self._encoder = encoder
        self._namespace = namespace

    async def execute(self, query: RecommendForRegimeQuery) -> list[Recommendation]:
        """Run the recommendation use case.

        Args:
            query: Regime, tenant, user tier and result limit.

        Returns:
            At most `limit` recommendations, best match first.
        """
        logger.info(
            "Recommending strategies for tenant=%s, user=%s, tier=%s",
            query.tenant_id,
            query.user_id,
            query.user_tier,
        )

        vector = self._encoder.encode_regime(query.current_regime)
        hits = await self._vector_index.search(
            self._namespace,
            vector,
            top_k=query.limit * OVERFETCH_FACTOR,
            filter={"tenantId": query.tenant_id},
        )

        recommendations: list[Recommendation] = []
        for hit in hits:
            if len(recommendations) >= query.limit:
                break

            metadata = StrategyMetadata.from_hit(hit)
            if query.user_tier == FREE_TIER and metadata.tier == PRO_TIER:
                continue

            metrics = metadata.backtest_metrics
            recommendations.append(
                Recommendation(
                    strategy_id=metadata.strategy_id,
                    name=metadata.name,
                    confidence=hit.score,
                    expected_return=metrics.total_return,
                    expected_sharpe=metrics.sharpe_ratio,
                    explanation=recommendation_explanation(
                        hit.score, query.current_regime, metrics
                    ),
                    tier=metadata.tier,
                )
            )

        return recommendations
