"""
Use case: Find strategies similar to a given strategy.

Input: FindSimilarStrategiesQuery (strategy_id, tenant_id, limit)
Output: list[SimilarityResult]
Side effects: None.
Failure cases: StrategyNotFoundError.
"""

import logging

from pattern_intel.application.patterns.dtos import FindSimilarStrategiesQuery
from pattern_intel.domain.patterns.entities import (
    STRATEGY_NAMESPACE,
    SimilarityResult,
    StrategyMetadata,
)
from pattern_intel.domain.patterns.errors import StrategyNotFoundError
from pattern_intel.domain.patterns.feature_encoder import FeatureEncoder
from pattern_intel.domain.patterns.ports import (
    BacktestRepository,
    StrategyRepository,
    VectorIndexPort,
)

logger = logging.getLogger(__name__)


class FindSimilarStrategiesUseCase:
    """Searches the index with a freshly built vector of the source strategy.

    The vector is rebuilt from current backtests rather than read back
    from the index. The source strategy is excluded from the results,
    which keep the index's order.
    """

    def __init__(
        self,
        strategy_repo: StrategyRepository,
        backtest_repo: BacktestRepository,
        vector_index: VectorIndexPort,
        encoder: FeatureEncoder,
        namespace: str = STRATEGY_NAMESPACE,
    ) -> None:
        self._strategy_repo = strategy_repo
        self._backtest_repo = backtest_repo
        self._vector_index = vector_index
        self._encoder = encoder
        self._namespace = namespace

    async def execute(self, query: FindSimilarStrategiesQuery) -> list[SimilarityResult]:
        """Run the similarity use case.

        Raises:
            StrategyNotFoundError: If the source strategy does not exist.
        """
        logger.info(
            "Finding strategies similar to strategy=%s, tenant=%s",
            query.strategy_id,
            query.tenant_id,
        )

        strategy = await self._strategy_repo.find_by_id(query.strategy_id)
        if strategy is None:
            raise StrategyNotFoundError(query.strategy_id)

        backtests = await self._backtest_repo.find_by_strategy_id(strategy.id)
        vector = self._encoder.encode_strategy(strategy, backtests)

        # one extra slot for the source strategy itself
        hits = await self._vector_index.search(
            self._namespace,
            vector,
            top_k=query.limit + 1,
            filter={"tenantId": query.tenant_id},
        )

        results: list[SimilarityResult] = []
        for hit in hits:
            metadata = StrategyMetadata.from_hit(hit, default_name="Unknown")
            if metadata.strategy_id == query.strategy_id:
                continue
            results.append(
                SimilarityResult(
                    strategy_id=metadata.strategy_id,
                    name=metadata.name,
                    similarity=hit.score,
                )
            )

        return results[: query.limit]
