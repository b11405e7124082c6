"""
Use case: Explain a strategy's risk and performance profile.

Input: ExplainStrategyQuery (strategy_id, tenant_id)
Output: StrategyExplanation
Side effects: None.
Failure cases: StrategyNotFoundError.
"""

import logging

from pattern_intel.application.patterns.dtos import ExplainStrategyQuery
from pattern_intel.domain.patterns.entities import (
    REGIME_NAMESPACE,
    STRATEGY_NAMESPACE,
    StrategyExplanation,
    StrategyMetadata,
)
from pattern_intel.domain.patterns.errors import StrategyNotFoundError
from pattern_intel.domain.patterns.feature_encoder import (
    FeatureEncoder,
    select_best_backtest,
)
from pattern_intel.domain.patterns.narratives import (
    DEFAULT_THRESHOLDS,
    ExplanationThresholds,
    performance_factors,
    risk_warnings,
    split_regimes,
    strategy_summary,
)
from pattern_intel.domain.patterns.ports import (
    BacktestRepository,
    StrategyRepository,
    VectorIndexPort,
)

logger = logging.getLogger(__name__)

REGIME_SEARCH_TOP_K = 10
SIMILAR_STRATEGY_COUNT = 3


class ExplainStrategyUseCase:
    """Combines backtest metrics with regime matches into an explanation.

    Uses the same best-backtest rule as ingestion, so the explanation
    describes the same metrics that the indexed vector encodes.
    """

    def __init__(
        self,
        strategy_repo: StrategyRepository,
        backtest_repo: BacktestRepository,
        vector_index: VectorIndexPort,
        encoder: FeatureEncoder,
        thresholds: ExplanationThresholds = DEFAULT_THRESHOLDS,
        strategy_namespace: str = STRATEGY_NAMESPACE,
        regime_namespace: str = REGIME_NAMESPACE,
    ) -> None:
        self._strategy_repo = strategy_repo
        self._backtest_repo = backtest_repo
        self._vector_index = vector_index
        self._encoder = encoder
        self._thresholds = thresholds
        self._strategy_namespace = strategy_namespace
        self._regime_namespace = regime_namespace

    async def execute(self, query: ExplainStrategyQuery) -> StrategyExplanation:
        """Run the explanation use case.

        Args:
            query: Strategy to explain and the tenant to search within.

        Returns:
            Summary, performance factors, best/worst regimes, risk warnings
            and the ids of a few similar strategies.

        Raises:
            StrategyNotFoundError: If the strategy does not exist.
        """
        logger.info(
            "Explaining strategy=%s, tenant=%s", query.strategy_id, query.tenant_id
        )

        strategy = await self._strategy_repo.find_by_id(query.strategy_id)
        if strategy is None:
            raise StrategyNotFoundError(query.strategy_id)

        backtests = await self._backtest_repo.find_by_strategy_id(strategy.id)
        best = select_best_backtest(backtests)
        vector = self._encoder.encode_strategy_with_best(strategy, best)
        tenant_filter = {"tenantId": query.tenant_id}

        regime_hits = await self._vector_index.search(
            self._regime_namespace,
            vector,
            top_k=REGIME_SEARCH_TOP_K,
            filter=tenant_filter,
        )
        best_regimes, worst_regimes = split_regimes(regime_hits, self._thresholds)

        neighbour_hits = await self._vector_index.search(
            self._strategy_namespace,
            vector,
            top_k=SIMILAR_STRATEGY_COUNT + 1,
            filter=tenant_filter,
        )
        similar = [
            metadata.strategy_id
            for metadata in (StrategyMetadata.from_hit(hit) for hit in neighbour_hits)
            if metadata.strategy_id != strategy.id
        ][:SIMILAR_STRATEGY_COUNT]

        return StrategyExplanation(
            strategy_id=strategy.id,
            name=strategy.name,
            summary=strategy_summary(strategy, best),
            performance_factors=performance_factors(best, self._thresholds),
            best_regimes=best_regimes,
            worst_regimes=worst_regimes,
            risk_warnings=risk_warnings(best, self._thresholds),
            similar_strategies=similar,
        )
