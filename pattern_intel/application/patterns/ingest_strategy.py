"""
Use case: Ingest a strategy into the vector index.

Input: IngestStrategyCommand (strategy_id, tenant_id?)
Output: IngestStrategyResult
Side effects: Upserts one entry in the "strategies" namespace, keyed by
    strategy id. Repeated calls with unchanged data write the same entry.
Failure cases: StrategyNotFoundError.

Triggering re-ingestion (backtest completion, strategy edits, periodic
sweeps) is the caller's responsibility.
"""

import logging
from datetime import datetime
from typing import Optional

from pattern_intel.application.patterns.dtos import (
    IngestStrategyCommand,
    IngestStrategyResult,
)
from pattern_intel.domain.patterns.entities import (
    STRATEGY_NAMESPACE,
    BacktestMetrics,
    BacktestRecord,
    IndexEntry,
    StrategyMetadata,
    StrategyRecord,
)
from pattern_intel.domain.patterns.errors import StrategyNotFoundError
from pattern_intel.domain.patterns.feature_encoder import (
    FeatureEncoder,
    select_best_backtest,
)
from pattern_intel.domain.patterns.ports import (
    BacktestRepository,
    StrategyRepository,
    VectorIndexPort,
)

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def build_strategy_metadata(
    strategy: StrategyRecord,
    best: Optional[BacktestRecord],
    tenant_id: str,
) -> StrategyMetadata:
    """Snapshot a strategy and its best backtest as index metadata."""
    return StrategyMetadata(
        strategy_id=strategy.id,
        tenant_id=tenant_id,
        user_id=strategy.user_id,
        name=strategy.name,
        description=strategy.description,
        tier=strategy.tier,
        status=strategy.status,
        symbols=tuple(strategy.symbols),
        backtest_metrics=best.metrics if best is not None else BacktestMetrics(),
        best_backtest_id=best.id if best is not None else None,
        backtest_completed_at=_iso(best.completed_at) if best is not None else None,
        created_at=_iso(strategy.created_at),
        updated_at=_iso(strategy.updated_at),
    )


class IngestStrategyUseCase:
    """Builds a strategy's feature vector and writes it to the index.

    Only completed backtests are considered; the best one by
    sharpe ratio times total return supplies the metric features.
    A strategy without completed backtests is still indexed.
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

    async def execute(self, command: IngestStrategyCommand) -> IngestStrategyResult:
        """Run the strategy ingestion use case.

        Args:
            command: The strategy to ingest and the tenant to write it for.

        Returns:
            The upserted vector id and whether backtest metrics were used.

        Raises:
            StrategyNotFoundError: If the strategy does not exist.
        """
        logger.info("Ingesting strategy=%s", command.strategy_id)

        strategy = await self._strategy_repo.find_by_id(command.strategy_id)
        if strategy is None:
            raise StrategyNotFoundError(command.strategy_id)

        backtests = await self._backtest_repo.find_by_strategy_id(strategy.id)
        best = select_best_backtest(backtests)
        if best is None:
            logger.info(
                "Strategy %s has no completed backtests; indexing without metrics",
                strategy.id,
            )

        tenant_id = command.tenant_id or strategy.user_id
        entry = IndexEntry(
            id=strategy.id,
            vector=self._encoder.encode_strategy_with_best(strategy, best),
            namespace=self._namespace,
            metadata=build_strategy_metadata(strategy, best, tenant_id).to_mapping(),
        )
        await self._vector_index.upsert([entry], self._namespace)

        return IngestStrategyResult(
            vector_id=entry.id,
            tenant_id=tenant_id,
            has_backtest=best is not None,
        )
