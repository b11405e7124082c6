"""
Use case: Rebuild the pattern index for a tenant.

Input: RebuildTenantCommand (tenant_id, user_id)
Output: RebuildTenantResult
Side effects: Re-ingests every strategy of the user, then all their trades.
Failure cases: Index errors propagate. Strategies deleted between listing
    and ingestion are skipped.
"""

import logging

from pattern_intel.application.patterns.dtos import (
    IngestStrategyCommand,
    IngestTradesCommand,
    RebuildTenantCommand,
    RebuildTenantResult,
)
from pattern_intel.application.patterns.ingest_strategy import IngestStrategyUseCase
from pattern_intel.application.patterns.ingest_trades import IngestTradesUseCase
from pattern_intel.domain.patterns.errors import StrategyNotFoundError
from pattern_intel.domain.patterns.ports import StrategyRepository

logger = logging.getLogger(__name__)


class RebuildTenantUseCase:
    """Sweeps a user's strategies and trades back into the index."""

    def __init__(
        self,
        strategy_repo: StrategyRepository,
        ingest_strategy: IngestStrategyUseCase,
        ingest_trades: IngestTradesUseCase,
    ) -> None:
        self._strategy_repo = strategy_repo
        self._ingest_strategy = ingest_strategy
        self._ingest_trades = ingest_trades

    async def execute(self, command: RebuildTenantCommand) -> RebuildTenantResult:
        logger.info(
            "Rebuilding pattern index for tenant=%s, user=%s",
            command.tenant_id,
            command.user_id,
        )

        strategies = await self._strategy_repo.find_by_user_id(command.user_id)
        ingested = 0
        skipped: list[str] = []
        for strategy in strategies:
            try:
                await self._ingest_strategy.execute(
                    IngestStrategyCommand(
                        strategy_id=strategy.id, tenant_id=command.tenant_id
                    )
                )
            except StrategyNotFoundError:
                logger.warning("Strategy %s disappeared during rebuild", strategy.id)
                skipped.append(strategy.id)
                continue
            ingested += 1

        trades = await self._ingest_trades.execute(
            IngestTradesCommand(user_id=command.user_id, tenant_id=command.tenant_id)
        )

        logger.info(
            "Rebuild finished: %d strategies, %d trades, %d skipped",
            ingested,
            trades,
            len(skipped),
        )
        return RebuildTenantResult(
            strategies_ingested=ingested,
            trades_ingested=trades,
            strategies_skipped=skipped,
        )
