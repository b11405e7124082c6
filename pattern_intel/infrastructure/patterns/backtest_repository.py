"""
Adapter: Backtest repository.

Implements BacktestRepository port.
Reads backtest runs and their metrics JSON from PostgreSQL. Read-only.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from pattern_intel.domain.patterns.entities import BacktestMetrics, BacktestRecord
from pattern_intel.domain.patterns.ports import BacktestRepository
from pattern_intel.infrastructure.patterns.row_mapping import load_json, parse_uuid

logger = logging.getLogger(__name__)


class BacktestRepositoryAdapter(BacktestRepository):
    """Reads backtests from the backtests table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def find_by_strategy_id(self, strategy_id: str) -> list[BacktestRecord]:
        """Return all backtests of a strategy, oldest first.

        Args:
            strategy_id: Strategy whose backtests are requested.

        Returns:
            Backtests of every status; callers filter on completion.
        """
        key = parse_uuid(strategy_id)
        if key is None:
            return []

        query = text(
            """
            SELECT id, strategy_id, status, metrics, created_at, completed_at
            FROM backtests
            WHERE strategy_id = :strategy_id
            ORDER BY created_at ASC
            """
        )

        async with self._engine.connect() as conn:
            result = await conn.execute(query, {"strategy_id": key})
            rows = result.mappings().all()

        return [
            BacktestRecord(
                id=str(row["id"]),
                strategy_id=str(row["strategy_id"]),
                status=row["status"],
                metrics=BacktestMetrics.from_mapping(load_json(row["metrics"])),
                created_at=row["created_at"],
                completed_at=row["completed_at"],
            )
            for row in rows
        ]
