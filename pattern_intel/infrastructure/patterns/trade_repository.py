"""
Adapter: Trade repository.

Implements TradeRepository port.
Reads executed trades from the PostgreSQL trades table. Read-only.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from pattern_intel.domain.patterns.entities import TradeRecord
from pattern_intel.domain.patterns.ports import TradeRepository
from pattern_intel.infrastructure.patterns.row_mapping import parse_uuid, to_float

logger = logging.getLogger(__name__)


class TradeRepositoryAdapter(TradeRepository):
    """Reads a user's trade history."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def find_by_user_id(self, user_id: str) -> list[TradeRecord]:
        key = parse_uuid(user_id)
        if key is None:
            return []

        query = text(
            """
            SELECT id, user_id, symbol, side, quantity, price, pnl, executed_at
            FROM trades
            WHERE user_id = :user_id
            ORDER BY executed_at ASC
            """
        )

        async with self._engine.connect() as conn:
            result = await conn.execute(query, {"user_id": key})
            rows = result.mappings().all()

        trades = [
            TradeRecord(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                symbol=row["symbol"],
                side=row["side"],
                quantity=to_float(row["quantity"]) or 0.0,
                price=to_float(row["price"]),
                pnl=to_float(row["pnl"]),
                executed_at=row["executed_at"],
            )
            for row in rows
        ]
        logger.info("Fetched %d trades for user=%s", len(trades), user_id)
        return trades
