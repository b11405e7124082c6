"""
Use case: Index every executed trade of a user.

Input: IngestTradesCommand (user_id, tenant_id)
Output: int (number of trades written)
Side effects: Upserts one batch into the "trades" namespace.
Failure cases: None beyond index errors.
"""

import logging
from typing import Optional

from pattern_intel.application.patterns.dtos import IngestTradesCommand
from pattern_intel.domain.patterns.entities import (
    TRADE_NAMESPACE,
    IndexEntry,
    TradeRecord,
)
from pattern_intel.domain.patterns.feature_encoder import FeatureEncoder
from pattern_intel.domain.patterns.ports import TradeRepository, VectorIndexPort

logger = logging.getLogger(__name__)


class IngestTradesUseCase:
    """Reads a user's trades and writes their vectors in a single batch."""

    def __init__(
        self,
        trade_repo: TradeRepository,
        vector_index: VectorIndexPort,
        encoder: FeatureEncoder,
        namespace: str = TRADE_NAMESPACE,
    ) -> None:
        self._trade_repo = trade_repo
        self._vector_index = vector_index
        self._encoder = encoder
        self._namespace = namespace

    async def execute(self, command: IngestTradesCommand) -> int:
        """Run the trade ingestion use case.

        Returns:
            Number of trades written. Zero when the user has none, in
            which case the index is not called.
        """
        logger.info("Ingesting trades for user=%s", command.user_id)

        trades = await self._trade_repo.find_by_user_id(command.user_id)
        if not trades:
            return 0

        entries = [self._to_entry(trade, command.tenant_id) for trade in trades]
        await self._vector_index.upsert(entries, self._namespace)

        logger.info("Indexed %d trades for user=%s", len(entries), command.user_id)
        return len(entries)

    def _to_entry(self, trade: TradeRecord, tenant_id: str) -> IndexEntry:
        executed_at: Optional[str] = (
            trade.executed_at.isoformat() if trade.executed_at else None
        )
        return IndexEntry(
            id=f"trade-{trade.id}",
            vector=self._encoder.encode_trade(trade),
            namespace=self._namespace,
            metadata={
                "type": "trade",
                "tenantId": tenant_id,
                "tradeId": trade.id,
                "userId": trade.user_id,
                "symbol": trade.symbol,
                "side": trade.side,
                "price": trade.price,
                "quantity": trade.quantity,
                "pnl": trade.pnl,
                "executedAt": executed_at,
            },
        )
