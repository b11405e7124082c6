"""
Use case: Store a market regime snapshot in the vector index.

Input: IngestRegimeSnapshotCommand (tenant_id, snapshot)
Output: str (the vector id)
Side effects: Upserts one entry in the "regimes" namespace.
Failure cases: None beyond index errors.
"""

import logging
from datetime import datetime, timezone

from pattern_intel.application.patterns.dtos import IngestRegimeSnapshotCommand
from pattern_intel.domain.patterns.entities import (
    REGIME_NAMESPACE,
    IndexEntry,
    RegimeSnapshot,
)
from pattern_intel.domain.patterns.feature_encoder import FeatureEncoder
from pattern_intel.domain.patterns.ports import VectorIndexPort

logger = logging.getLogger(__name__)


def as_utc(timestamp: datetime) -> datetime:
    """Return timestamp with naive values read as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def regime_vector_id(snapshot: RegimeSnapshot) -> str:
    """Return the index id of a snapshot: regime-<symbol>-<epoch ms>.

    Naive timestamps are taken as UTC so the id does not depend on the
    host timezone.
    """
    epoch_ms = int(as_utc(snapshot.timestamp).timestamp() * 1000)
    return f"regime-{snapshot.symbol}-{epoch_ms}"


class IngestRegimeSnapshotUseCase:
    """Encodes a regime snapshot and writes it to the regimes namespace.

    Snapshots stored here are what strategy explanations compare
    against when ranking best and worst regimes.
    """

    def __init__(
        self,
        vector_index: VectorIndexPort,
        encoder: FeatureEncoder,
        namespace: str = REGIME_NAMESPACE,
    ) -> None:
        self._vector_index = vector_index
        self._encoder = encoder
        self._namespace = namespace

    async def execute(self, command: IngestRegimeSnapshotCommand) -> str:
        snapshot = command.snapshot
        regime = snapshot.regime
        logger.info(
            "Ingesting regime snapshot symbol=%s, tenant=%s",
            snapshot.symbol,
            command.tenant_id,
        )

        entry = IndexEntry(
            id=regime_vector_id(snapshot),
            vector=self._encoder.encode_regime(regime),
            namespace=self._namespace,
            metadata={
                "type": "regime",
                "tenantId": command.tenant_id,
                "symbol": snapshot.symbol,
                "timestamp": as_utc(snapshot.timestamp).isoformat(),
                "volatility": regime.volatility,
                "trend": regime.trend.value if regime.trend else None,
                "liquidity": regime.liquidity.value if regime.liquidity else None,
                "indicators": dict(regime.indicators),
            },
        )
        await self._vector_index.upsert([entry], self._namespace)
        return entry.id
