"""
Port interfaces (ABCs) for the patterns bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pattern_intel.domain.patterns.entities import (
    BacktestRecord,
    IndexEntry,
    IndexHealth,
    SearchHit,
    StrategyRecord,
    TradeRecord,
)


class VectorIndexPort(ABC):
    """Port for a keyed store of fixed-dimension vectors with metadata.

    Vectors are partitioned by namespace ("strategies", "regimes", "trades")
    and searched by nearest neighbour. Retry policy, if any, belongs to
    the adapter.
    """

    @abstractmethod
    async def upsert(self, entries: list[IndexEntry], namespace: str) -> None:
        """Insert or replace entries by id within a namespace."""
        raise NotImplementedError

    @abstractmethod
    async def search(
        self,
        namespace: str,
        vector: list[float],
        top_k: int,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[SearchHit]:
        """Return up to top_k hits ordered by descending score.

        Args:
            namespace: Partition to search.
            vector: Query vector of the configured dimension.
            top_k: Maximum number of hits.
            filter: Metadata equality constraints, e.g. {"tenantId": "t-1"}.

        Returns:
            Ranked hits, best first. Empty when nothing matches.
        """
        raise NotImplementedError

    @abstractmethod
    async def ping(self) -> IndexHealth:
        """Probe the index and report its status."""
        raise NotImplementedError


class StrategyRepository(ABC):
    """Port for reading strategies from the data layer."""

    @abstractmethod
    async def find_by_id(self, strategy_id: str) -> Optional[StrategyRecord]:
        """Return a strategy by its ID, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> list[StrategyRecord]:
        """Return every strategy owned by a user."""
        raise NotImplementedError


class BacktestRepository(ABC):
    """Port for reading backtest runs from the data layer."""

    @abstractmethod
    async def find_by_strategy_id(self, strategy_id: str) -> list[BacktestRecord]:
        """Return all backtests of a strategy, in creation order."""
        raise NotImplementedError


class TradeRepository(ABC):
    """Port for reading executed trades from the data layer."""

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> list[TradeRecord]:
        """Return all trades executed by a user."""
        raise NotImplementedError
