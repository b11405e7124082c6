"""
Shared fakes and fixtures for the pattern intelligence tests.

The fakes implement the repository ports in memory so that use cases
can be exercised without PostgreSQL.
"""

from datetime import datetime, timezone
from typing import Optional

import pytest

from pattern_intel.domain.patterns.entities import (
    BacktestMetrics,
    BacktestRecord,
    StrategyRecord,
    TradeRecord,
)
from pattern_intel.domain.patterns.feature_encoder import FeatureEncoder
from pattern_intel.domain.patterns.ports import (
    BacktestRepository,
    StrategyRepository,
    TradeRepository,
)
from pattern_intel.infrastructure.patterns.in_memory_vector_index import (
    InMemoryVectorIndexAdapter,
)

TEST_DIMENSION = 16


class FakeStrategyRepository(StrategyRepository):
    """Strategies held in a dict. Ids in `vanished` are listed but not found."""

    def __init__(
        self, strategies: list[StrategyRecord], vanished: Optional[set[str]] = None
    ) -> None:
        self._strategies = {s.id: s for s in strategies}
        self._vanished = vanished or set()

    async def find_by_id(self, strategy_id: str) -> Optional[StrategyRecord]:
        if strategy_id in self._vanished:
            return None
        return self._strategies.get(strategy_id)

    async def find_by_user_id(self, user_id: str) -> list[StrategyRecord]:
        return [s for s in self._strategies.values() if s.user_id == user_id]


class FakeBacktestRepository(BacktestRepository):
    def __init__(self, backtests: list[BacktestRecord]) -> None:
        self._backtests = backtests

    async def find_by_strategy_id(self, strategy_id: str) -> list[BacktestRecord]:
        return [b for b in self._backtests if b.strategy_id == strategy_id]


class FakeTradeRepository(TradeRepository):
    def __init__(self, trades: list[TradeRecord]) -> None:
        self._trades = trades

    async def find_by_user_id(self, user_id: str) -> list[TradeRecord]:
        return [t for t in self._trades if t.user_id == user_id]


def make_strategy(
    strategy_id: str = "s-1",
    user_id: str = "u-1",
    name: str = "Momentum Breakout",
    description: Optional[str] = "trend following strategy",
    tier: Optional[str] = None,
) -> StrategyRecord:
    """Build a StrategyRecord with sensible defaults."""
    return StrategyRecord(
        id=strategy_id,
        user_id=user_id,
        name=name,
        description=description,
        config={"symbols": ["BTC-USD"], "tier": tier} if tier else {"symbols": ["BTC-USD"]},
        status="active",
        tier=tier,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
    )


def make_backtest(
    backtest_id: str = "b-1",
    strategy_id: str = "s-1",
    status: str = "completed",
    **metrics,
) -> BacktestRecord:
    """Build a BacktestRecord; metrics use snake_case keyword names."""
    return BacktestRecord(
        id=backtest_id,
        strategy_id=strategy_id,
        status=status,
        metrics=BacktestMetrics(**metrics),
        created_at=datetime(2024, 1, 2, tzinfo=timezone.utc),
        completed_at=datetime(2024, 1, 3, tzinfo=timezone.utc),
    )


def make_trade(trade_id: str = "t-1", user_id: str = "u-1", **overrides) -> TradeRecord:
    fields = {
        "symbol": "BTC-USD",
        "side": "buy",
        "quantity": 0.5,
        "price": 42000.0,
        "pnl": 120.0,
        "executed_at": datetime(2024, 1, 4, 12, 0, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return TradeRecord(id=trade_id, user_id=user_id, **fields)


@pytest.fixture
def encoder() -> FeatureEncoder:
    return FeatureEncoder(TEST_DIMENSION)


@pytest.fixture
def vector_index() -> InMemoryVectorIndexAdapter:
    return InMemoryVectorIndexAdapter(dimension=TEST_DIMENSION)


@pytest.fixture
def strategies() -> list[StrategyRecord]:
    return [
        make_strategy("s-1", name="Momentum Breakout"),
        make_strategy("s-2", name="Mean Reversion", description="range trading"),
        make_strategy("s-3", name="Carry", description="funding rate harvest", tier="pro"),
    ]


@pytest.fixture
def backtests() -> list[BacktestRecord]:
    return [
        make_backtest(
            "b-1",
            "s-1",
            total_return=0.35,
            sharpe_ratio=2.1,
            max_drawdown=0.12,
            win_rate=0.58,
            total_trades=150,
        ),
        make_backtest("b-2", "s-1", status="running", total_return=0.9, sharpe_ratio=3.0),
        make_backtest(
            "b-3",
            "s-2",
            total_return=0.50,
            max_drawdown=0.35,
            win_rate=0.42,
        ),
    ]


@pytest.fixture
def strategy_repo(strategies) -> FakeStrategyRepository:
    return FakeStrategyRepository(strategies)


@pytest.fixture
def backtest_repo(backtests) -> FakeBacktestRepository:
    return FakeBacktestRepository(backtests)


@pytest.fixture
def trade_repo() -> FakeTradeRepository:
    return FakeTradeRepository([make_trade("t-1"), make_trade("t-2", side="sell", pnl=-40.0)])
