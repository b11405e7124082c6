"""
Tests for the SQL repository adapters.

The async engine is mocked; tests check row mapping and query parameters.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from pattern_intel.infrastructure.patterns.backtest_repository import (
    BacktestRepositoryAdapter,
)
from pattern_intel.infrastructure.patterns.row_mapping import (
    load_json,
    parse_uuid,
    to_float,
)
from pattern_intel.infrastructure.patterns.strategy_repository import (
    StrategyRepositoryAdapter,
)
from pattern_intel.infrastructure.patterns.trade_repository import (
    TradeRepositoryAdapter,
)

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)
STRATEGY_ID = "5f0c6a8e-3c1b-4d2e-9f7a-1b2c3d4e5f60"
OTHER_STRATEGY_ID = "7a1d2c3b-4e5f-4a6b-8c7d-9e0f1a2b3c4d"
USER_ID = "0e9d8c7b-6a5f-4e3d-8c2b-1a0f9e8d7c6b"


def _engine_returning(rows: list[dict]):
    """Build a mocked AsyncEngine whose connection yields `rows`."""
    result = MagicMock()
    result.mappings.return_value.first.return_value = rows[0] if rows else None
    result.mappings.return_value.all.return_value = rows

    conn = MagicMock()
    conn.execute = AsyncMock(return_value=result)

    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=conn)
    ctx.__aexit__ = AsyncMock(return_value=False)

    engine = MagicMock()
    engine.connect.return_value = ctx
    return engine, conn


def _strategy_row(**overrides) -> dict:
    row = {
        "id": uuid.UUID(STRATEGY_ID),
        "user_id": uuid.UUID(USER_ID),
        "name": "Momentum",
        "description": "trend following",
        "status": "active",
        "config": '{"symbols": ["BTC-USD", "ETH-USD"], "tier": "pro"}',
        "created_at": CREATED,
        "updated_at": CREATED,
    }
    row.update(overrides)
    return row


class TestRowMapping:
    def test_load_json_accepts_dict_and_text(self) -> None:
        assert load_json({"a": 1}) == {"a": 1}
        assert load_json('{"a": 1}') == {"a": 1}

    def test_load_json_rejects_garbage(self) -> None:
        assert load_json("{not json") == {}
        assert load_json("[1, 2]") == {}
        assert load_json(None) == {}

    def test_to_float_handles_decimal(self) -> None:
        assert to_float(Decimal("1.25")) == 1.25
        assert to_float(None) is None
        assert to_float(True) is None


class TestStrategyRepositoryAdapter:
    @pytest.mark.asyncio
    async def test_find_by_id_maps_row(self) -> None:
        engine, conn = _engine_returning([_strategy_row()])

        strategy = await StrategyRepositoryAdapter(engine).find_by_id(STRATEGY_ID)

        assert strategy.id == STRATEGY_ID
        assert strategy.user_id == USER_ID
        assert strategy.tier == "pro"
        assert strategy.symbols == ["BTC-USD", "ETH-USD"]
        assert conn.execute.await_args.args[1] == {"id": uuid.UUID(STRATEGY_ID)}

    @pytest.mark.asyncio
    async def test_find_by_id_missing_returns_none(self) -> None:
        engine, _ = _engine_returning([])
        assert await StrategyRepositoryAdapter(engine).find_by_id(STRATEGY_ID) is None

    @pytest.mark.asyncio
    async def test_non_uuid_id_is_not_found_without_query(self) -> None:
        engine, conn = _engine_returning([_strategy_row()])

        assert await StrategyRepositoryAdapter(engine).find_by_id("abc") is None
        conn.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_config_without_tier(self) -> None:
        engine, _ = _engine_returning([_strategy_row(config={"symbols": "BTC"})])

        strategy = await StrategyRepositoryAdapter(engine).find_by_id(STRATEGY_ID)

        assert strategy.tier is None
        assert strategy.symbols == []

    @pytest.mark.asyncio
    async def test_find_by_user_id(self) -> None:
        engine, conn = _engine_returning(
            [_strategy_row(), _strategy_row(id=uuid.UUID(OTHER_STRATEGY_ID))]
        )

        strategies = await StrategyRepositoryAdapter(engine).find_by_user_id(USER_ID)

        assert [s.id for s in strategies] == [STRATEGY_ID, OTHER_STRATEGY_ID]
        assert conn.execute.await_args.args[1] == {"user_id": uuid.UUID(USER_ID)}

    @pytest.mark.asyncio
    async def test_non_uuid_user_owns_nothing(self) -> None:
        engine, conn = _engine_returning([_strategy_row()])

        assert await StrategyRepositoryAdapter(engine).find_by_user_id("u-1") == []
        conn.execute.assert_not_awaited()


class TestBacktestRepositoryAdapter:
    @pytest.mark.asyncio
    async def test_maps_metrics_json(self) -> None:
        engine, conn = _engine_returning(
            [
                {
                    "id": "b-1",
                    "strategy_id": STRATEGY_ID,
                    "status": "completed",
                    "metrics": {"sharpeRatio": 2.1, "totalReturn": 0.35, "totalTrades": 150},
                    "created_at": CREATED,
                    "completed_at": CREATED,
                },
                {
                    "id": "b-2",
                    "strategy_id": STRATEGY_ID,
                    "status": "running",
                    "metrics": None,
                    "created_at": CREATED,
                    "completed_at": None,
                },
            ]
        )

        backtests = await BacktestRepositoryAdapter(engine).find_by_strategy_id(STRATEGY_ID)

        assert backtests[0].is_completed is True
        assert backtests[0].metrics.sharpe_ratio == 2.1
        assert backtests[0].metrics.total_trades == 150
        assert backtests[1].is_completed is False
        assert backtests[1].metrics.sharpe_ratio is None
        assert conn.execute.await_args.args[1] == {"strategy_id": uuid.UUID(STRATEGY_ID)}

    @pytest.mark.asyncio
    async def test_non_uuid_strategy_has_no_backtests(self) -> None:
        engine, conn = _engine_returning([])

        assert await BacktestRepositoryAdapter(engine).find_by_strategy_id("abc") == []
        conn.execute.assert_not_awaited()


class TestTradeRepositoryAdapter:
    @pytest.mark.asyncio
    async def test_maps_decimal_columns(self) -> None:
        engine, conn = _engine_returning(
            [
                {
                    "id": 7,
                    "user_id": USER_ID,
                    "symbol": "BTC-USD",
                    "side": "buy",
                    "quantity": Decimal("0.5"),
                    "price": Decimal("42000.00"),
                    "pnl": None,
                    "executed_at": CREATED,
                }
            ]
        )

        trades = await TradeRepositoryAdapter(engine).find_by_user_id(USER_ID)

        assert trades[0].id == "7"
        assert trades[0].quantity == 0.5
        assert trades[0].price == 42000.0
        assert trades[0].pnl is None
        assert conn.execute.await_args.args[1] == {"user_id": uuid.UUID(USER_ID)}

    @pytest.mark.asyncio
    async def test_non_uuid_user_has_no_trades(self) -> None:
        engine, conn = _engine_returning([])

        assert await TradeRepositoryAdapter(engine).find_by_user_id("u-1") == []
        conn.execute.assert_not_awaited()


class TestParseUuid:
    def test_accepts_canonical_and_rejects_other_text(self) -> None:
        assert parse_uuid(STRATEGY_ID) == uuid.UUID(STRATEGY_ID)
        assert parse_uuid("abc") is None
        assert parse_uuid("") is None
