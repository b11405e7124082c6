"""
Feature encoding for strategy pattern intelligence.

Turns market regimes, strategies and trades into fixed-length,
L2-normalized vectors of the configured embedding dimension.

Layout of a regime vector:
    [0]            volatility
    [1]            trend (bullish +1, bearish -1, neutral 0)
    [2]            liquidity (high 1, medium 0.5, low 0)
    [3 .. dim/2)   tanh of named indicator values, in mapping order

Layout of a strategy vector:
    [0 .. dim/4)       +/-0.1 from the bits of a hash of "name description"
    [dim/4 .. dim/4+3] totalReturn, sharpeRatio, maxDrawdown, winRate
    remaining          zero

The text slice is a hash-based pseudo-embedding. `embed_text` is the only
place that knows about it, so a learned text embedding can replace it
without touching callers.

All functions are pure and deterministic.
"""

import math
from typing import Iterable, Optional, Sequence

from pattern_intel.domain.patterns.entities import (
    BacktestRecord,
    Liquidity,
    RegimeDescription,
    StrategyRecord,
    TradeRecord,
    Trend,
)

MIN_DIMENSION = 8
TEXT_SLOT_VALUE = 0.1
HASH_BITS = 32

TREND_ENCODING = {
    Trend.BULLISH: 1.0,
    Trend.BEARISH: -1.0,
    Trend.NEUTRAL: 0.0,
}

LIQUIDITY_ENCODING = {
    Liquidity.HIGH: 1.0,
    Liquidity.MEDIUM: 0.5,
    Liquidity.LOW: 0.0,
}


def text_hash(text: str) -> int:
    """Return a stable non-negative 32-bit polynomial hash of text."""
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value & 0x80000000:
        value -= 1 << HASH_BITS
    return abs(value)


def normalize(vector: Sequence[float]) -> list[float]:
    """Scale a vector to unit L2 norm.

    A zero vector is returned unchanged. The magnitude is taken with
    hypot so large components do not overflow.
    """
    magnitude = math.hypot(*vector)
    if magnitude == 0:
        return list(vector)
    return [v / magnitude for v in vector]


def backtest_score(backtest: BacktestRecord) -> float:
    """Ranking score of a backtest: sharpe ratio times total return."""
    metrics = backtest.metrics
    return (metrics.sharpe_ratio or 0.0) * (metrics.total_return or 0.0)


def select_best_backtest(
    backtests: Iterable[BacktestRecord],
) -> Optional[BacktestRecord]:
    """Return the completed backtest with the highest score.

    On equal scores the first one seen wins. Returns None when no
    backtest has completed.
    """
    best: Optional[BacktestRecord] = None
    for backtest in backtests:
        if not backtest.is_completed:
            continue
        if best is None or backtest_score(backtest) > backtest_score(best):
            best = backtest
    return best


class FeatureEncoder:
    """Builds feature vectors of a fixed embedding dimension."""

    def __init__(self, dimension: int) -> None:
        if dimension < MIN_DIMENSION:
            raise ValueError(
                f"Embedding dimension must be at least {MIN_DIMENSION}, got {dimension}"
            )
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    def encode_regime(self, regime: RegimeDescription) -> list[float]:
        """Encode a (possibly partial) regime description."""
        embedding = [0.0] * self._dimension

        embedding[0] = float(regime.volatility or 0.0)
        embedding[1] = TREND_ENCODING.get(regime.trend, 0.0)
        embedding[2] = LIQUIDITY_ENCODING.get(regime.liquidity, 0.0)

        slot = 3
        for value in regime.indicators.values():
            if slot >= self._dimension / 2:
                break
            embedding[slot] = math.tanh(value)
            slot += 1

        return normalize(embedding)

    def embed_text(self, text: str) -> list[float]:
        """Return the dim/4 text slice for a strategy's name and description."""
        hashed = text_hash(text.lower())
        return [
            TEXT_SLOT_VALUE if (hashed >> (i % HASH_BITS)) & 1 else -TEXT_SLOT_VALUE
            for i in range(self._dimension // 4)
        ]

    def encode_strategy(
        self,
        strategy: StrategyRecord,
        backtests: Iterable[BacktestRecord],
    ) -> list[float]:
        """Encode a strategy and the metrics of its best completed backtest."""
        return self.encode_strategy_with_best(strategy, select_best_backtest(backtests))

    def encode_strategy_with_best(
        self,
        strategy: StrategyRecord,
        best: Optional[BacktestRecord],
    ) -> list[float]:
        """Encode a strategy given an already selected best backtest."""
        embedding = [0.0] * self._dimension

        text = f"{strategy.name} {strategy.description or ''}"
        text_slice = self.embed_text(text)
        embedding[: len(text_slice)] = text_slice

        if best is not None:
            start = self._dimension // 4
            metrics = best.metrics
            embedding[start] = metrics.total_return or 0.0
            embedding[start + 1] = metrics.sharpe_ratio or 0.0
            embedding[start + 2] = metrics.max_drawdown or 0.0
            embedding[start + 3] = metrics.win_rate or 0.0

        return normalize(embedding)

    def encode_trade(self, trade: TradeRecord) -> list[float]:
        """Encode an executed trade by symbol, side, size and outcome."""
        embedding = [0.0] * self._dimension

        symbol_hash = text_hash(trade.symbol or "")
        embedding[0] = (symbol_hash & 0xFF) / 255
        embedding[1] = ((symbol_hash >> 8) & 0xFF) / 255
        embedding[2] = 1.0 if trade.side == "buy" else -1.0
        embedding[3] = math.log10(trade.price or 1.0) / 6
        embedding[4] = math.tanh(trade.quantity or 0.0)
        embedding[5] = math.tanh((trade.pnl or 0.0) / 1000)

        return normalize(embedding)
