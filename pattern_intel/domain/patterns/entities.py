"""
Domain entities for the patterns bounded context.

Entities and value objects describe strategies, backtests, market regimes
and the records exchanged with the vector index.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

COMPLETED_STATUS = "completed"

STRATEGY_NAMESPACE = "strategies"
REGIME_NAMESPACE = "regimes"
TRADE_NAMESPACE = "trades"


class Trend(Enum):
    """Directional bias of a market regime."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Liquidity(Enum):
    """Liquidity classification of a market regime."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FactorImpact(Enum):
    """Direction in which a performance factor affects a strategy."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class IndexStatus(Enum):
    """Reported health of the vector index."""

    OK = "ok"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class RegimeDescription:
    """A market-condition snapshot used as a query key.

    Every field is optional so that partial criteria can be encoded;
    missing fields encode as neutral values.
    """

    volatility: Optional[float] = None
    trend: Optional[Trend] = None
    liquidity: Optional[Liquidity] = None
    indicators: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class RegimeSnapshot:
    """A dated regime observation for a symbol, stored in the regimes namespace."""

    symbol: str
    timestamp: datetime
    regime: RegimeDescription


@dataclass(frozen=True)
class BacktestMetrics:
    """Performance bundle of a completed backtest. Fractions, not percentages."""

    total_return: Optional[float] = None
    sharpe_ratio: Optional[float] = None
    max_drawdown: Optional[float] = None
    win_rate: Optional[float] = None
    total_trades: Optional[int] = None
    profit_factor: Optional[float] = None

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "BacktestMetrics":
        """Build metrics from a camelCase mapping, ignoring non-numeric values."""
        if not raw:
            return cls()
        total_trades = _as_float(raw.get("totalTrades"))
        return cls(
            total_return=_as_float(raw.get("totalReturn")),
            sharpe_ratio=_as_float(raw.get("sharpeRatio")),
            max_drawdown=_as_float(raw.get("maxDrawdown")),
            win_rate=_as_float(raw.get("winRate")),
            total_trades=int(total_trades) if total_trades is not None else None,
            profit_factor=_as_float(raw.get("profitFactor")),
        )

    def to_mapping(self) -> dict[str, Any]:
        """Return the camelCase mapping stored in index metadata."""
        return {
            "totalReturn": self.total_return,
            "sharpeRatio": self.sharpe_ratio,
            "maxDrawdown": self.max_drawdown,
            "winRate": self.win_rate,
            "totalTrades": self.total_trades,
            "profitFactor": self.profit_factor,
        }


@dataclass(frozen=True)
class StrategyRecord:
    """A trading strategy as read from the data layer."""

    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    config: dict[str, Any] = field(default_factory=dict)
    status: Optional[str] = None
    tier: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def symbols(self) -> list[str]:
        """Symbols listed in the strategy config, or an empty list."""
        symbols = self.config.get("symbols")
        if isinstance(symbols, list):
            return [str(s) for s in symbols]
        return []


@dataclass(frozen=True)
class BacktestRecord:
    """A single backtest run of a strategy."""

    id: str
    strategy_id: str
    status: str
    metrics: BacktestMetrics = field(default_factory=BacktestMetrics)
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED_STATUS


@dataclass(frozen=True)
class TradeRecord:
    """An executed trade belonging to a user."""

    id: str
    user_id: str
    symbol: str
    side: str
    quantity: float
    price: Optional[float] = None
    pnl: Optional[float] = None
    executed_at: Optional[datetime] = None


@dataclass(frozen=True)
class IndexEntry:
    """A keyed vector with metadata, written to one namespace of the index."""

    id: str
    vector: list[float]
    namespace: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchHit:
    """A single ranked result returned by a vector search."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StrategyMetadata:
    """Explicit schema of the metadata stored with a strategy vector."""

    strategy_id: str
    tenant_id: Optional[str] = None
    user_id: Optional[str] = None
    name: str = "Unknown Strategy"
    description: Optional[str] = None
    tier: Optional[str] = None
    status: Optional[str] = None
    symbols: tuple[str, ...] = ()
    backtest_metrics: BacktestMetrics = field(default_factory=BacktestMetrics)
    best_backtest_id: Optional[str] = None
    backtest_completed_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_hit(
        cls, hit: SearchHit, default_name: str = "Unknown Strategy"
    ) -> "StrategyMetadata":
        """Parse hit metadata, falling back to defaults for missing keys."""
        raw = hit.metadata or {}
        symbols = raw.get("symbols")
        return cls(
            strategy_id=str(raw.get("strategyId") or hit.id),
            tenant_id=raw.get("tenantId"),
            user_id=raw.get("userId"),
            name=str(raw.get("name") or default_name),
            description=raw.get("description"),
            tier=raw.get("tier"),
            status=raw.get("status"),
            symbols=tuple(symbols) if isinstance(symbols, list) else (),
            backtest_metrics=BacktestMetrics.from_mapping(raw.get("backtestMetrics")),
            best_backtest_id=raw.get("bestBacktestId"),
            backtest_completed_at=raw.get("backtestCompletedAt"),
            created_at=raw.get("createdAt"),
            updated_at=raw.get("updatedAt"),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "tenantId": self.tenant_id,
            "strategyId": self.strategy_id,
            "userId": self.user_id,
            "name": self.name,
            "description": self.description,
            "tier": self.tier,
            "status": self.status,
            "symbols": list(self.symbols),
            "backtestMetrics": self.backtest_metrics.to_mapping(),
            "bestBacktestId": self.best_backtest_id,
            "backtestCompletedAt": self.backtest_completed_at,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class RegimeMetadata:
    """Explicit schema of the metadata stored with a regime snapshot vector."""

    trend: Optional[str] = None
    volatility: Optional[float] = None
    liquidity: Optional[str] = None
    symbol: Optional[str] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> Optional["RegimeMetadata"]:
        if not raw:
            return None
        trend = raw.get("trend")
        liquidity = raw.get("liquidity")
        return cls(
            trend=str(trend) if trend else None,
            volatility=_as_float(raw.get("volatility")),
            liquidity=str(liquidity) if liquidity else None,
            symbol=raw.get("symbol"),
            timestamp=raw.get("timestamp"),
        )


@dataclass(frozen=True)
class Recommendation:
    """A strategy recommended for the current market regime."""

    strategy_id: str
    name: str
    confidence: float
    explanation: str
    expected_return: Optional[float] = None
    expected_sharpe: Optional[float] = None
    tier: Optional[str] = None


@dataclass(frozen=True)
class SimilarityResult:
    """A strategy found close to a source strategy."""

    strategy_id: str
    name: str
    similarity: float
    key_differences: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PerformanceFactor:
    """A single driver of a strategy's historical performance."""

    factor: str
    impact: FactorImpact
    description: str


@dataclass(frozen=True)
class RegimePerformance:
    """How closely a strategy matches one historical regime."""

    regime: str
    performance: float
    description: str


@dataclass(frozen=True)
class StrategyExplanation:
    """Structured explanation of a strategy's risk and performance profile."""

    strategy_id: str
    name: str
    summary: str
    performance_factors: list[PerformanceFactor] = field(default_factory=list)
    best_regimes: list[RegimePerformance] = field(default_factory=list)
    worst_regimes: list[RegimePerformance] = field(default_factory=list)
    risk_warnings: list[str] = field(default_factory=list)
    similar_strategies: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RegimeStrategyMatch:
    """A strategy meeting a performance bar for a queried regime."""

    strategy_id: str
    name: str
    sharpe_ratio: Optional[float]
    total_return: Optional[float]
    regime_match: float


@dataclass(frozen=True)
class IndexHealth:
    """Result of a vector index liveness probe."""

    status: IndexStatus
    version: Optional[str] = None
    latency_ms: Optional[float] = None

    @property
    def healthy(self) -> bool:
        return self.status is IndexStatus.OK


def _as_float(value: Any) -> Optional[float]:
    """Return value as float when it is a real number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)
