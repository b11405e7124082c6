"""
Data Transfer Objects for the patterns application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from pattern_intel.domain.patterns.entities import (
    RegimeDescription,
    RegimeSnapshot,
    RegimeStrategyMatch,
)


@dataclass(frozen=True)
class IngestStrategyCommand:
    """Input DTO for (re-)indexing a strategy.

    Attributes:
        strategy_id: ID of the strategy to ingest.
        tenant_id: Tenant owning the vector. Defaults to the strategy owner.
    """

    strategy_id: str
    tenant_id: Optional[str] = None


@dataclass(frozen=True)
class IngestStrategyResult:
    """Output DTO for a strategy ingestion.

    Attributes:
        vector_id: ID of the upserted index entry.
        tenant_id: Tenant the entry was written for.
        has_backtest: Whether a completed backtest contributed metrics.
    """

    vector_id: str
    tenant_id: str
    has_backtest: bool


@dataclass(frozen=True)
class IngestRegimeSnapshotCommand:
    """Input DTO for storing a market regime snapshot."""

    tenant_id: str
    snapshot: RegimeSnapshot


@dataclass(frozen=True)
class IngestTradesCommand:
    """Input DTO for indexing a user's executed trades."""

    user_id: str
    tenant_id: str


@dataclass(frozen=True)
class RebuildTenantCommand:
    """Input DTO for re-indexing every strategy and trade of a user."""

    tenant_id: str
    user_id: str


@dataclass(frozen=True)
class RebuildTenantResult:
    """Output DTO for a tenant rebuild.

    Attributes:
        strategies_ingested: Number of strategies written to the index.
        trades_ingested: Number of trades written to the index.
        strategies_skipped: IDs of strategies that vanished mid-rebuild.
    """

    strategies_ingested: int
    trades_ingested: int
    strategies_skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RecommendForRegimeQuery:
    """Input DTO for regime-driven strategy recommendations.

    Attributes:
        tenant_id: Tenant whose strategies are searched.
        user_id: Requesting user.
        current_regime: The market regime to match.
        user_tier: Subscription tier of the user; "free" hides "pro" strategies.
        limit: Maximum number of recommendations.
    """

    tenant_id: str
    user_id: str
    current_regime: RegimeDescription
    user_tier: Optional[str] = None
    limit: int = 5


@dataclass(frozen=True)
class FindSimilarStrategiesQuery:
    """Input DTO for nearest-neighbour strategy lookup."""

    strategy_id: str
    tenant_id: str
    limit: int = 5


@dataclass(frozen=True)
class ExplainStrategyQuery:
    """Input DTO for a strategy explanation."""

    strategy_id: str
    tenant_id: str


@dataclass(frozen=True)
class MinPerformance:
    """Optional performance bar; None means no constraint on that metric."""

    sharpe_ratio: Optional[float] = None
    total_return: Optional[float] = None


@dataclass(frozen=True)
class FindStrategiesForRegimeQuery:
    """Input DTO for matching strategies to (partial) regime criteria."""

    tenant_id: str
    regime: RegimeDescription
    min_performance: Optional[MinPerformance] = None
    limit: int = 10


@dataclass(frozen=True)
class RegimeSearchResult:
    """Output DTO wrapping the strategies that match a regime."""

    strategies: list[RegimeStrategyMatch] = field(default_factory=list)


@dataclass(frozen=True)
class PatternHealthResult:
    """Output DTO describing the pattern store health.

    Attributes:
        healthy: True only when the index reports "ok".
        status: Raw index status (ok/degraded/unhealthy).
        version: Index version string, when reported.
        latency_ms: Probe round-trip time in milliseconds.
        checked_at: When the probe ran (UTC).
    """

    healthy: bool
    status: str
    checked_at: datetime
    version: Optional[str] = None
    latency_ms: Optional[float] = None
