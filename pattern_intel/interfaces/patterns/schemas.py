"""
Pydantic schemas for pattern API request/response validation.

These schemas enforce input validation and define the API contract.
No business logic belongs here.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, FiniteFloat

from pattern_intel.core.config import settings

TrendLiteral = Literal["bullish", "bearish", "neutral"]
LiquidityLiteral = Literal["high", "medium", "low"]

ID_MAX_LEN = 128
MAX_LIMIT = 50
MAX_INDICATORS = 64


class RegimeCriteriaSchema(BaseModel):
    """Partial regime criteria; omitted fields encode as neutral."""

    volatility: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    trend: Optional[TrendLiteral] = None
    liquidity: Optional[LiquidityLiteral] = None
    indicators: dict[str, FiniteFloat] = Field(
        default_factory=dict,
        max_length=MAX_INDICATORS,
        description="Named indicator values, squashed with tanh when encoded",
    )


class CurrentRegimeSchema(RegimeCriteriaSchema):
    """A fully specified market regime."""

    volatility: float = Field(..., ge=0, allow_inf_nan=False)
    trend: TrendLiteral
    liquidity: LiquidityLiteral


# ------------------------------------------------------------------
# Recommendations
# ------------------------------------------------------------------


class RecommendRequest(BaseModel):
    """Request schema for regime-driven recommendations."""

    tenant_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    user_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    current_regime: CurrentRegimeSchema
    user_tier: Optional[str] = Field(default=None, max_length=32)
    limit: int = Field(default=settings.default_recommendation_limit, ge=1, le=MAX_LIMIT)


class RecommendationItem(BaseModel):
    strategy_id: str
    name: str
    confidence: float
    expected_return: Optional[float] = None
    expected_sharpe: Optional[float] = None
    explanation: str
    tier: Optional[str] = None


class RecommendResponse(BaseModel):
    recommendations: list[RecommendationItem]


# ------------------------------------------------------------------
# Similar strategies
# ------------------------------------------------------------------


class SimilarStrategiesRequest(BaseModel):
    strategy_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    tenant_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    limit: int = Field(default=settings.default_recommendation_limit, ge=1, le=MAX_LIMIT)


class SimilarStrategyItem(BaseModel):
    strategy_id: str
    name: str
    similarity: float
    key_differences: list[str] = Field(default_factory=list)


class SimilarStrategiesResponse(BaseModel):
    strategies: list[SimilarStrategyItem]


# ------------------------------------------------------------------
# Explanations
# ------------------------------------------------------------------


class ExplainRequest(BaseModel):
    strategy_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    tenant_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)


class PerformanceFactorItem(BaseModel):
    factor: str
    impact: Literal["positive", "negative", "neutral"]
    description: str


class RegimePerformanceItem(BaseModel):
    regime: str
    performance: float
    description: str


class ExplanationResponse(BaseModel):
    """Response schema for a strategy explanation."""

    strategy_id: str
    name: str
    summary: str
    performance_factors: list[PerformanceFactorItem]
    best_regimes: list[RegimePerformanceItem]
    worst_regimes: list[RegimePerformanceItem]
    risk_warnings: list[str]
    similar_strategies: list[str]


# ------------------------------------------------------------------
# Regime search
# ------------------------------------------------------------------


class MinPerformanceSchema(BaseModel):
    sharpe_ratio: Optional[FiniteFloat] = None
    total_return: Optional[FiniteFloat] = None


class RegimeSearchRequest(BaseModel):
    """Request schema for matching strategies to regime criteria."""

    tenant_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    regime: RegimeCriteriaSchema
    min_performance: Optional[MinPerformanceSchema] = None
    limit: int = Field(default=settings.default_search_limit, ge=1, le=MAX_LIMIT)


class StrategyPerformanceItem(BaseModel):
    sharpe_ratio: Optional[float] = None
    total_return: Optional[float] = None


class RegimeMatchItem(BaseModel):
    strategy_id: str
    name: str
    performance: StrategyPerformanceItem
    regime_match: float


class RegimeSearchResponse(BaseModel):
    strategies: list[RegimeMatchItem]


# ------------------------------------------------------------------
# Ingestion
# ------------------------------------------------------------------


class IngestStrategyRequest(BaseModel):
    """Optional body for strategy ingestion; tenant defaults to the owner."""

    tenant_id: Optional[str] = Field(default=None, min_length=1, max_length=ID_MAX_LEN)


class IngestStrategyResponse(BaseModel):
    vector_id: str
    tenant_id: str
    has_backtest: bool


class RegimeSnapshotRequest(BaseModel):
    """Request schema for storing a regime snapshot."""

    tenant_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    symbol: str = Field(..., min_length=1, max_length=50)
    timestamp: datetime
    regime: CurrentRegimeSchema


class RegimeSnapshotResponse(BaseModel):
    vector_id: str


class RebuildRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)


class RebuildResponse(BaseModel):
    strategies_ingested: int
    trades_ingested: int
    strategies_skipped: list[str]


# ------------------------------------------------------------------
# Health / errors
# ------------------------------------------------------------------


class PatternHealthResponse(BaseModel):
    healthy: bool
    status: str
    version: Optional[str] = None
    latency_ms: Optional[float] = None
    checked_at: datetime


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    detail: str | None = None
