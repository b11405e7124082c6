"""
FastAPI router for the patterns bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Request

from pattern_intel.application.patterns.check_pattern_health import (
    CheckPatternHealthUseCase,
)
from pattern_intel.application.patterns.dtos import (
    ExplainStrategyQuery,
    FindSimilarStrategiesQuery,
    FindStrategiesForRegimeQuery,
    IngestRegimeSnapshotCommand,
    IngestStrategyCommand,
    MinPerformance,
    RebuildTenantCommand,
    RecommendForRegimeQuery,
)
from pattern_intel.application.patterns.explain_strategy import ExplainStrategyUseCase
from pattern_intel.application.patterns.find_similar_strategies import (
    FindSimilarStrategiesUseCase,
)
from pattern_intel.application.patterns.find_strategies_for_regime import (
    FindStrategiesForRegimeUseCase,
)
from pattern_intel.application.patterns.ingest_regime_snapshot import (
    IngestRegimeSnapshotUseCase,
)
from pattern_intel.application.patterns.ingest_strategy import IngestStrategyUseCase
from pattern_intel.application.patterns.rebuild_tenant import RebuildTenantUseCase
from pattern_intel.application.patterns.recommend_for_regime import (
    RecommendForRegimeUseCase,
)
from pattern_intel.core.config import settings
from pattern_intel.domain.patterns.entities import (
    Liquidity,
    RegimeDescription,
    RegimeSnapshot,
    Trend,
)
from pattern_intel.interfaces.patterns.dependencies import (
    get_check_pattern_health_use_case,
    get_explain_strategy_use_case,
    get_find_similar_strategies_use_case,
    get_find_strategies_for_regime_use_case,
    get_ingest_regime_snapshot_use_case,
    get_ingest_strategy_use_case,
    get_rebuild_tenant_use_case,
    get_recommend_for_regime_use_case,
)
from pattern_intel.interfaces.patterns.schemas import (
    ErrorResponse,
    ExplainRequest,
    ExplanationResponse,
    IngestStrategyRequest,
    IngestStrategyResponse,
    PatternHealthResponse,
    PerformanceFactorItem,
    RebuildRequest,
    RebuildResponse,
    RecommendationItem,
    RecommendRequest,
    RecommendResponse,
    RegimeCriteriaSchema,
    RegimeMatchItem,
    RegimePerformanceItem,
    RegimeSearchRequest,
    RegimeSearchResponse,
    RegimeSnapshotRequest,
    RegimeSnapshotResponse,
    SimilarStrategiesRequest,
    SimilarStrategiesResponse,
    SimilarStrategyItem,
    StrategyPerformanceItem,
)
from pattern_intel.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/patterns", tags=["patterns"])


def _to_regime(schema: RegimeCriteriaSchema) -> RegimeDescription:
    """Convert validated regime input into the domain value object."""
    return RegimeDescription(
        volatility=schema.volatility,
        trend=Trend(schema.trend) if schema.trend else None,
        liquidity=Liquidity(schema.liquidity) if schema.liquidity else None,
        indicators=dict(schema.indicators),
    )


@router.get(
    "/health",
    response_model=PatternHealthResponse,
    summary="Pattern store health",
    description="Probe the vector index backing the pattern engine.",
)
async def pattern_health(
    use_case: CheckPatternHealthUseCase = Depends(get_check_pattern_health_use_case),
) -> PatternHealthResponse:
    """Report whether the vector index is reachable."""
    result = await use_case.execute()
    return PatternHealthResponse(
        healthy=result.healthy,
        status=result.status,
        version=result.version,
        latency_ms=result.latency_ms,
        checked_at=result.checked_at,
    )


@router.post(
    "/strategies/recommend",
    response_model=RecommendResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Recommend strategies for a regime",
    description="Rank the tenant's strategies against the current market regime.",
)
async def recommend_strategies(
    request: RecommendRequest,
    use_case: RecommendForRegimeUseCase = Depends(get_recommend_for_regime_use_case),
) -> RecommendResponse:
    """Recommend strategies for the current market regime."""
    query = RecommendForRegimeQuery(
        tenant_id=request.tenant_id,
        user_id=request.user_id,
        current_regime=_to_regime(request.current_regime),
        user_tier=request.user_tier,
        limit=request.limit,
    )
    results = await use_case.execute(query)
    return RecommendResponse(
        recommendations=[
            RecommendationItem(
                strategy_id=r.strategy_id,
                name=r.name,
                confidence=r.confidence,
                expected_return=r.expected_return,
                expected_sharpe=r.expected_sharpe,
                explanation=r.explanation,
                tier=r.tier,
            )
            for r in results
        ]
    )


@router.post(
    "/strategies/similar",
    response_model=SimilarStrategiesResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Find similar strategies",
)
async def similar_strategies(
    request: SimilarStrategiesRequest,
    use_case: FindSimilarStrategiesUseCase = Depends(
        get_find_similar_strategies_use_case
    ),
) -> SimilarStrategiesResponse:
    """Find the nearest neighbours of a strategy."""
    results = await use_case.execute(
        FindSimilarStrategiesQuery(
            strategy_id=request.strategy_id,
            tenant_id=request.tenant_id,
            limit=request.limit,
        )
    )
    return SimilarStrategiesResponse(
        strategies=[
            SimilarStrategyItem(
                strategy_id=r.strategy_id,
                name=r.name,
                similarity=r.similarity,
                key_differences=list(r.key_differences),
            )
            for r in results
        ]
    )


@router.post(
    "/strategies/explain",
    response_model=ExplanationResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Explain a strategy",
    description="Summarize performance drivers, regime fit and risk warnings.",
)
async def explain_strategy(
    request: ExplainRequest,
    use_case: ExplainStrategyUseCase = Depends(get_explain_strategy_use_case),
) -> ExplanationResponse:
    """Explain a strategy's risk and performance profile."""
    result = await use_case.execute(
        ExplainStrategyQuery(strategy_id=request.strategy_id, tenant_id=request.tenant_id)
    )
    return ExplanationResponse(
        strategy_id=result.strategy_id,
        name=result.name,
        summary=result.summary,
        performance_factors=[
            PerformanceFactorItem(
                factor=f.factor, impact=f.impact.value, description=f.description
            )
            for f in result.performance_factors
        ],
        best_regimes=[
            RegimePerformanceItem(
                regime=r.regime, performance=r.performance, description=r.description
            )
            for r in result.best_regimes
        ],
        worst_regimes=[
            RegimePerformanceItem(
                regime=r.regime, performance=r.performance, description=r.description
            )
            for r in result.worst_regimes
        ],
        risk_warnings=list(result.risk_warnings),
        similar_strategies=list(result.similar_strategies),
    )


@router.post(
    "/regimes/strategies",
    response_model=RegimeSearchResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Find strategies for a regime",
    description="Match strategies to regime criteria above a minimum performance.",
)
async def strategies_for_regime(
    request: RegimeSearchRequest,
    use_case: FindStrategiesForRegimeUseCase = Depends(
        get_find_strategies_for_regime_use_case
    ),
) -> RegimeSearchResponse:
    """Find strategies meeting a performance bar for a regime."""
    minimum = None
    if request.min_performance is not None:
        minimum = MinPerformance(
            sharpe_ratio=request.min_performance.sharpe_ratio,
            total_return=request.min_performance.total_return,
        )
    result = await use_case.execute(
        FindStrategiesForRegimeQuery(
            tenant_id=request.tenant_id,
            regime=_to_regime(request.regime),
            min_performance=minimum,
            limit=request.limit,
        )
    )
    return RegimeSearchResponse(
        strategies=[
            RegimeMatchItem(
                strategy_id=m.strategy_id,
                name=m.name,
                performance=StrategyPerformanceItem(
                    sharpe_ratio=m.sharpe_ratio, total_return=m.total_return
                ),
                regime_match=m.regime_match,
            )
            for m in result.strategies
        ]
    )


@router.post(
    "/strategies/{strategy_id}/ingest",
    response_model=IngestStrategyResponse,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Index a strategy",
    description="Rebuild a strategy's vector from its best completed backtest.",
)
@limiter.limit(settings.rate_limit_heavy)
async def ingest_strategy(
    request: Request,
    strategy_id: str,
    body: IngestStrategyRequest | None = None,
    use_case: IngestStrategyUseCase = Depends(get_ingest_strategy_use_case),
) -> IngestStrategyResponse:
    """Write a strategy's current vector to the index."""
    result = await use_case.execute(
        IngestStrategyCommand(
            strategy_id=strategy_id,
            tenant_id=body.tenant_id if body is not None else None,
        )
    )
    return IngestStrategyResponse(
        vector_id=result.vector_id,
        tenant_id=result.tenant_id,
        has_backtest=result.has_backtest,
    )


@router.post(
    "/regimes",
    response_model=RegimeSnapshotResponse,
    responses={422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Store a regime snapshot",
)
@limiter.limit(settings.rate_limit_heavy)
async def ingest_regime_snapshot(
    request: Request,
    body: RegimeSnapshotRequest,
    use_case: IngestRegimeSnapshotUseCase = Depends(
        get_ingest_regime_snapshot_use_case
    ),
) -> RegimeSnapshotResponse:
    """Store a dated regime observation for later explanations."""
    vector_id = await use_case.execute(
        IngestRegimeSnapshotCommand(
            tenant_id=body.tenant_id,
            snapshot=RegimeSnapshot(
                symbol=body.symbol,
                timestamp=body.timestamp,
                regime=_to_regime(body.regime),
            ),
        )
    )
    return RegimeSnapshotResponse(vector_id=vector_id)


@router.post(
    "/tenants/{tenant_id}/rebuild",
    response_model=RebuildResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Rebuild a tenant's pattern index",
)
@limiter.limit(settings.rate_limit_heavy)
async def rebuild_tenant(
    request: Request,
    tenant_id: str,
    body: RebuildRequest,
    use_case: RebuildTenantUseCase = Depends(get_rebuild_tenant_use_case),
) -> RebuildResponse:
    """Re-index every strategy and trade of a user."""
    result = await use_case.execute(
        RebuildTenantCommand(tenant_id=tenant_id, user_id=body.user_id)
    )
    return RebuildResponse(
        strategies_ingested=result.strategies_ingested,
        trades_ingested=result.trades_ingested,
        strategies_skipped=list(result.strategies_skipped),
    )
