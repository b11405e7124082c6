"""
Dependency injection for the patterns bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the patterns context.

The vector index, its HTTP client and the database engine are built once
per process; use cases are cheap and built per request.
"""

from functools import lru_cache

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from pattern_intel.application.patterns.check_pattern_health import (
    CheckPatternHealthUseCase,
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
from pattern_intel.application.patterns.ingest_trades import IngestTradesUseCase
from pattern_intel.application.patterns.rebuild_tenant import RebuildTenantUseCase
from pattern_intel.application.patterns.recommend_for_regime import (
    RecommendForRegimeUseCase,
)
from pattern_intel.core.config import settings
from pattern_intel.domain.patterns.feature_encoder import FeatureEncoder
from pattern_intel.domain.patterns.ports import (
    BacktestRepository,
    StrategyRepository,
    TradeRepository,
    VectorIndexPort,
)
from pattern_intel.infrastructure.patterns.backtest_repository import (
    BacktestRepositoryAdapter,
)
from pattern_intel.infrastructure.patterns.http_vector_index import (
    HttpVectorIndexAdapter,
)
from pattern_intel.infrastructure.patterns.in_memory_vector_index import (
    InMemoryVectorIndexAdapter,
)
from pattern_intel.infrastructure.patterns.strategy_repository import (
    StrategyRepositoryAdapter,
)
from pattern_intel.infrastructure.patterns.trade_repository import (
    TradeRepositoryAdapter,
)


@lru_cache
def get_db_engine() -> AsyncEngine:
    """Build the async SQLAlchemy engine from application settings."""
    return create_async_engine(settings.database_url, pool_pre_ping=True)


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    """Build the pooled client shared by every vector gateway call."""
    return httpx.AsyncClient(timeout=settings.vector_index_timeout_seconds)


@lru_cache
def get_vector_index() -> VectorIndexPort:
    """Build the configured vector index adapter."""
    if settings.vector_index_backend == "http":
        return HttpVectorIndexAdapter(
            base_url=settings.vector_index_url,
            api_key=settings.vector_index_api_key,
            tenant_id=settings.vector_index_tenant_id,
            timeout=settings.vector_index_timeout_seconds,
            client=get_http_client(),
        )
    return InMemoryVectorIndexAdapter(dimension=settings.embedding_dimension)


def get_encoder() -> FeatureEncoder:
    return FeatureEncoder(settings.embedding_dimension)


def get_strategy_repository() -> StrategyRepository:
    return StrategyRepositoryAdapter(engine=get_db_engine())


def get_backtest_repository() -> BacktestRepository:
    return BacktestRepositoryAdapter(engine=get_db_engine())


def get_trade_repository() -> TradeRepository:
    return TradeRepositoryAdapter(engine=get_db_engine())


def get_ingest_strategy_use_case(
    strategy_repo: StrategyRepository = Depends(get_strategy_repository),
    backtest_repo: BacktestRepository = Depends(get_backtest_repository),
    vector_index: VectorIndexPort = Depends(get_vector_index),
    encoder: FeatureEncoder = Depends(get_encoder),
) -> IngestStrategyUseCase:
    """Build IngestStrategyUseCase with its infrastructure dependencies."""
    return IngestStrategyUseCase(
        strategy_repo=strategy_repo,
        backtest_repo=backtest_repo,
        vector_index=vector_index,
        encoder=encoder,
        namespace=settings.strategy_namespace,
    )


def get_ingest_regime_snapshot_use_case(
    vector_index: VectorIndexPort = Depends(get_vector_index),
    encoder: FeatureEncoder = Depends(get_encoder),
) -> IngestRegimeSnapshotUseCase:
    """Build IngestRegimeSnapshotUseCase with its infrastructure dependencies."""
    return IngestRegimeSnapshotUseCase(
        vector_index=vector_index,
        encoder=encoder,
        namespace=settings.regime_namespace,
    )


def get_ingest_trades_use_case(
    trade_repo: TradeRepository = Depends(get_trade_repository),
    vector_index: VectorIndexPort = Depends(get_vector_index),
    encoder: FeatureEncoder = Depends(get_encoder),
) -> IngestTradesUseCase:
    """Build IngestTradesUseCase with its infrastructure dependencies."""
    return IngestTradesUseCase(
        trade_repo=trade_repo,
        vector_index=vector_index,
        encoder=encoder,
        namespace=settings.trade_namespace,
    )


def get_rebuild_tenant_use_case(
    strategy_repo: StrategyRepository = Depends(get_strategy_repository),
    ingest_strategy: IngestStrategyUseCase = Depends(get_ingest_strategy_use_case),
    ingest_trades: IngestTradesUseCase = Depends(get_ingest_trades_use_case),
) -> RebuildTenantUseCase:
    """Build RebuildTenantUseCase with its infrastructure dependencies."""
    return RebuildTenantUseCase(
        strategy_repo=strategy_repo,
        ingest_strategy=ingest_strategy,
        ingest_trades=ingest_trades,
    )


def get_recommend_for_regime_use_case(
    vector_index: VectorIndexPort = Depends(get_vector_index),
    encoder: FeatureEncoder = Depends(get_encoder),
) -> RecommendForRegimeUseCase:
    """Build RecommendForRegimeUseCase with its infrastructure dependencies."""
    return RecommendForRegimeUseCase(
        vector_index=vector_index,
        encoder=encoder,
        namespace=settings.strategy_namespace,
    )


def get_find_similar_strategies_use_case(
    strategy_repo: StrategyRepository = Depends(get_strategy_repository),
    backtest_repo: BacktestRepository = Depends(get_backtest_repository),
    vector_index: VectorIndexPort = Depends(get_vector_index),
    encoder: FeatureEncoder = Depends(get_encoder),
) -> FindSimilarStrategiesUseCase:
    """Build FindSimilarStrategiesUseCase with its infrastructure dependencies."""
    return FindSimilarStrategiesUseCase(
        strategy_repo=strategy_repo,
        backtest_repo=backtest_repo,
        vector_index=vector_index,
        encoder=encoder,
        namespace=settings.strategy_namespace,
    )


def get_explain_strategy_use_case(
    strategy_repo: StrategyRepository = Depends(get_strategy_repository),
    backtest_repo: BacktestRepository = Depends(get_backtest_repository),
    vector_index: VectorIndexPort = Depends(get_vector_index),
    encoder: FeatureEncoder = Depends(get_encoder),
) -> ExplainStrategyUseCase:
    """Build ExplainStrategyUseCase with its infrastructure dependencies."""
    return ExplainStrategyUseCase(
        strategy_repo=strategy_repo,
        backtest_repo=backtest_repo,
        vector_index=vector_index,
        encoder=encoder,
        thresholds=settings.explanation_thresholds(),
        strategy_namespace=settings.strategy_namespace,
        regime_namespace=settings.regime_namespace,
    )


def get_find_strategies_for_regime_use_case(
    vector_index: VectorIndexPort = Depends(get_vector_index),
    encoder: FeatureEncoder = Depends(get_encoder),
) -> FindStrategiesForRegimeUseCase:
    """Build FindStrategiesForRegimeUseCase with its infrastructure dependencies."""
    return FindStrategiesForRegimeUseCase(
        vector_index=vector_index,
        encoder=encoder,
        namespace=settings.strategy_namespace,
    )


def get_check_pattern_health_use_case(
    vector_index: VectorIndexPort = Depends(get_vector_index),
) -> CheckPatternHealthUseCase:
    """Build CheckPatternHealthUseCase with its infrastructure dependencies."""
    return CheckPatternHealthUseCase(vector_index=vector_index)
