"""
Tests for the patterns domain layer.

Tests feature encoding, best-backtest selection and the narrative rules
in isolation. No index, database or framework dependencies.
"""

import math

import pytest

from conftest import make_backtest, make_strategy, make_trade
from pattern_intel.domain.patterns.entities import (
    BacktestMetrics,
    FactorImpact,
    Liquidity,
    RegimeDescription,
    RegimeMetadata,
    SearchHit,
    StrategyMetadata,
    Trend,
)
from pattern_intel.domain.patterns.errors import (
    PatternDomainError,
    StrategyNotFoundError,
    VectorIndexUnavailableError,
)
from pattern_intel.domain.patterns.feature_encoder import (
    FeatureEncoder,
    normalize,
    select_best_backtest,
    text_hash,
)
from pattern_intel.domain.patterns.narratives import (
    ExplanationThresholds,
    describe_regime,
    performance_factors,
    recommendation_explanation,
    risk_warnings,
    split_regimes,
    strategy_summary,
)

DIM = 16


def _norm(vector: list[float]) -> float:
    return math.sqrt(sum(v * v for v in vector))


def _scenario_a():
    return make_backtest(
        total_return=0.35,
        sharpe_ratio=2.1,
        max_drawdown=0.12,
        win_rate=0.58,
        total_trades=150,
    )


def _scenario_b():
    return make_backtest(total_return=0.50, max_drawdown=0.35, win_rate=0.42)


# ══════════════════════════════════════════════════════════════════════
# Hashing / normalization
# ══════════════════════════════════════════════════════════════════════


class TestTextHash:
    """Tests for the 32-bit polynomial text hash."""

    def test_known_value(self) -> None:
        assert text_hash("hello") == 99162322

    def test_empty_string_is_zero(self) -> None:
        assert text_hash("") == 0

    def test_overflowing_input_stays_in_range(self) -> None:
        value = text_hash("a much longer strategy description " * 20)
        assert 0 <= value <= 2**31

    def test_deterministic(self) -> None:
        assert text_hash("Momentum") == text_hash("Momentum")


class TestNormalize:
    def test_unit_norm(self) -> None:
        assert _norm(normalize([3.0, 4.0])) == pytest.approx(1.0)

    def test_zero_vector_returned_unchanged(self) -> None:
        assert normalize([0.0, 0.0, 0.0]) == [0.0, 0.0, 0.0]

    def test_huge_components_do_not_overflow(self) -> None:
        vector = normalize([1e200, 1e200])
        assert vector == pytest.approx([math.sqrt(0.5), math.sqrt(0.5)])


# ══════════════════════════════════════════════════════════════════════
# FeatureEncoder
# ══════════════════════════════════════════════════════════════════════


class TestFeatureEncoder:
    """Test suite for vector construction."""

    def test_rejects_small_dimension(self) -> None:
        with pytest.raises(ValueError):
            FeatureEncoder(4)

    def test_regime_vector_is_unit_length(self) -> None:
        encoder = FeatureEncoder(DIM)
        vector = encoder.encode_regime(
            RegimeDescription(volatility=0.02, trend=Trend.BULLISH, liquidity=Liquidity.HIGH)
        )
        assert len(vector) == DIM
        assert _norm(vector) == pytest.approx(1.0)

    def test_regime_fields_land_in_fixed_slots(self) -> None:
        encoder = FeatureEncoder(DIM)
        vector = encoder.encode_regime(
            RegimeDescription(volatility=0.0, trend=Trend.BEARISH, liquidity=Liquidity.LOW)
        )
        assert vector[1] == pytest.approx(-1.0)
        assert vector[2] == 0.0

    def test_huge_volatility_regime_is_unit_length(self) -> None:
        vector = FeatureEncoder(DIM).encode_regime(
            RegimeDescription(volatility=1e200, trend=Trend.BULLISH, liquidity=Liquidity.HIGH)
        )
        assert _norm(vector) == pytest.approx(1.0)
        assert vector[0] == pytest.approx(1.0)
        assert vector[1] > 0.0

    def test_empty_regime_encodes_as_zero_vector(self) -> None:
        """Partial criteria with nothing set must not divide by zero."""
        vector = FeatureEncoder(DIM).encode_regime(RegimeDescription())
        assert vector == [0.0] * DIM

    def test_indicators_limited_to_first_half(self) -> None:
        encoder = FeatureEncoder(DIM)
        indicators = {f"ind{i}": 1.0 for i in range(10)}
        vector = encoder.encode_regime(RegimeDescription(indicators=indicators))
        assert all(v != 0.0 for v in vector[3 : DIM // 2])
        assert all(v == 0.0 for v in vector[DIM // 2 :])

    def test_strategy_vector_is_deterministic(self) -> None:
        encoder = FeatureEncoder(DIM)
        strategy = make_strategy()
        backtests = [_scenario_a()]
        assert encoder.encode_strategy(strategy, backtests) == encoder.encode_strategy(
            strategy, backtests
        )

    def test_strategy_vector_is_unit_length(self) -> None:
        vector = FeatureEncoder(DIM).encode_strategy(make_strategy(), [_scenario_a()])
        assert len(vector) == DIM
        assert _norm(vector) == pytest.approx(1.0)

    def test_strategy_without_backtest_has_no_metric_features(self) -> None:
        vector = FeatureEncoder(DIM).encode_strategy(make_strategy(), [])
        assert vector[DIM // 4 : DIM // 4 + 4] == [0.0, 0.0, 0.0, 0.0]
        assert _norm(vector) == pytest.approx(1.0)

    def test_running_backtest_is_ignored(self) -> None:
        encoder = FeatureEncoder(DIM)
        strategy = make_strategy()
        running = make_backtest(status="running", total_return=0.9, sharpe_ratio=3.0)
        assert encoder.encode_strategy(strategy, [running]) == encoder.encode_strategy(
            strategy, []
        )

    def test_text_slice_is_case_insensitive(self) -> None:
        encoder = FeatureEncoder(DIM)
        assert encoder.embed_text("Momentum") == encoder.embed_text("MOMENTUM")
        assert len(encoder.embed_text("Momentum")) == DIM // 4

    def test_trade_vector_encodes_side(self) -> None:
        encoder = FeatureEncoder(DIM)
        buy = encoder.encode_trade(make_trade(side="buy"))
        sell = encoder.encode_trade(make_trade(side="sell"))
        assert buy[2] > 0
        assert sell[2] < 0
        assert _norm(buy) == pytest.approx(1.0)


class TestSelectBestBacktest:
    def test_highest_score_wins(self) -> None:
        low = make_backtest("b-low", total_return=0.1, sharpe_ratio=1.0)
        high = make_backtest("b-high", total_return=0.3, sharpe_ratio=1.5)
        assert select_best_backtest([low, high]).id == "b-high"

    def test_tie_keeps_first_seen(self) -> None:
        first = make_backtest("b-first", total_return=0.2, sharpe_ratio=1.0)
        second = make_backtest("b-second", total_return=0.1, sharpe_ratio=2.0)
        assert select_best_backtest([first, second]).id == "b-first"

    def test_only_completed_considered(self) -> None:
        failed = make_backtest("b-failed", status="failed", total_return=5.0, sharpe_ratio=5.0)
        done = make_backtest("b-done", total_return=0.1, sharpe_ratio=0.5)
        assert select_best_backtest([failed, done]).id == "b-done"

    def test_none_when_nothing_completed(self) -> None:
        assert select_best_backtest([make_backtest(status="running")]) is None


# ══════════════════════════════════════════════════════════════════════
# Narratives
# ══════════════════════════════════════════════════════════════════════


class TestPerformanceFactors:
    def test_strong_strategy_gets_positive_factors(self) -> None:
        factors = performance_factors(_scenario_a())
        assert [(f.factor, f.impact) for f in factors] == [
            ("Risk-Adjusted Returns", FactorImpact.POSITIVE),
            ("Win Rate", FactorImpact.POSITIVE),
        ]
        assert "2.10" in factors[0].description

    def test_low_win_rate_is_negative(self) -> None:
        factors = performance_factors(_scenario_b())
        assert [(f.factor, f.impact) for f in factors] == [
            ("Win Rate", FactorImpact.NEGATIVE)
        ]

    def test_no_backtest_no_factors(self) -> None:
        assert performance_factors(None) == []

    def test_thresholds_are_configurable(self) -> None:
        strict = ExplanationThresholds(strong_sharpe=3.0, high_win_rate=0.9)
        assert performance_factors(_scenario_a(), strict) == []


class TestRiskWarnings:
    def test_healthy_strategy_has_no_warnings(self) -> None:
        assert risk_warnings(_scenario_a()) == []

    def test_drawdown_and_win_rate_warnings(self) -> None:
        warnings = risk_warnings(_scenario_b())
        assert warnings[0].startswith("High maximum drawdown of 35.0%")
        assert "Low win rate may require strict risk management." in warnings
        assert len(warnings) == 2

    def test_small_sample_warning(self) -> None:
        warnings = risk_warnings(make_backtest(total_trades=12))
        assert warnings == [
            "Limited sample size (12 trades) - results may not be statistically significant."
        ]

    def test_missing_backtest_is_not_a_risk(self) -> None:
        assert risk_warnings(None) == []


class TestRegimeDescriptions:
    def test_describe_regime(self) -> None:
        assert (
            describe_regime(RegimeMetadata(trend="bullish", volatility=0.08))
            == "bullish, high volatility"
        )
        assert describe_regime(RegimeMetadata(volatility=0.01)) == "low volatility"
        assert describe_regime(RegimeMetadata()) == "mixed"
        assert describe_regime(None) == "unknown"

    def test_split_regimes_orders_best_and_worst(self) -> None:
        hits = [
            SearchHit(id=f"r-{i}", score=score, metadata={"trend": "bullish"})
            for i, score in enumerate([0.9, 0.2, 0.5, 0.7])
        ]
        best, worst = split_regimes(hits)
        assert [r.performance for r in best] == [0.9, 0.7, 0.5]
        assert [r.performance for r in worst] == [0.2, 0.5, 0.7]
        assert best[0].description == "90% match in bullish conditions."

    def test_split_regimes_empty(self) -> None:
        assert split_regimes([]) == ([], [])


class TestSummaries:
    def test_strategy_summary_with_backtest(self) -> None:
        summary = strategy_summary(
            make_strategy(name="Momentum", description="trend follower"), _scenario_a()
        )
        assert summary == (
            "Momentum is a trend follower. It has achieved 35.0% return in "
            "backtesting. Sharpe ratio: 2.10."
        )

    def test_strategy_summary_without_description(self) -> None:
        summary = strategy_summary(make_strategy(name="Carry", description=None), None)
        assert summary == "Carry is a trading strategy."

    def test_recommendation_explanation_mentions_trend(self) -> None:
        text = recommendation_explanation(
            0.87,
            RegimeDescription(trend=Trend.BULLISH),
            BacktestMetrics(total_return=0.35, max_drawdown=0.12),
        )
        assert text.startswith("This strategy has 87% similarity")
        assert "Current bullish trend" in text
        assert "Historical return: 35.0%." in text
        assert "Max drawdown: 12.0%." in text

    def test_neutral_trend_is_not_mentioned(self) -> None:
        text = recommendation_explanation(
            0.5, RegimeDescription(trend=Trend.NEUTRAL), BacktestMetrics()
        )
        assert "trend" not in text


# ══════════════════════════════════════════════════════════════════════
# Metadata schema / errors
# ══════════════════════════════════════════════════════════════════════


class TestMetadataSchema:
    def test_metrics_ignore_non_numeric_values(self) -> None:
        metrics = BacktestMetrics.from_mapping(
            {"sharpeRatio": True, "totalReturn": "high", "totalTrades": 150.0}
        )
        assert metrics.sharpe_ratio is None
        assert metrics.total_return is None
        assert metrics.total_trades == 150

    def test_missing_fields_fall_back_to_defaults(self) -> None:
        metadata = StrategyMetadata.from_hit(SearchHit(id="s-9", score=0.4))
        assert metadata.strategy_id == "s-9"
        assert metadata.name == "Unknown Strategy"
        assert metadata.backtest_metrics == BacktestMetrics()

    def test_metadata_round_trip_keys(self) -> None:
        mapping = StrategyMetadata(strategy_id="s-1", tenant_id="t-1").to_mapping()
        assert mapping["strategyId"] == "s-1"
        assert mapping["tenantId"] == "t-1"
        assert set(mapping["backtestMetrics"]) == {
            "totalReturn",
            "sharpeRatio",
            "maxDrawdown",
            "winRate",
            "totalTrades",
            "profitFactor",
        }


class TestErrors:
    def test_strategy_not_found_message(self) -> None:
        error = StrategyNotFoundError("s-404")
        assert isinstance(error, PatternDomainError)
        assert error.message == "Strategy s-404 not found"
        assert error.strategy_id == "s-404"

    def test_index_unavailable_message(self) -> None:
        error = VectorIndexUnavailableError("timeout")
        assert "timeout" in error.message
