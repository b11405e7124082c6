"""
Rule-based narratives for strategy explanations and recommendations.

All text is assembled from fixed templates. A fact that is missing
(no backtest, no metric) is simply left out of the text; missing data
never raises and never produces a warning.
"""

from dataclasses import dataclass
from typing import Optional

from pattern_intel.domain.patterns.entities import (
    BacktestMetrics,
    BacktestRecord,
    FactorImpact,
    PerformanceFactor,
    RegimeDescription,
    RegimeMetadata,
    RegimePerformance,
    SearchHit,
    StrategyRecord,
    Trend,
)

REGIME_SPLIT_SIZE = 3


@dataclass(frozen=True)
class ExplanationThresholds:
    """Cut-offs used by the explanation rules.

    Attributes:
        strong_sharpe: Sharpe ratio above which risk-adjusted returns are praised.
        high_win_rate: Win rate above which consistency is praised.
        low_win_rate: Win rate below which signals are flagged as inconsistent.
        max_drawdown: Drawdown above which capital at risk is flagged.
        min_trades: Trade count below which results are a small sample.
        high_volatility: Regime volatility above which a regime is "high volatility".
    """

    strong_sharpe: float = 1.5
    high_win_rate: float = 0.55
    low_win_rate: float = 0.45
    max_drawdown: float = 0.20
    min_trades: int = 50
    high_volatility: float = 0.05


DEFAULT_THRESHOLDS = ExplanationThresholds()


def _pct(fraction: float) -> str:
    return f"{fraction * 100:.1f}%"


def performance_factors(
    best: Optional[BacktestRecord],
    thresholds: ExplanationThresholds = DEFAULT_THRESHOLDS,
) -> list[PerformanceFactor]:
    """Return the factors driving a strategy's backtested performance."""
    if best is None:
        return []

    metrics = best.metrics
    factors: list[PerformanceFactor] = []

    if metrics.sharpe_ratio is not None and metrics.sharpe_ratio > thresholds.strong_sharpe:
        factors.append(
            PerformanceFactor(
                factor="Risk-Adjusted Returns",
                impact=FactorImpact.POSITIVE,
                description=(
                    f"Strong Sharpe ratio of {metrics.sharpe_ratio:.2f} indicates "
                    "good risk-adjusted performance."
                ),
            )
        )

    if metrics.win_rate is not None:
        if metrics.win_rate > thresholds.high_win_rate:
            factors.append(
                PerformanceFactor(
                    factor="Win Rate",
                    impact=FactorImpact.POSITIVE,
                    description=(
                        f"Win rate of {_pct(metrics.win_rate)} shows consistent profitability."
                    ),
                )
            )
        elif metrics.win_rate < thresholds.low_win_rate:
            factors.append(
                PerformanceFactor(
                    factor="Win Rate",
                    impact=FactorImpact.NEGATIVE,
                    description=(
                        f"Low win rate of {_pct(metrics.win_rate)} may indicate "
                        "inconsistent signals."
                    ),
                )
            )

    return factors


def risk_warnings(
    best: Optional[BacktestRecord],
    thresholds: ExplanationThresholds = DEFAULT_THRESHOLDS,
) -> list[str]:
    """Return risk warnings for a strategy. Warnings are additive.

    A strategy without a completed backtest gets no warnings: absence of
    data is treated as absence of evidence of risk.
    """
    if best is None:
        return []

    metrics = best.metrics
    warnings: list[str] = []

    if metrics.max_drawdown is not None and metrics.max_drawdown > thresholds.max_drawdown:
        warnings.append(
            f"High maximum drawdown of {_pct(metrics.max_drawdown)} - "
            "significant capital at risk."
        )

    if metrics.win_rate is not None and metrics.win_rate < thresholds.low_win_rate:
        warnings.append("Low win rate may require strict risk management.")

    if metrics.total_trades is not None and metrics.total_trades < thresholds.min_trades:
        warnings.append(
            f"Limited sample size ({metrics.total_trades} trades) - "
            "results may not be statistically significant."
        )

    return warnings


def describe_regime(
    metadata: Optional[RegimeMetadata],
    thresholds: ExplanationThresholds = DEFAULT_THRESHOLDS,
) -> str:
    """Return a short label such as "bullish, high volatility"."""
    if metadata is None:
        return "unknown"

    parts: list[str] = []
    if metadata.trend:
        parts.append(metadata.trend)
    if metadata.volatility is not None:
        parts.append(
            "high volatility"
            if metadata.volatility > thresholds.high_volatility
            else "low volatility"
        )
    return ", ".join(parts) or "mixed"


def split_regimes(
    hits: list[SearchHit],
    thresholds: ExplanationThresholds = DEFAULT_THRESHOLDS,
) -> tuple[list[RegimePerformance], list[RegimePerformance]]:
    """Rank regime hits and return (best three, worst three worst-first).

    With fewer than six hits the two lists overlap.
    """
    ranked = []
    for hit in hits:
        label = describe_regime(RegimeMetadata.from_mapping(hit.metadata), thresholds)
        ranked.append(
            RegimePerformance(
                regime=label,
                performance=hit.score,
                description=f"{round(hit.score * 100)}% match in {label} conditions.",
            )
        )

    ranked.sort(key=lambda r: r.performance, reverse=True)
    best = ranked[:REGIME_SPLIT_SIZE]
    worst = list(reversed(ranked[-REGIME_SPLIT_SIZE:]))
    return best, worst


def strategy_summary(strategy: StrategyRecord, best: Optional[BacktestRecord]) -> str:
    """One or two sentences describing the strategy and its best backtest."""
    parts = [f"{strategy.name} is a {strategy.description or 'trading strategy'}."]

    if best is not None:
        metrics = best.metrics
        if metrics.total_return is not None:
            parts.append(
                f"It has achieved {_pct(metrics.total_return)} return in backtesting."
            )
        if metrics.sharpe_ratio is not None:
            parts.append(f"Sharpe ratio: {metrics.sharpe_ratio:.2f}.")

    return " ".join(parts)


def recommendation_explanation(
    score: float,
    regime: RegimeDescription,
    metrics: BacktestMetrics,
) -> str:
    """Explain why a strategy was recommended for a regime."""
    parts = [
        f"This strategy has {round(score * 100)}% similarity to strategies that "
        "performed well in similar market conditions."
    ]

    if regime.trend is not None and regime.trend is not Trend.NEUTRAL:
        parts.append(
            f"Current {regime.trend.value} trend aligns with this strategy's "
            "historical strength."
        )

    if metrics.total_return is not None:
        parts.append(f"Historical return: {_pct(metrics.total_return)}.")

    if metrics.max_drawdown is not None:
        parts.append(f"Max drawdown: {_pct(metrics.max_drawdown)}.")

    return " ".join(parts)
