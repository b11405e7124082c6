"""
Domain layer of the patterns context.

Covers feature encoding of regimes, strategies and trades, best-backtest
selection, and the rules behind explanations and recommendations.
"""
