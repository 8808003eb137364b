"""Directional scoring engines."""

from tradescore.scoring.composite import composite_score, score_reading, signal_label
from tradescore.scoring.momentum import detect_crossover, momentum_score
from tradescore.scoring.relative import (
    period_return,
    relative_strength_ratio,
    relative_strength_score,
)
from tradescore.scoring.trend import classify_trend, trend_score
from tradescore.scoring.volatility import volatility_score

__all__ = [
    "composite_score",
    "score_reading",
    "signal_label",
    "detect_crossover",
    "momentum_score",
    "period_return",
    "relative_strength_ratio",
    "relative_strength_score",
    "classify_trend",
    "trend_score",
    "volatility_score",
]
