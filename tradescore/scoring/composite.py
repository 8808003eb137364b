"""Composite 1-100 score built from the four directional scores."""

from typing import Mapping, Optional, Sequence

from tradescore.models import (
    Direction,
    DirectionalScore,
    IndicatorReading,
    ScoreKind,
)
from tradescore.scoring.momentum import momentum_score
from tradescore.scoring.relative import relative_strength_score
from tradescore.scoring.trend import classify_trend, trend_score
from tradescore.scoring.volatility import volatility_score
from tradescore.utils import clamp, round_half_up

DEFAULT_WEIGHTS = {
    ScoreKind.RELATIVE_STRENGTH: 0.25,
    ScoreKind.VOLATILITY: 0.25,
    ScoreKind.MOMENTUM: 0.25,
    ScoreKind.TREND: 0.25,
}

_LONG_SIGNALS = ["Strong Buy", "Buy", "Hold", "Weak Sell", "Strong Sell"]
_SHORT_SIGNALS = ["Strong Sell", "Sell", "Hold", "Weak Buy", "Strong Buy"]


def score_reading(
    reading: IndicatorReading,
    direction: Direction,
    benchmark_return_pct: Optional[float] = None,
) -> list[DirectionalScore]:
    """Turn an indicator reading into directional scores.

    The relative strength score is included only when both the reading's
    return and the benchmark return are known.
    """
    atr_ratio = reading.atr / reading.close * 100 if reading.close > 0 else 0.0

    scores = [
        DirectionalScore(
            kind=ScoreKind.MOMENTUM,
            direction=direction,
            value=momentum_score(reading.crossover, reading.macd_histogram, direction),
            label=f"{reading.crossover.value} crossover",
        ),
        DirectionalScore(
            kind=ScoreKind.TREND,
            direction=direction,
            value=trend_score(reading.adx, direction),
            label=classify_trend(reading.adx).value,
        ),
        DirectionalScore(
            kind=ScoreKind.VOLATILITY,
            direction=direction,
            value=volatility_score(
                atr_ratio,
                reading.bollinger.width,
                reading.bollinger.percent_b,
                direction,
            ),
            label=f"ATR {atr_ratio:.2f}%",
        ),
    ]

    if reading.return_pct is not None and benchmark_return_pct is not None:
        diff = reading.return_pct - benchmark_return_pct
        rs = relative_strength_score(reading.return_pct, benchmark_return_pct, direction)
        scores.insert(
            0,
            DirectionalScore(
                kind=ScoreKind.RELATIVE_STRENGTH,
                direction=direction,
                # DirectionalScore is 1-100; the raw score may reach 0
                value=max(1, rs),
                label=f"{diff:+.2f}% vs benchmark",
            ),
        )

    return scores


def composite_score(
    scores: Sequence[DirectionalScore],
    weights: Optional[Mapping[ScoreKind, float]] = None,
) -> int:
    """Weighted mean of directional scores, rounded and clamped to [1, 100].

    Weights are renormalised over the kinds present, so a missing score
    does not drag the result toward zero.
    """
    if not scores:
        raise ValueError("at least one score is required")
    weights = weights or DEFAULT_WEIGHTS

    total_weight = sum(weights.get(s.kind, 0.0) for s in scores)
    if total_weight <= 0:
        raise ValueError("weights must cover at least one score")

    weighted = sum(s.value * weights.get(s.kind, 0.0) for s in scores)
    return int(clamp(round_half_up(weighted / total_weight), 1, 100))


def signal_label(score: float, direction: Direction) -> str:
    """Map a composite score onto a trading signal for the direction."""
    labels = _LONG_SIGNALS if direction == Direction.LONG else _SHORT_SIGNALS
    if score >= 80:
        return labels[0]
    elif score >= 60:
        return labels[1]
    elif score >= 40:
        return labels[2]
    elif score >= 20:
        return labels[3]
    return labels[4]
