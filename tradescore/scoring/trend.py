"""Trend score from ADX trend strength."""

from tradescore.indicators.trend import trend_strength
from tradescore.models import Direction, TrendStrength

TREND_SCORES = {
    Direction.LONG: {
        TrendStrength.NO_TREND: 25,
        TrendStrength.WEAK: 45,
        TrendStrength.STRONG: 85,
        TrendStrength.VERY_STRONG: 95,
        TrendStrength.EXTREME: 75,
    },
    Direction.SHORT: {
        TrendStrength.NO_TREND: 85,
        TrendStrength.WEAK: 75,
        TrendStrength.STRONG: 25,
        TrendStrength.VERY_STRONG: 15,
        TrendStrength.EXTREME: 35,
    },
}


def classify_trend(adx: float) -> TrendStrength:
    """Map an ADX value onto its trend-strength band."""
    if adx < 20:
        return TrendStrength.NO_TREND
    elif adx < 25:
        return TrendStrength.WEAK
    elif adx <= 50:
        return TrendStrength.STRONG
    elif adx <= 75:
        return TrendStrength.VERY_STRONG
    return TrendStrength.EXTREME


def trend_score(adx: float, direction: Direction) -> int:
    """Score trend strength for a direction; ADX is clamped to [15, 85] first."""
    return TREND_SCORES[direction][classify_trend(trend_strength(adx))]
