"""Volatility score from ATR/price, Bollinger width and %b.

Long bias favours moderate volatility with price near the lower band;
short bias favours quiet or very wide ranges with price near the upper
band.
"""

from tradescore.models import Direction
from tradescore.utils import clamp, require_finite, round_half_up

ATR_WEIGHT = 0.4
WIDTH_WEIGHT = 0.3
PERCENT_B_WEIGHT = 0.3


def _long_atr(ratio: float) -> float:
    if 2 <= ratio <= 5:
        return 80
    elif 1 <= ratio < 2:
        return 50 + (ratio - 1) * 30
    elif 5 < ratio <= 10:
        return 80 - (ratio - 5) * 10
    elif ratio < 1:
        return 20
    return 10


def _long_width(width: float) -> float:
    if 3 <= width <= 6:
        return 70
    elif 2 <= width < 3:
        return 40 + (width - 2) * 30
    elif 6 < width <= 12:
        return 70 - (width - 6) * 6.67
    elif width > 12:
        return 35
    return 30


def _long_percent_b(percent_b: float) -> float:
    if 0.2 <= percent_b <= 0.3:
        return 90
    elif percent_b < 0.2:
        return 85  # Near lower band, possible bounce
    elif 0.3 < percent_b < 0.4:
        return 75
    elif 0.4 <= percent_b <= 0.6:
        return 50
    elif 0.6 < percent_b <= 0.7:
        return 30
    return 20


def _short_atr(ratio: float) -> float:
    if 2 <= ratio <= 5:
        return 60
    elif 1 <= ratio < 2:
        return 80 - (ratio - 1) * 20
    elif 5 < ratio <= 10:
        return 60 + (ratio - 5) * 6
    elif ratio < 1:
        return 90
    return 100


def _short_width(width: float) -> float:
    if 3 <= width <= 6:
        return 50
    elif 2 <= width < 3:
        return 70 + (3 - width) * 20
    elif 6 < width <= 12:
        return 50 - (width - 6) * 5
    elif width > 12:
        return 10
    return 100


def _short_percent_b(percent_b: float) -> float:
    if 0.7 <= percent_b <= 0.8:
        return 90
    elif percent_b > 0.8:
        return 85  # Near upper band, possible rejection
    elif 0.6 <= percent_b < 0.7:
        return 75
    elif 0.4 <= percent_b < 0.6:
        return 50
    elif 0.3 <= percent_b < 0.4:
        return 30
    return 20


_TABLES = {
    Direction.LONG: (_long_atr, _long_width, _long_percent_b),
    Direction.SHORT: (_short_atr, _short_width, _short_percent_b),
}


def volatility_score(
    atr_ratio_pct: float,
    bb_width_pct: float,
    percent_b: float,
    direction: Direction,
) -> int:
    """Combine ATR/price, band width and %b sub-scores.

    Args:
        atr_ratio_pct: ATR as a percentage of the last close
        bb_width_pct: Bollinger width as a percentage of the mean
        percent_b: Close position within the bands, 0 to 1
        direction: Trade direction

    Returns:
        Weighted score 0.4/0.3/0.3, rounded and clamped to [1, 100].
    """
    require_finite([atr_ratio_pct, bb_width_pct, percent_b], "volatility inputs")
    atr_table, width_table, percent_b_table = _TABLES[direction]

    score = (
        ATR_WEIGHT * atr_table(atr_ratio_pct)
        + WIDTH_WEIGHT * width_table(bb_width_pct)
        + PERCENT_B_WEIGHT * percent_b_table(percent_b)
    )
    return int(clamp(round_half_up(score), 1, 100))
