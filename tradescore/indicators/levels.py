"""Support and resistance detection.

Local lows/highs over a recent window are clustered into price zones whose
strength is the number of touches.
"""

from typing import Sequence

from tradescore.models import Bar, Level, LevelType
from tradescore.utils import require_non_negative

DEFAULT_LOOKBACK = 50
MAX_DISTANCE_PERCENT = 10.0
CLUSTER_PERCENT = 0.5
MIN_STRENGTH = 2


def _is_swing_low(bars: Sequence[Bar], i: int) -> bool:
    low = bars[i].low
    return all(low <= bars[j].low for j in (i - 2, i - 1, i + 1, i + 2))


def _is_swing_high(bars: Sequence[Bar], i: int) -> bool:
    high = bars[i].high
    return all(high >= bars[j].high for j in (i - 2, i - 1, i + 1, i + 2))


def _distance_percent(price: float, reference: float) -> float:
    return (price - reference) / reference * 100


def find_swing_points(
    bars: Sequence[Bar],
    reference_price: float,
    max_distance_pct: float = MAX_DISTANCE_PERCENT,
) -> list[tuple[LevelType, float]]:
    """Find local lows below and local highs above the reference price.

    A bar at index i (2 <= i <= n - 3) is a swing low when its low is <=
    the lows of the two bars either side; swing highs are symmetric.
    Candidates further than max_distance_pct from the reference are
    discarded, as are lows at or above it and highs at or below it.

    Returns:
        (type, price) candidates in scan order.
    """
    points = []
    for i in range(2, len(bars) - 2):
        if _is_swing_low(bars, i):
            distance = -_distance_percent(bars[i].low, reference_price)
            if 0 < distance < max_distance_pct:
                points.append((LevelType.SUPPORT, bars[i].low))

        if _is_swing_high(bars, i):
            distance = _distance_percent(bars[i].high, reference_price)
            if 0 < distance < max_distance_pct:
                points.append((LevelType.RESISTANCE, bars[i].high))
    return points


def find_levels(
    bars: Sequence[Bar],
    reference_price: float,
    lookback: int = DEFAULT_LOOKBACK,
    max_distance_pct: float = MAX_DISTANCE_PERCENT,
    cluster_pct: float = CLUSTER_PERCENT,
    min_strength: int = MIN_STRENGTH,
) -> list[Level]:
    """Detect clustered support/resistance levels near a reference price.

    Args:
        bars: Bars, oldest first
        reference_price: Current price the distances are measured from
        lookback: Number of most recent bars to scan (default 50)
        max_distance_pct: Ignore swing points further than this (default 10%)
        cluster_pct: Merge same-type points within this % of the reference
            price (default 0.5%)
        min_strength: Minimum touches for a level to be kept (default 2)

    Returns:
        Levels sorted by strength descending then distance ascending.
        Empty when fewer than `lookback` bars are available.
    """
    require_non_negative([reference_price], "reference_price")
    if reference_price <= 0:
        raise ValueError("reference_price must be positive")
    if len(bars) < lookback:
        return []

    window = bars[-lookback:]
    threshold = reference_price * cluster_pct / 100

    # Greedy clustering in scan order: [type, price, strength]
    clusters: list[list] = []
    for level_type, price in find_swing_points(window, reference_price, max_distance_pct):
        for cluster in clusters:
            if cluster[0] == level_type and abs(cluster[1] - price) <= threshold:
                strength = cluster[2]
                cluster[1] = (cluster[1] * strength + price) / (strength + 1)
                cluster[2] = strength + 1
                break
        else:
            clusters.append([level_type, price, 1])

    levels = [
        Level(
            price=price,
            type=level_type,
            strength=strength,
            distance_percent=_distance_percent(price, reference_price),
        )
        for level_type, price, strength in clusters
        if strength >= min_strength
    ]
    levels.sort(key=lambda level: (-level.strength, abs(level.distance_percent)))
    return levels
