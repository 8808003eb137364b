"""Momentum score from SMA crossover and MACD histogram."""

from typing import Optional

from tradescore.models import Crossover, Direction
from tradescore.utils import clamp

# |histogram| below this counts as flat after a crossover
FLAT_HISTOGRAM = 0.01
# |histogram| above this counts as a signal without a crossover
NO_CROSS_HISTOGRAM = 0.02


def detect_crossover(
    short_now: float,
    long_now: float,
    short_prev: Optional[float] = None,
    long_prev: Optional[float] = None,
) -> Crossover:
    """Classify the short/long SMA relationship between two bars.

    Bullish when the short average moves from at-or-below to above the long
    one, Bearish when it moves from above to at-or-below, None otherwise.
    With no previous values, or when neither average moved, the current
    position decides: above is Bullish, anything else Bearish. That
    cold-start rule can flag a "crossover" on flat, thinly traded symbols.
    """
    current_above = short_now > long_now
    no_history = short_prev is None or long_prev is None
    if no_history or (short_prev == short_now and long_prev == long_now):
        return Crossover.BULLISH if current_above else Crossover.BEARISH

    previous_above = short_prev > long_prev
    if current_above and not previous_above:
        return Crossover.BULLISH
    if previous_above and not current_above:
        return Crossover.BEARISH
    return Crossover.NONE


def _long_momentum(crossover: Crossover, histogram: float) -> int:
    if crossover == Crossover.BULLISH:
        if histogram > 0:
            return 95
        elif abs(histogram) < FLAT_HISTOGRAM:
            return 75
        return 55

    if crossover == Crossover.BEARISH:
        if histogram < 0:
            return 15
        elif abs(histogram) < FLAT_HISTOGRAM:
            return 25
        return 40

    if histogram > NO_CROSS_HISTOGRAM:
        return 70
    elif histogram < -NO_CROSS_HISTOGRAM:
        return 30
    return 50


_MIRROR = {
    Crossover.BULLISH: Crossover.BEARISH,
    Crossover.BEARISH: Crossover.BULLISH,
    Crossover.NONE: Crossover.NONE,
}


def momentum_score(crossover: Crossover, histogram: float, direction: Direction) -> int:
    """Score momentum on a 1-100 scale for the given direction.

    Short bias uses the long table with the crossover swapped and the
    histogram negated.
    """
    if direction == Direction.SHORT:
        crossover, histogram = _MIRROR[crossover], -histogram
    return int(clamp(_long_momentum(crossover, histogram), 1, 100))
