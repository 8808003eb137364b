"""Trend-strength calculations (ADX family).

ADX here is the current DX: the traditional second smoothing of DX over
time is not applied. Downstream score tables are tuned against this
approximation, so keep it.
"""

from typing import NamedTuple, Optional, Sequence

from tradescore.indicators.technical import calculate_true_ranges
from tradescore.models import Bar
from tradescore.utils import clamp, require_period

# Bounds applied before ADX feeds a trend score
TREND_STRENGTH_MIN = 15.0
TREND_STRENGTH_MAX = 85.0


class ADXReading(NamedTuple):
    """Directional indicators and ADX for the most recent window."""

    adx: float
    plus_di: float
    minus_di: float


def calculate_directional_movement(
    bars: Sequence[Bar],
) -> tuple[list[float], list[float]]:
    """Calculate +DM and -DM for every bar with a predecessor.

    +DM is the up-move when it is positive and exceeds the down-move,
    otherwise 0; -DM is symmetric.

    Returns:
        Tuple of (plus_dm, minus_dm), each len(bars) - 1 long.
    """
    plus_dm = []
    minus_dm = []

    for i in range(1, len(bars)):
        up_move = bars[i].high - bars[i - 1].high
        down_move = bars[i - 1].low - bars[i].low

        plus_dm.append(up_move if up_move > down_move and up_move > 0 else 0.0)
        minus_dm.append(down_move if down_move > up_move and down_move > 0 else 0.0)

    return plus_dm, minus_dm


def calculate_dx(plus_di: float, minus_di: float) -> float:
    """DX = 100 * |DI+ - DI-| / (DI+ + DI-), capped at 100, or 0 when both are 0."""
    di_sum = plus_di + minus_di
    if di_sum <= 0:
        return 0.0
    return min(100.0, 100 * abs(plus_di - minus_di) / di_sum)


def calculate_adx(bars: Sequence[Bar], period: int = 14) -> Optional[ADXReading]:
    """Calculate DI+, DI- and ADX over the most recent `period` bars.

    Smoothed values are simple means of the last `period` +DM, -DM and
    true range values. A window with no range at all yields zeros.

    Args:
        bars: Bars, oldest first
        period: Smoothing period (default 14)

    Returns:
        ADXReading, or None if fewer than period + 1 bars.
    """
    require_period(period)
    if len(bars) < period + 1:
        return None

    window = bars[-(period + 1):]
    plus_dm, minus_dm = calculate_directional_movement(window)
    ranges = calculate_true_ranges(window)

    atr = sum(ranges) / period
    if atr <= 0:
        return ADXReading(adx=0.0, plus_di=0.0, minus_di=0.0)

    plus_di = 100 * (sum(plus_dm) / period) / atr
    minus_di = 100 * (sum(minus_dm) / period) / atr

    return ADXReading(
        adx=calculate_dx(plus_di, minus_di),
        plus_di=plus_di,
        minus_di=minus_di,
    )


def trend_strength(adx: float) -> float:
    """Clamp an ADX value into [15, 85] before scoring."""
    return clamp(adx, TREND_STRENGTH_MIN, TREND_STRENGTH_MAX)
