"""Moving-average and oscillator calculations.

Every function returns only computed values: a series shorter than the
period yields an empty list (or None for single-value indicators) so that
"not enough data" can never be mistaken for a computed zero. Invalid input
(NaN, infinity, negative prices, non-positive periods) raises ValueError.
Calculations are validated against pandas as a reference implementation.
"""

from typing import NamedTuple, Optional, Sequence

from tradescore.models import Bar, BollingerBands
from tradescore.utils import clamp, require_finite, require_non_negative, require_period


class MACDResult(NamedTuple):
    """MACD line, signal line and histogram.

    macd_line starts at the slow EMA's first value; signal_line and
    histogram start at the signal EMA's first value, so
    histogram[i] == macd_line[i + signal - 1] - signal_line[i].
    """

    macd_line: list[float]
    signal_line: list[float]
    histogram: list[float]


def calculate_sma(prices: Sequence[float], period: int) -> list[float]:
    """Calculate Simple Moving Average.

    Args:
        prices: Price values, oldest first
        period: Number of periods for the moving average

    Returns:
        len(prices) - period + 1 values, or an empty list if too short.
    """
    require_period(period)
    require_finite(prices, "prices")
    if len(prices) < period:
        return []

    result = []
    for i in range(period - 1, len(prices)):
        window = prices[i - period + 1:i + 1]
        result.append(sum(window) / period)
    return result


def calculate_ema(prices: Sequence[float], period: int) -> list[float]:
    """Calculate Exponential Moving Average.

    Seeded with the SMA of the first `period` values, then
    ema = value * k + prev * (1 - k) with k = 2 / (period + 1).

    Args:
        prices: Values, oldest first (may be negative, e.g. a MACD line)
        period: Number of periods for the EMA

    Returns:
        len(prices) - period + 1 values, or an empty list if too short.
    """
    require_period(period)
    require_finite(prices, "prices")
    if len(prices) < period:
        return []

    multiplier = 2 / (period + 1)

    # First EMA is SMA
    result = [sum(prices[:period]) / period]
    for i in range(period, len(prices)):
        result.append(prices[i] * multiplier + result[-1] * (1 - multiplier))
    return result


def calculate_macd(
    prices: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDResult:
    """Calculate MACD (Moving Average Convergence Divergence).

    Args:
        prices: Close prices, oldest first
        fast: Fast EMA period (default 12)
        slow: Slow EMA period (default 26)
        signal: Signal line period (default 9)

    Returns:
        MACDResult. All three lists are empty when len(prices) < slow; the
        signal line and histogram are empty when the MACD line is shorter
        than `signal`.
    """
    require_period(fast, "fast")
    require_period(slow, "slow")
    require_period(signal, "signal")
    if fast >= slow:
        raise ValueError(f"fast period ({fast}) must be shorter than slow ({slow})")
    require_non_negative(prices, "prices")

    if len(prices) < slow:
        return MACDResult([], [], [])

    fast_ema = calculate_ema(prices, fast)
    slow_ema = calculate_ema(prices, slow)

    # Align the fast EMA on the slow EMA's start index
    offset = slow - fast
    macd_line = [f - s for f, s in zip(fast_ema[offset:], slow_ema)]

    signal_line = calculate_ema(macd_line, signal)
    histogram = [m - s for m, s in zip(macd_line[signal - 1:], signal_line)]

    return MACDResult(macd_line, signal_line, histogram)


def macd_min_bars(fast: int, slow: int, signal: int) -> int:
    """Bars needed for calculate_macd() to yield at least one histogram value."""
    return slow + signal - 1


def select_macd_periods(
    bar_count: int, ladder: Sequence[tuple[int, int, int]]
) -> Optional[tuple[tuple[int, int, int], bool]]:
    """Pick the longest MACD profile the available history supports.

    Args:
        bar_count: Number of bars available
        ladder: (fast, slow, signal) profiles, longest first

    Returns:
        ((fast, slow, signal), reduced) where reduced is True when a
        shorter-than-first profile was chosen, or None when even the
        shortest profile does not fit.
    """
    for i, periods in enumerate(ladder):
        if bar_count >= macd_min_bars(*periods):
            return periods, i > 0
    return None


def calculate_bollinger_bands(
    prices: Sequence[float],
    period: int = 20,
    std_dev: float = 2.0,
) -> Optional[BollingerBands]:
    """Calculate Bollinger Bands over the most recent `period` closes.

    Uses the population standard deviation. Width is (upper - lower) as a
    percentage of the mean (0 when the mean is 0). %b is the last close's
    position between the bands clamped to [0, 1], or 0.5 when the bands
    have collapsed onto the mean.

    Args:
        prices: Close prices, oldest first
        period: Window length (default 20)
        std_dev: Standard deviation multiplier (default 2.0)

    Returns:
        BollingerBands, or None if fewer than `period` prices.
    """
    require_period(period)
    require_non_negative([std_dev], "std_dev")
    require_non_negative(prices, "prices")
    if len(prices) < period:
        return None

    window = prices[-period:]
    mean = sum(window) / period
    variance = sum((x - mean) ** 2 for x in window) / period
    std = variance ** 0.5

    upper = mean + std_dev * std
    lower = mean - std_dev * std
    band = upper - lower

    width = band / mean * 100 if mean > 0 else 0.0
    if band > 0:
        percent_b = clamp((window[-1] - lower) / band, 0.0, 1.0)
    else:
        percent_b = 0.5

    return BollingerBands(
        upper=upper,
        middle=mean,
        lower=lower,
        width=width,
        percent_b=percent_b,
    )


def true_range(bar: Bar, prev_close: float) -> float:
    """Wilder true range of one bar against the previous close."""
    return max(
        bar.high - bar.low,
        abs(bar.high - prev_close),
        abs(bar.low - prev_close),
    )


def calculate_true_ranges(bars: Sequence[Bar]) -> list[float]:
    """True range for every bar that has a predecessor (len(bars) - 1 values)."""
    return [true_range(bars[i], bars[i - 1].close) for i in range(1, len(bars))]


def calculate_atr(bars: Sequence[Bar], period: int = 14) -> Optional[float]:
    """Calculate Average True Range.

    Simple mean of the most recent `period` true ranges.

    Args:
        bars: Bars, oldest first
        period: ATR period (default 14)

    Returns:
        ATR value, or None if fewer than period + 1 bars.
    """
    require_period(period)
    if len(bars) < period + 1:
        return None

    ranges = calculate_true_ranges(bars[-(period + 1):])
    return sum(ranges) / period
