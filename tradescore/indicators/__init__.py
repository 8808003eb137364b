"""Technical indicators module."""

from tradescore.indicators.levels import find_levels, find_swing_points
from tradescore.indicators.technical import (
    MACDResult,
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_macd,
    calculate_sma,
    calculate_true_ranges,
    select_macd_periods,
)
from tradescore.indicators.trend import (
    ADXReading,
    calculate_adx,
    calculate_directional_movement,
    calculate_dx,
    trend_strength,
)

__all__ = [
    "find_levels",
    "find_swing_points",
    "MACDResult",
    "calculate_atr",
    "calculate_bollinger_bands",
    "calculate_ema",
    "calculate_macd",
    "calculate_sma",
    "calculate_true_ranges",
    "select_macd_periods",
    "ADXReading",
    "calculate_adx",
    "calculate_directional_movement",
    "calculate_dx",
    "trend_strength",
]
