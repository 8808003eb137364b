"""Indicator reading and directional score models."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Direction(str, Enum):
    """Trade direction."""

    LONG = "Long"
    SHORT = "Short"


class Crossover(str, Enum):
    """SMA crossover classification."""

    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NONE = "None"


class ScoreKind(str, Enum):
    """The four directional score families."""

    MOMENTUM = "Momentum"
    TREND = "Trend"
    VOLATILITY = "Volatility"
    RELATIVE_STRENGTH = "RelativeStrength"


class TrendStrength(str, Enum):
    """ADX trend-strength bands."""

    NO_TREND = "No Trend"
    WEAK = "Weak Trend"
    STRONG = "Strong Trend"
    VERY_STRONG = "Very Strong Trend"
    EXTREME = "Extreme Trend"


class BollingerBands(BaseModel):
    """Bollinger Band snapshot over the most recent window."""

    upper: float = Field(..., description="Upper band (mean + k*sigma)")
    middle: float = Field(..., description="Mean of the window")
    lower: float = Field(..., description="Lower band (mean - k*sigma)")
    width: float = Field(..., ge=0, description="Band width as % of mean")
    percent_b: float = Field(..., ge=0, le=1, description="Close position within bands")

    model_config = {"frozen": True}


class IndicatorReading(BaseModel):
    """Indicator snapshot for one symbol as of one date."""

    symbol: str = Field(..., description="Trading symbol")
    as_of: date = Field(..., description="Last bar date of the window")
    close: float = Field(..., ge=0, description="Last close")
    sma_short: float = Field(..., description="Short SMA (latest)")
    sma_long: float = Field(..., description="Long SMA (latest)")
    crossover: Crossover = Field(..., description="Crossover classification")
    macd_histogram: float = Field(..., description="Latest MACD histogram value")
    macd_periods: tuple[int, int, int] = Field(..., description="fast/slow/signal used")
    macd_reduced: bool = Field(False, description="Shorter-than-default MACD periods used")
    adx: float = Field(..., ge=0, le=100, description="ADX (current DX)")
    plus_di: float = Field(..., ge=0, description="DI+")
    minus_di: float = Field(..., ge=0, description="DI-")
    atr: float = Field(..., ge=0, description="Average true range")
    bollinger: BollingerBands = Field(..., description="Bollinger snapshot")
    return_pct: Optional[float] = Field(None, description="Return over the RS lookback, %")

    model_config = {"frozen": True}


class DirectionalScore(BaseModel):
    """A bounded 1-100 score for one family and direction."""

    kind: ScoreKind = Field(..., description="Score family")
    direction: Direction = Field(..., description="Trade direction")
    value: int = Field(..., ge=1, le=100, description="Score in [1, 100]")
    label: str = Field("", description="Human readable classification")

    model_config = {"frozen": True}
