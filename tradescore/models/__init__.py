"""Data models for TradeScore."""

from tradescore.models.bar import Bar
from tradescore.models.instrument import Instrument
from tradescore.models.levels import Level, LevelType
from tradescore.models.reading import (
    BollingerBands,
    Crossover,
    Direction,
    DirectionalScore,
    IndicatorReading,
    ScoreKind,
    TrendStrength,
)
from tradescore.models.risk import GapAdjustment, RiskRewardResult, TradeSetup

__all__ = [
    "Bar",
    "Instrument",
    "Level",
    "LevelType",
    "BollingerBands",
    "Crossover",
    "Direction",
    "DirectionalScore",
    "IndicatorReading",
    "ScoreKind",
    "TrendStrength",
    "GapAdjustment",
    "RiskRewardResult",
    "TradeSetup",
]
