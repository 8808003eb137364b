"""Batch analysis, liquidity screening and pre-market checks."""

from tradescore.analysis.orchestrator import (
    AnalysisOrchestrator,
    AnalysisReport,
    AnalysisStatus,
    SymbolAnalysis,
    run_analysis,
)
from tradescore.analysis.premarket import premarket_check, previous_close
from tradescore.analysis.screen import (
    ScreenCriteria,
    instrument_from_bars,
    screen,
    screen_failures,
)

__all__ = [
    "AnalysisOrchestrator",
    "AnalysisReport",
    "AnalysisStatus",
    "SymbolAnalysis",
    "run_analysis",
    "premarket_check",
    "previous_close",
    "ScreenCriteria",
    "instrument_from_bars",
    "screen",
    "screen_failures",
]
