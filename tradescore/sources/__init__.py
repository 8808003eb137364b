"""Data source and persistence collaborators.

The SQLite-backed implementations live in tradescore.sources.sqlite.
"""

from tradescore.sources.base import AnalysisSink, BaseBarSource, BaseWatchlistSource, Quote
from tradescore.sources.memory import InMemoryBarSource, InMemorySink, InMemoryWatchlist

__all__ = [
    "AnalysisSink",
    "BaseBarSource",
    "BaseWatchlistSource",
    "Quote",
    "InMemoryBarSource",
    "InMemorySink",
    "InMemoryWatchlist",
]
