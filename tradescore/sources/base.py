"""Collaborator interfaces for bar data, watch-lists and result storage.

The engines never branch on where data comes from: a host picks an
implementation (in-memory, SQLite, a market-data API) and injects it.
"""

from abc import ABC, abstractmethod
from datetime import date, time
from typing import Any, Optional

from pydantic import BaseModel, Field

from tradescore.models import Bar, Instrument


class Quote(BaseModel):
    """A single-point price/volume lookup (e.g. pre-market)."""

    symbol: str = Field(..., description="Trading symbol")
    session_date: date = Field(..., description="Session date")
    quote_time: time = Field(..., description="Time of the quote")
    price: float = Field(..., ge=0, description="Quoted price")
    volume: float = Field(0, ge=0, description="Volume traded up to the quote")

    model_config = {"frozen": True, "allow_inf_nan": False}


class BaseBarSource(ABC):
    """Abstract source of historical bars and point-in-time quotes."""

    @abstractmethod
    def get_series(self, symbol: str) -> list[Bar]:
        """Get all bars for a symbol, oldest first.

        Args:
            symbol: Trading symbol.

        Returns:
            Bars ordered by date; empty if the symbol is unknown.
        """
        pass

    @abstractmethod
    def get_quote_at(self, symbol: str, day: date, at: time) -> Optional[Quote]:
        """Get the quote for a symbol at a given session time.

        Returns:
            Quote, or None if no quote is recorded.
        """
        pass

    def get_all_series(self, symbols: Optional[list[str]] = None) -> list[Bar]:
        """Bulk series for several symbols (all symbols if None)."""
        bars: list[Bar] = []
        for symbol in symbols or self.symbols():
            bars.extend(self.get_series(symbol))
        return bars

    def symbols(self) -> list[str]:
        """Symbols this source can serve."""
        return []


class BaseWatchlistSource(ABC):
    """Abstract read-only source of instruments to analyze."""

    @abstractmethod
    def get_instruments(self) -> list[Instrument]:
        """Get the instruments on the watch-list."""
        pass


class AnalysisSink(ABC):
    """Abstract write-only destination for dated analysis batches."""

    @abstractmethod
    def save_analysis_results(
        self,
        analysis_date: date,
        stage: str,
        records: dict[str, dict[str, Any]],
        frequency: str = "daily",
    ) -> None:
        """Persist a batch of per-symbol records under (date, stage, frequency).

        Args:
            analysis_date: Date the analysis is stamped with.
            stage: Collection key, e.g. "final".
            records: symbol -> JSON-serialisable record.
            frequency: Bar cadence the batch was computed on.
        """
        pass
