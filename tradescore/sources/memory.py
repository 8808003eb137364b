"""In-memory bar, watch-list and result sources."""

from datetime import date, time
from typing import Any, Iterable, Optional

from tradescore.models import Bar, Instrument
from tradescore.sources.base import AnalysisSink, BaseBarSource, BaseWatchlistSource, Quote


class InMemoryBarSource(BaseBarSource):
    """Bar source backed by lists held in memory."""

    def __init__(self, bars: Iterable[Bar] = (), quotes: Iterable[Quote] = ()):
        self._bars: dict[str, list[Bar]] = {}
        for bar in bars:
            self._bars.setdefault(bar.symbol, []).append(bar)
        for series in self._bars.values():
            series.sort(key=lambda b: b.date)

        self._quotes: dict[tuple[str, date], list[Quote]] = {}
        for quote in quotes:
            self._quotes.setdefault((quote.symbol, quote.session_date), []).append(quote)

    def get_series(self, symbol: str) -> list[Bar]:
        return list(self._bars.get(symbol, []))

    def get_quote_at(self, symbol: str, day: date, at: time) -> Optional[Quote]:
        """Latest quote at or before `at` on `day`."""
        candidates = [
            q for q in self._quotes.get((symbol, day), []) if q.quote_time <= at
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda q: q.quote_time)

    def symbols(self) -> list[str]:
        return sorted(self._bars)


class InMemoryWatchlist(BaseWatchlistSource):
    """Watch-list held in memory."""

    def __init__(self, instruments: Iterable[Instrument] = ()):
        self._instruments = list(instruments)

    def get_instruments(self) -> list[Instrument]:
        return list(self._instruments)


class InMemorySink(AnalysisSink):
    """Collects saved batches in a dict keyed by (date, stage, frequency)."""

    def __init__(self):
        self.batches: dict[tuple[date, str, str], dict[str, dict[str, Any]]] = {}

    def save_analysis_results(
        self,
        analysis_date: date,
        stage: str,
        records: dict[str, dict[str, Any]],
        frequency: str = "daily",
    ) -> None:
        self.batches[(analysis_date, stage, frequency)] = dict(records)
