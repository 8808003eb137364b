"""Collaborator implementations backed by the SQLite DataStore."""

from datetime import date, time
from typing import Optional

from tradescore.db.store import DataStore
from tradescore.models import Bar, Instrument
from tradescore.sources.base import BaseBarSource, BaseWatchlistSource, Quote


class StoreBarSource(BaseBarSource):
    """Bar source reading bars and quotes from a DataStore."""

    def __init__(self, store: DataStore):
        self.store = store

    def get_series(self, symbol: str) -> list[Bar]:
        return self.store.get_bars(symbol)

    def get_quote_at(self, symbol: str, day: date, at: time) -> Optional[Quote]:
        row = self.store.get_quote_at(symbol, day, at)
        if row is None:
            return None
        return Quote(
            symbol=row["symbol"],
            session_date=date.fromisoformat(row["date"]),
            quote_time=time.fromisoformat(row["time"]),
            price=row["price"],
            volume=row["volume"],
        )

    def symbols(self) -> list[str]:
        return self.store.get_bar_symbols()


class StoreWatchlistSource(BaseWatchlistSource):
    """Watch-list source reading one named list from a DataStore."""

    def __init__(self, store: DataStore, list_name: str = "default"):
        self.store = store
        self.list_name = list_name

    def get_instruments(self) -> list[Instrument]:
        return self.store.get_watchlist(self.list_name)
