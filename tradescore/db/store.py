"""SQLite data store for TradeScore."""

import json
import sqlite3
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Optional

from tradescore.models import Bar, Instrument
from tradescore.sources.base import AnalysisSink


class DataStore(AnalysisSink):
    """SQLite-based data store for bars, quotes, watch-lists and results."""

    REQUIRED_TABLES = [
        "bars",
        "quotes",
        "watchlist",
        "analysis_results",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            # Daily bars
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS bars (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    symbol TEXT NOT NULL,
                    date TEXT NOT NULL,
                    open REAL NOT NULL,
                    high REAL NOT NULL,
                    low REAL NOT NULL,
                    close REAL NOT NULL,
                    volume REAL NOT NULL,
                    adjusted_close REAL,
                    UNIQUE(symbol, date)
                )
            """)

            # Point-in-time quotes (pre/post market)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS quotes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    symbol TEXT NOT NULL,
                    date TEXT NOT NULL,
                    time TEXT NOT NULL,
                    price REAL NOT NULL,
                    volume REAL NOT NULL,
                    UNIQUE(symbol, date, time)
                )
            """)

            # Watch-list entries with scan-time metrics
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS watchlist (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    symbol TEXT NOT NULL,
                    list_name TEXT NOT NULL DEFAULT 'default',
                    name TEXT NOT NULL DEFAULT '',
                    last_price REAL NOT NULL DEFAULT 0,
                    volume REAL NOT NULL DEFAULT 0,
                    dollar_volume REAL NOT NULL DEFAULT 0,
                    float_shares REAL,
                    spread REAL,
                    market_cap REAL,
                    UNIQUE(symbol, list_name)
                )
            """)

            # Dated analysis batches, one row per symbol
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS analysis_results (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    analysis_date TEXT NOT NULL,
                    frequency TEXT NOT NULL,
                    stage TEXT NOT NULL,
                    symbol TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    saved_at TEXT NOT NULL,
                    UNIQUE(analysis_date, frequency, stage, symbol)
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Bars ====================

    def save_bars(self, bars: list[Bar]) -> None:
        """Save bars, replacing any existing bar for the same symbol and date.

        Args:
            bars: Bars to save.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            for bar in bars:
                cursor.execute(
                    """
                    INSERT OR REPLACE INTO bars
                    (symbol, date, open, high, low, close, volume, adjusted_close)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        bar.symbol,
                        bar.date.isoformat(),
                        bar.open,
                        bar.high,
                        bar.low,
                        bar.close,
                        bar.volume,
                        bar.adjusted_close,
                    ),
                )
            conn.commit()
        finally:
            conn.close()

    def get_bars(
        self,
        symbol: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> list[Bar]:
        """Get bars for a symbol, oldest first.

        Args:
            symbol: Trading symbol.
            from_date: Optional first date (inclusive).
            to_date: Optional last date (inclusive).

        Returns:
            List of bars in the date range.
        """
        query = "SELECT * FROM bars WHERE symbol = ?"
        params: list[Any] = [symbol]
        if from_date:
            query += " AND date >= ?"
            params.append(from_date.isoformat())
        if to_date:
            query += " AND date <= ?"
            params.append(to_date.isoformat())
        query += " ORDER BY date"

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_bar(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_bar_symbols(self) -> list[str]:
        """Get every symbol that has at least one bar."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT DISTINCT symbol FROM bars ORDER BY symbol")
            return [row["symbol"] for row in cursor.fetchall()]
        finally:
            conn.close()

    @staticmethod
    def _row_to_bar(row: sqlite3.Row) -> Bar:
        return Bar(
            symbol=row["symbol"],
            date=date.fromisoformat(row["date"]),
            open=row["open"],
            high=row["high"],
            low=row["low"],
            close=row["close"],
            volume=row["volume"],
            adjusted_close=row["adjusted_close"],
        )

    # ==================== Quotes ====================

    def save_quote(
        self, symbol: str, day: date, at: time, price: float, volume: float = 0
    ) -> None:
        """Save a point-in-time quote.

        Args:
            symbol: Trading symbol.
            day: Session date.
            at: Time of the quote.
            price: Quoted price.
            volume: Volume up to the quote.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO quotes (symbol, date, time, price, volume)
                VALUES (?, ?, ?, ?, ?)
                """,
                (symbol, day.isoformat(), at.isoformat(), price, volume),
            )
            conn.commit()
        finally:
            conn.close()

    def get_quote_at(self, symbol: str, day: date, at: time) -> Optional[dict]:
        """Get the latest quote at or before a session time.

        Returns:
            Dict with symbol, date, time, price, volume; None if not found.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT symbol, date, time, price, volume FROM quotes
                WHERE symbol = ? AND date = ? AND time <= ?
                ORDER BY time DESC LIMIT 1
                """,
                (symbol, day.isoformat(), at.isoformat()),
            )
            row = cursor.fetchone()
            return dict(row) if row else None
        finally:
            conn.close()

    # ==================== Watchlist ====================

    def add_to_watchlist(
        self, instrument: Instrument, list_name: str = "default"
    ) -> None:
        """Add or update an instrument in a watchlist.

        Args:
            instrument: Instrument to add.
            list_name: Name of the watchlist.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO watchlist
                (symbol, list_name, name, last_price, volume, dollar_volume,
                 float_shares, spread, market_cap)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    instrument.symbol,
                    list_name,
                    instrument.name,
                    instrument.last_price,
                    instrument.volume,
                    instrument.dollar_volume,
                    instrument.float_shares,
                    instrument.spread,
                    instrument.market_cap,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def remove_from_watchlist(self, symbol: str, list_name: str = "default") -> bool:
        """Remove a symbol from a watchlist.

        Returns:
            True if a row was removed.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM watchlist WHERE symbol = ? AND list_name = ?",
                (symbol, list_name),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def get_watchlist(self, list_name: str = "default") -> list[Instrument]:
        """Get all instruments in a watchlist, ordered by symbol."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM watchlist WHERE list_name = ? ORDER BY symbol",
                (list_name,),
            )
            return [
                Instrument(
                    symbol=row["symbol"],
                    name=row["name"],
                    last_price=row["last_price"],
                    volume=row["volume"],
                    dollar_volume=row["dollar_volume"],
                    float_shares=row["float_shares"],
                    spread=row["spread"],
                    market_cap=row["market_cap"],
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def get_watchlist_names(self) -> list[str]:
        """Get all watchlist names."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT DISTINCT list_name FROM watchlist ORDER BY list_name")
            return [row["list_name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Analysis Results ====================

    def save_analysis_results(
        self,
        analysis_date: date,
        stage: str,
        records: dict[str, dict[str, Any]],
        frequency: str = "daily",
    ) -> None:
        """Save a dated batch of per-symbol analysis records.

        Re-saving the same (date, frequency, stage, symbol) overwrites it.
        """
        saved_at = datetime.now().isoformat()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            for symbol, record in records.items():
                cursor.execute(
                    """
                    INSERT OR REPLACE INTO analysis_results
                    (analysis_date, frequency, stage, symbol, payload, saved_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        analysis_date.isoformat(),
                        frequency,
                        stage,
                        symbol,
                        json.dumps(record, sort_keys=True),
                        saved_at,
                    ),
                )
            conn.commit()
        finally:
            conn.close()

    def get_analysis_results(
        self, analysis_date: date, stage: str, frequency: str = "daily"
    ) -> dict[str, dict[str, Any]]:
        """Read back a saved batch as symbol -> record."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT symbol, payload FROM analysis_results
                WHERE analysis_date = ? AND stage = ? AND frequency = ?
                ORDER BY symbol
                """,
                (analysis_date.isoformat(), stage, frequency),
            )
            return {row["symbol"]: json.loads(row["payload"]) for row in cursor.fetchall()}
        finally:
            conn.close()
