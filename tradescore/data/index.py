"""Series indexer: (symbol, date) -> Bar lookups and trading-day walks.

The index is a plain value built once per analysis session and passed into
every lookup. Rebuild it when the backing series changes; never mutate it.
"""

import logging
from datetime import date, timedelta
from functools import lru_cache
from typing import Iterable, Optional

from tradescore.models import Bar

logger = logging.getLogger(__name__)

MONDAY, THURSDAY = 0, 3


def _nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    """The n-th given weekday (1-based) of a month."""
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + 7 * (n - 1))


def _last_weekday(year: int, month: int, weekday: int) -> date:
    day = date(year, month + 1, 1) - timedelta(days=1)
    return day - timedelta(days=(day.weekday() - weekday) % 7)


@lru_cache(maxsize=None)
def us_market_holidays(year: int) -> frozenset[date]:
    """US holidays skipped by the trading calendar for a year.

    Fixed-date holidays are taken on the date itself, with no shift to an
    observed weekday.
    """
    return frozenset({
        date(year, 1, 1),                        # New Year's Day
        _nth_weekday(year, 1, MONDAY, 3),        # Martin Luther King Jr. Day
        _nth_weekday(year, 2, MONDAY, 3),        # Presidents' Day
        _last_weekday(year, 5, MONDAY),          # Memorial Day
        date(year, 7, 4),                        # Independence Day
        _nth_weekday(year, 9, MONDAY, 1),        # Labor Day
        _nth_weekday(year, 10, MONDAY, 2),       # Columbus Day
        date(year, 11, 11),                      # Veterans Day
        _nth_weekday(year, 11, THURSDAY, 4),     # Thanksgiving
        date(year, 12, 25),                      # Christmas Day
    })


def is_trading_day(day: date) -> bool:
    """Weekdays that are not US market holidays."""
    return day.weekday() < 5 and day not in us_market_holidays(day.year)


def previous_trading_day(day: date) -> date:
    """Return the closest trading day strictly before `day`."""
    prev = day - timedelta(days=1)
    while not is_trading_day(prev):
        prev -= timedelta(days=1)
    return prev


class SeriesIndex:
    """Read-only mapping symbol -> (date -> Bar)."""

    def __init__(self, bars_by_symbol: dict[str, dict[date, Bar]]):
        self._bars = bars_by_symbol
        self._sorted_dates: dict[str, list[date]] = {
            symbol: sorted(by_date) for symbol, by_date in bars_by_symbol.items()
        }

    @property
    def symbols(self) -> list[str]:
        """Symbols present in the index, sorted."""
        return sorted(self._bars)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._bars

    def __len__(self) -> int:
        return sum(len(by_date) for by_date in self._bars.values())

    def get(self, symbol: str, day: date) -> Optional[Bar]:
        """Return the bar for (symbol, day), or None."""
        return self._bars.get(symbol, {}).get(day)

    def dates(self, symbol: str) -> list[date]:
        """All dates held for a symbol, oldest first."""
        return list(self._sorted_dates.get(symbol, []))

    def tail(self, symbol: str, end_date: date, count: int) -> list[Bar]:
        """Return up to `count` bars on or before `end_date`, oldest first.

        Unlike lookback(), this does not assume one bar per weekday, so it
        serves weekly and monthly series.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if count == 0:
            return []
        days = [d for d in self._sorted_dates.get(symbol, []) if d <= end_date]
        return [self._bars[symbol][d] for d in days[-count:]]


def build_index(series: Iterable[Bar]) -> SeriesIndex:
    """Group bars by symbol then by date.

    Duplicate (symbol, date) pairs are a data-quality problem: they are
    logged and the last bar seen wins.
    """
    bars_by_symbol: dict[str, dict[date, Bar]] = {}
    duplicates = 0

    for bar in series:
        by_date = bars_by_symbol.setdefault(bar.symbol, {})
        if bar.date in by_date:
            duplicates += 1
            logger.warning(
                "Duplicate bar for %s on %s; keeping the later one",
                bar.symbol,
                bar.date.isoformat(),
            )
        by_date[bar.date] = bar

    if duplicates:
        logger.warning("Index built with %d duplicate bar(s)", duplicates)

    return SeriesIndex(bars_by_symbol)


def lookback(
    index: SeriesIndex, symbol: str, end_date: date, trading_days: int
) -> list[Bar]:
    """Collect the last `trading_days` bars for a symbol ending at `end_date`.

    Walks calendar days backward from end_date (inclusive), skipping
    Saturdays and Sundays, for at most 2 * trading_days weekday steps.
    Sparse history yields fewer bars, possibly none; callers decide whether
    that is enough.

    Args:
        index: Index built by build_index().
        symbol: Symbol to look up.
        end_date: Last calendar day to consider.
        trading_days: Number of bars wanted.

    Returns:
        Bars ordered oldest to newest.
    """
    if trading_days < 0:
        raise ValueError(f"trading_days must be non-negative, got {trading_days}")

    found: list[Bar] = []
    max_steps = 2 * trading_days
    steps = 0
    day = end_date

    while len(found) < trading_days and steps < max_steps:
        if day.weekday() < 5:
            steps += 1
            bar = index.get(symbol, day)
            if bar is not None:
                found.append(bar)
        day -= timedelta(days=1)

    found.reverse()
    return found


def find_last_trading_day(
    index: SeriesIndex, symbol: str, target: date, max_days: int = 10
) -> Optional[date]:
    """Return the latest date <= target that has a bar, searching max_days back."""
    day = target
    for _ in range(max_days + 1):
        if index.get(symbol, day) is not None:
            return day
        day -= timedelta(days=1)
    return None
