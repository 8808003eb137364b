"""Series indexing for TradeScore."""

from tradescore.data.index import (
    SeriesIndex,
    build_index,
    find_last_trading_day,
    is_trading_day,
    lookback,
    previous_trading_day,
    us_market_holidays,
)

__all__ = [
    "SeriesIndex",
    "build_index",
    "find_last_trading_day",
    "is_trading_day",
    "lookback",
    "previous_trading_day",
    "us_market_holidays",
]
