"""Liquidity screen for building a watch-list from scanned instruments."""

from typing import Sequence

from pydantic import BaseModel, Field

from tradescore.models import Bar, Instrument

AVG_VOLUME_BARS = 20


class ScreenCriteria(BaseModel):
    """Minimum liquidity an instrument needs to be analyzed."""

    min_price: float = Field(5.0, ge=0, description="Minimum last price")
    min_avg_volume: float = Field(5_000_000, ge=0, description="Minimum 20-day average volume")
    min_dollar_volume: float = Field(30_000_000, ge=0, description="Minimum price * avg volume")
    min_float: float = Field(30_000_000, ge=0, description="Minimum share float")
    min_market_cap: float = Field(
        500_000_000, ge=0, description="Market cap that substitutes for the float test"
    )
    max_spread: float = Field(0.5, ge=0, description="Maximum spread, % of price")

    model_config = {"frozen": True}


def instrument_from_bars(symbol: str, bars: Sequence[Bar], name: str = "") -> Instrument:
    """Derive last price and average volumes from recent bars."""
    if not bars:
        raise ValueError(f"no bars for {symbol}")

    recent = bars[-AVG_VOLUME_BARS:]
    avg_volume = sum(b.volume for b in recent) / len(recent)
    last_price = bars[-1].close

    return Instrument(
        symbol=symbol,
        name=name,
        last_price=last_price,
        volume=avg_volume,
        dollar_volume=last_price * avg_volume,
    )


def screen_failures(instrument: Instrument, criteria: ScreenCriteria) -> list[str]:
    """Names of the liquidity tests an instrument fails (empty = passes).

    The float test also passes on a large enough market cap. A missing
    spread is not measured and so does not fail.
    """
    failures = []
    if instrument.last_price < criteria.min_price:
        failures.append("price")
    if instrument.volume < criteria.min_avg_volume:
        failures.append("volume")
    if instrument.dollar_volume < criteria.min_dollar_volume:
        failures.append("dollar_volume")

    float_ok = (instrument.float_shares or 0) >= criteria.min_float
    cap_ok = (instrument.market_cap or 0) >= criteria.min_market_cap
    if not (float_ok or cap_ok):
        failures.append("float")

    if instrument.spread is not None and instrument.spread > criteria.max_spread:
        failures.append("spread")
    return failures


def screen(instruments: Sequence[Instrument], criteria: ScreenCriteria) -> list[Instrument]:
    """Instruments passing every liquidity test, in input order."""
    return [i for i in instruments if not screen_failures(i, criteria)]
