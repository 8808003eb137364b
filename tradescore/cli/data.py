"""Data commands for TradeScore CLI.

Handles importing OHLCV history and pre-market quotes into the local
database and displaying stored bars.
"""

import json
from datetime import date, time
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError
from rich.table import Table

from tradescore.cli.common import console, fail, get_data_store
from tradescore.models import Bar


def _objects(items, where: str) -> list[dict]:
    """Check that every entry is a JSON object."""
    items = list(items)
    for item in items:
        if not isinstance(item, dict):
            raise ValueError(f"Expected an object in {where}, got {type(item).__name__}")
    return items


def parse_bars(payload: Any, symbol: Optional[str] = None) -> list[Bar]:
    """Parse bars from decoded JSON.

    Accepted shapes:
      - a list of bar objects, each with symbol and date
      - {symbol: {date: {open, high, low, close, volume}}}
      - {symbol: [bar objects with date]}

    Args:
        payload: Decoded JSON.
        symbol: Symbol to use for list entries that have none.

    Raises:
        ValueError: If the shape is unrecognised or a bar is invalid.
    """
    records: list[dict] = []

    if isinstance(payload, list):
        for item in _objects(payload, "bar list"):
            records.append({"symbol": symbol, **item} if symbol else dict(item))
    elif isinstance(payload, dict):
        for sym, series in payload.items():
            if isinstance(series, dict):
                entries = _objects(series.values(), f"bars for {sym}")
                records.extend({"symbol": sym, "date": d, **v} for d, v in zip(series, entries))
            elif isinstance(series, list):
                entries = _objects(series, f"bars for {sym}")
                records.extend({"symbol": sym, **item} for item in entries)
            else:
                raise ValueError(f"Unsupported series for {sym}: expected object or list")
    else:
        raise ValueError("Expected a JSON list or object of bars")

    try:
        return [Bar(**record) for record in records]
    except ValidationError as e:
        raise ValueError(f"Invalid bar data: {e}") from e


@click.group()
def data() -> None:
    """Import and inspect market data.

    \b
    Examples:
      tradescore data import bars.json
      tradescore data show AAPL --days 10
      tradescore data quote AAPL 2024-03-04 09:00 101.5 --volume 250000
    """
    pass


@data.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--symbol", default=None, help="Symbol for list entries without one.")
@click.pass_context
def import_bars(ctx: click.Context, path: Path, symbol: Optional[str]) -> None:
    """Import daily bars from a JSON file.

    PATH is a JSON file of bars (see `tradescore data --help`).
    """
    try:
        with open(path) as f:
            payload = json.load(f)
        bars = parse_bars(payload, symbol.upper() if symbol else None)
        store = get_data_store(ctx)
        store.save_bars(bars)
    except (OSError, ValueError) as e:
        fail("Failed to import bars", e)

    symbols = sorted({b.symbol for b in bars})
    console.print(
        f"[green]✓ Imported {len(bars)} bars for {len(symbols)} symbol(s):[/green] "
        + ", ".join(symbols)
    )


@data.command("show")
@click.argument("symbol")
@click.option("--days", "-d", default=20, type=click.IntRange(min=1), help="Bars to show.")
@click.pass_context
def show_bars(ctx: click.Context, symbol: str, days: int) -> None:
    """Show the most recent stored bars for SYMBOL."""
    symbol = symbol.upper()
    bars = get_data_store(ctx).get_bars(symbol)
    if not bars:
        console.print(f"[yellow]No bars stored for {symbol}[/yellow]")
        return

    table = Table(title=f"{symbol} (last {min(days, len(bars))} bars)", header_style="bold cyan")
    table.add_column("Date")
    table.add_column("Open", justify="right")
    table.add_column("High", justify="right")
    table.add_column("Low", justify="right")
    table.add_column("Close", justify="right")
    table.add_column("Volume", justify="right")

    for bar in bars[-days:]:
        table.add_row(
            bar.date.isoformat(),
            f"{bar.open:.2f}",
            f"{bar.high:.2f}",
            f"{bar.low:.2f}",
            f"{bar.close:.2f}",
            f"{bar.volume:,.0f}",
        )
    console.print(table)


@data.command("quote")
@click.argument("symbol")
@click.argument("day", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.argument("at", type=click.DateTime(formats=["%H:%M", "%H:%M:%S"]))
@click.argument("price", type=float)
@click.option("--volume", default=0.0, type=float, help="Volume traded up to the quote.")
@click.pass_context
def add_quote(ctx: click.Context, symbol: str, day, at, price: float, volume: float) -> None:
    """Record a pre-market quote for SYMBOL on DAY at time AT."""
    if price < 0 or volume < 0:
        fail("Invalid quote", ValueError("price and volume must be non-negative"))

    session_day: date = day.date()
    quote_time: time = at.time()
    get_data_store(ctx).save_quote(symbol.upper(), session_day, quote_time, price, volume)
    console.print(
        f"[green]✓ Saved quote {symbol.upper()} {session_day} {quote_time} @ {price:.2f}[/green]"
    )
