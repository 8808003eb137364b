"""Watchlist management commands for TradeScore CLI.

Handles add, remove, list and screen operations on named watch-lists.
"""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradescore.cli.common import console, fail, get_data_store
from tradescore.models import Instrument


@click.group()
def watch() -> None:
    """Manage watch-lists.

    \b
    Examples:
      tradescore watch add AAPL                 # Add to default watch-list
      tradescore watch add MSFT --list tech     # Add to 'tech' watch-list
      tradescore watch list                     # Show all watch-lists
      tradescore watch screen                   # Add liquid stored symbols
    """
    pass


@watch.command("add")
@click.argument("symbol")
@click.option("--list", "list_name", default="default", help="Watch-list name.")
@click.option("--name", default="", help="Company name.")
@click.option("--float", "float_shares", type=float, default=None, help="Share float.")
@click.option("--market-cap", type=float, default=None, help="Market capitalisation.")
@click.option("--spread", type=float, default=None, help="Bid/ask spread, % of price.")
@click.pass_context
def add_symbol(
    ctx: click.Context,
    symbol: str,
    list_name: str,
    name: str,
    float_shares: Optional[float],
    market_cap: Optional[float],
    spread: Optional[float],
) -> None:
    """Add SYMBOL to a watch-list.

    Price and volume metrics are taken from stored bars when available.
    """
    from tradescore.analysis.screen import instrument_from_bars

    symbol = symbol.upper()
    try:
        store = get_data_store(ctx)
        current = {i.symbol for i in store.get_watchlist(list_name)}
        if symbol in current:
            console.print(f"[yellow]{symbol} is already in watch-list '{list_name}'[/yellow]")
            return

        bars = store.get_bars(symbol)
        base = instrument_from_bars(symbol, bars, name) if bars else Instrument(symbol=symbol, name=name)
        instrument = base.model_copy(
            update={"float_shares": float_shares, "market_cap": market_cap, "spread": spread}
        )
        store.add_to_watchlist(instrument, list_name)
    except ValueError as e:
        fail("Failed to add symbol", e)

    console.print(f"[green]✓ Added {symbol} to watch-list '{list_name}'[/green]")


@watch.command("remove")
@click.argument("symbol")
@click.option("--list", "list_name", default="default", help="Watch-list name.")
@click.pass_context
def remove_symbol(ctx: click.Context, symbol: str, list_name: str) -> None:
    """Remove SYMBOL from a watch-list."""
    symbol = symbol.upper()
    if get_data_store(ctx).remove_from_watchlist(symbol, list_name):
        console.print(f"[green]✓ Removed {symbol} from watch-list '{list_name}'[/green]")
    else:
        console.print(f"[yellow]{symbol} is not in watch-list '{list_name}'[/yellow]")


def _print_watchlist(list_name: str, instruments: list[Instrument]) -> None:
    table = Table(
        title=f"Watch-list: {list_name}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Symbol", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Avg Volume", justify="right")

    for i, instrument in enumerate(instruments, 1):
        table.add_row(
            str(i),
            instrument.symbol,
            f"{instrument.last_price:.2f}",
            f"{instrument.volume:,.0f}",
        )
    console.print(table)
    console.print(f"[dim]Total: {len(instruments)} symbols[/dim]\n")


@watch.command("list")
@click.option("--list", "list_name", default=None, help="Watch-list to show (default: all).")
@click.pass_context
def list_watchlist(ctx: click.Context, list_name: Optional[str]) -> None:
    """Display watch-list symbols."""
    store = get_data_store(ctx)
    names = [list_name] if list_name else store.get_watchlist_names()

    shown = False
    for name in names:
        instruments = store.get_watchlist(name)
        if instruments:
            _print_watchlist(name, instruments)
            shown = True

    if not shown:
        console.print(Panel(
            "[dim]No symbols found. Use 'tradescore watch add SYMBOL' to add one.[/dim]",
            title="[bold]Watch-lists[/bold]",
            border_style="dim",
        ))


@watch.command("screen")
@click.option("--list", "list_name", default="default", help="Watch-list to add to.")
@click.option("--min-price", type=float, default=None, help="Minimum last price.")
@click.option("--min-volume", type=float, default=None, help="Minimum 20-day average volume.")
@click.option("--min-dollar-volume", type=float, default=None, help="Minimum dollar volume.")
@click.pass_context
def screen_symbols(
    ctx: click.Context,
    list_name: str,
    min_price: Optional[float],
    min_volume: Optional[float],
    min_dollar_volume: Optional[float],
) -> None:
    """Add every stored symbol that passes the liquidity screen.

    Float and market cap are unknown for symbols derived from bars alone,
    so the float test is disabled here.
    """
    from tradescore.analysis.screen import ScreenCriteria, instrument_from_bars, screen

    overrides = {
        "min_price": min_price,
        "min_avg_volume": min_volume,
        "min_dollar_volume": min_dollar_volume,
    }
    criteria = ScreenCriteria(
        min_float=0, **{k: v for k, v in overrides.items() if v is not None}
    )

    store = get_data_store(ctx)
    candidates = [
        instrument_from_bars(symbol, store.get_bars(symbol))
        for symbol in store.get_bar_symbols()
    ]
    passed = screen(candidates, criteria)
    for instrument in passed:
        store.add_to_watchlist(instrument, list_name)

    console.print(
        f"[green]✓ {len(passed)} of {len(candidates)} symbols passed the screen "
        f"and were added to '{list_name}'[/green]"
    )
