"""Scan commands for TradeScore CLI.

Runs the full analysis over a watch-list, stores the batch, and
re-checks approved setups against pre-market quotes.
"""

from datetime import date, time
from typing import Optional

import click
from rich.table import Table

from tradescore.cli.analyze import DIRECTION_CHOICE
from tradescore.cli.common import console, fail, get_data_store, get_settings, parse_direction

STATUS_COLORS = {"approved": "green", "rejected": "red", "skipped": "yellow"}


@click.command()
@click.option("--list", "list_name", default="default", help="Watch-list to scan.")
@click.option("--date", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Analysis date (default: today).")
@click.option("--direction", type=DIRECTION_CHOICE, default=None, help="Trade direction.")
@click.option("--cadence", type=click.Choice(["daily", "weekly", "monthly"]), default=None,
              help="Bar cadence.")
@click.option("--approved-only", is_flag=True, help="Only show approved symbols.")
@click.pass_context
def scan(
    ctx: click.Context,
    list_name: str,
    as_of,
    direction: Optional[str],
    cadence: Optional[str],
    approved_only: bool,
) -> None:
    """Analyze every symbol on a watch-list and save the results.

    \b
    Examples:
      tradescore scan
      tradescore scan --list tech --direction short
      tradescore scan --date 2024-03-01 --approved-only
    """
    from tradescore.analysis.orchestrator import run_analysis
    from tradescore.sources.sqlite import StoreBarSource, StoreWatchlistSource

    settings = get_settings(ctx)
    day = as_of.date() if as_of else date.today()
    store = get_data_store(ctx)
    watchlist = StoreWatchlistSource(store, list_name)

    if not watchlist.get_instruments():
        console.print(f"[yellow]Watch-list '{list_name}' is empty[/yellow]")
        return

    try:
        report = run_analysis(
            StoreBarSource(store),
            watchlist,
            store,
            day,
            settings=settings,
            cadence=cadence,
            direction=parse_direction(direction, settings.direction),
        )
    except ValueError as e:
        fail("Scan failed", e)

    table = Table(
        title=f"Scan {day} ({report.cadence}, {report.direction.value})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Symbol", style="bold")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Signal")
    table.add_column("Entry", justify="right")
    table.add_column("Stop", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("R:R", justify="right")
    table.add_column("Note")

    for result in report.results:
        if approved_only and result.status.value != "approved":
            continue
        color = STATUS_COLORS[result.status.value]
        rr_result = result.trade_setup.risk_reward if result.trade_setup else None
        table.add_row(
            result.symbol,
            f"[{color}]{result.status.value}[/{color}]",
            str(result.composite_score) if result.composite_score is not None else "-",
            result.signal or "-",
            f"{rr_result.entry:.2f}" if rr_result else "-",
            f"{rr_result.stop_loss:.2f}" if rr_result else "-",
            f"{rr_result.target:.2f}" if rr_result else "-",
            f"{rr_result.ratio:.2f}" if rr_result else "-",
            result.reason,
        )

    console.print(table)
    console.print(
        f"[dim]{len(report.approved)} approved, {len(report.rejected)} rejected, "
        f"{len(report.skipped)} skipped. Saved as '{day}' final.[/dim]"
    )


@click.command()
@click.option("--date", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Session date of the pre-market quotes (default: today).")
@click.option("--scan-date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Date of the saved scan (default: previous trading day).")
@click.option("--time", "at", type=click.DateTime(formats=["%H:%M"]), default="09:00",
              help="Quote time to use (default: 09:00).")
@click.option("--cadence", type=click.Choice(["daily", "weekly", "monthly"]), default="daily",
              help="Cadence of the saved scan.")
@click.pass_context
def premarket(ctx: click.Context, as_of, scan_date, at, cadence: str) -> None:
    """Re-check approved setups from the last scan against pre-market gaps.

    \b
    Examples:
      tradescore premarket
      tradescore premarket --date 2024-03-04 --time 09:15
    """
    from tradescore.analysis.orchestrator import FINAL_STAGE, SymbolAnalysis
    from tradescore.analysis.premarket import premarket_check
    from tradescore.data.index import previous_trading_day
    from tradescore.sources.sqlite import StoreBarSource

    settings = get_settings(ctx)
    day = as_of.date() if as_of else date.today()
    saved_day = scan_date.date() if scan_date else previous_trading_day(day)
    quote_time: time = at.time()
    store = get_data_store(ctx)

    records = store.get_analysis_results(saved_day, FINAL_STAGE, cadence)
    setups = []
    for record in records.values():
        result = SymbolAnalysis.model_validate(record)
        if result.status.value == "approved" and result.trade_setup is not None:
            setups.append(result.trade_setup)

    if not setups:
        console.print(f"[yellow]No approved setups saved for {saved_day} ({cadence})[/yellow]")
        return

    adjustments = premarket_check(
        StoreBarSource(store), setups, day, quote_time, settings.min_ratio
    )
    if not adjustments:
        console.print(f"[yellow]No pre-market quotes found for {day} at {quote_time}[/yellow]")
        return

    table = Table(title=f"Pre-market {day} {quote_time}", show_header=True, header_style="bold cyan")
    table.add_column("Symbol", style="bold")
    table.add_column("Gap %", justify="right")
    table.add_column("Priority", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Stop", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("R:R", justify="right")
    table.add_column("Valid")
    table.add_column("PM Vol (M)", justify="right")

    for adj in adjustments:
        volume = f"{adj.premarket_volume / 1_000_000:.2f}" if adj.premarket_volume else "-"
        table.add_row(
            adj.symbol,
            f"{adj.gap_percent:+.2f}",
            str(adj.priority),
            f"{adj.entry:.2f}",
            f"{adj.stop_loss:.2f}",
            f"{adj.target:.2f}",
            f"{adj.ratio:.2f}",
            "[green]yes[/green]" if adj.valid else "[red]no[/red]",
            volume,
        )
    console.print(table)

    store.save_analysis_results(
        day,
        "premarket",
        {adj.symbol: adj.model_dump(mode="json") for adj in adjustments},
        frequency=cadence,
    )
