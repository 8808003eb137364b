"""Analyze commands for TradeScore CLI.

Scores a single symbol and checks reward:risk for a proposed entry.
"""

from datetime import date
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradescore.cli.common import console, fail, get_data_store, get_settings, parse_direction
from tradescore.models import Direction, RiskRewardResult

DIRECTION_CHOICE = click.Choice([d.value for d in Direction], case_sensitive=False)


def _score_color(score: float) -> str:
    if score >= 60:
        return "green"
    elif score >= 40:
        return "yellow"
    return "red"


def print_risk_reward(symbol: str, result: RiskRewardResult) -> None:
    """Render a risk/reward result as a panel."""
    verdict = "[bold green]APPROVED[/bold green]" if result.approved else "[bold red]REJECTED[/bold red]"
    lines = [
        f"Entry:      {result.entry:.2f}",
        f"Stop Loss:  {result.stop_loss:.2f}  (risk {result.risk:.2f}, {result.risk_percent:.2f}%)",
        f"Target:     {result.target:.2f}  (reward {result.reward:.2f}, {result.reward_percent:.2f}%)",
        f"R:R Ratio:  {result.ratio:.2f}",
        f"Confidence: {result.confidence}%",
        f"Method:     {result.method}",
        "",
        f"R:R {verdict}",
    ]
    console.print(Panel("\n".join(lines), title=f"[bold]{symbol} Risk/Reward[/bold]", border_style="cyan"))


@click.command()
@click.argument("symbol")
@click.option("--date", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Analysis date (default: today).")
@click.option("--direction", type=DIRECTION_CHOICE, default=None, help="Trade direction.")
@click.option("--cadence", type=click.Choice(["daily", "weekly", "monthly"]), default=None,
              help="Bar cadence.")
@click.pass_context
def analyze(
    ctx: click.Context,
    symbol: str,
    as_of,
    direction: Optional[str],
    cadence: Optional[str],
) -> None:
    """Score SYMBOL on momentum, trend, volatility and relative strength.

    \b
    Examples:
      tradescore analyze AAPL
      tradescore analyze AAPL --direction short --date 2024-03-01
    """
    from tradescore.analysis.orchestrator import AnalysisOrchestrator, AnalysisStatus
    from tradescore.data.index import build_index

    symbol = symbol.upper()
    settings = get_settings(ctx)
    trade_direction = parse_direction(direction, settings.direction)
    day = as_of.date() if as_of else date.today()

    store = get_data_store(ctx)
    bars = store.get_bars(symbol, to_date=day) + store.get_bars(settings.benchmark, to_date=day)
    try:
        orchestrator = AnalysisOrchestrator(build_index(bars), settings, cadence)
        report = orchestrator.run([symbol], day, trade_direction)
    except ValueError as e:
        fail("Analysis failed", e)

    result = report.results[0]
    if result.status == AnalysisStatus.SKIPPED:
        console.print(Panel(
            f"[yellow]Skipped:[/yellow] {result.reason}",
            title=f"[bold]{symbol}[/bold]",
            border_style="yellow",
        ))
        return

    reading = result.reading
    table = Table(
        title=f"{symbol} {trade_direction.value} scores as of {reading.as_of}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Score")
    table.add_column("Value", justify="right")
    table.add_column("Detail")
    for score in result.scores:
        color = _score_color(score.value)
        table.add_row(score.kind.value, f"[{color}]{score.value}[/{color}]", score.label)
    color = _score_color(result.composite_score)
    table.add_row(
        "[bold]Composite[/bold]",
        f"[bold {color}]{result.composite_score}[/bold {color}]",
        result.signal,
    )
    console.print(table)

    macd_note = " (reduced)" if reading.macd_reduced else ""
    console.print(
        f"[dim]SMA {reading.sma_short:.2f}/{reading.sma_long:.2f} | "
        f"MACD {'/'.join(map(str, reading.macd_periods))}{macd_note} hist {reading.macd_histogram:+.4f} | "
        f"ADX {reading.adx:.1f} | ATR {reading.atr:.2f} | "
        f"BB width {reading.bollinger.width:.2f}% %b {reading.bollinger.percent_b:.2f}[/dim]"
    )

    print_risk_reward(symbol, result.trade_setup.risk_reward)
    status_color = "green" if result.status == AnalysisStatus.APPROVED else "red"
    suffix = f" - {result.reason}" if result.reason else ""
    console.print(f"[bold {status_color}]{result.status.value.upper()}[/bold {status_color}]{suffix}")


@click.command()
@click.argument("symbol")
@click.option("--entry", type=float, required=True, help="Entry price.")
@click.option("--direction", type=DIRECTION_CHOICE, default=None, help="Trade direction.")
@click.option("--score", type=float, default=None,
              help="Composite score; adds the final approval check.")
@click.option("--stop", type=float, default=None, help="Manual stop-loss price.")
@click.option("--target", type=float, default=None, help="Manual target price.")
@click.pass_context
def rr(
    ctx: click.Context,
    symbol: str,
    entry: float,
    direction: Optional[str],
    score: Optional[float],
    stop: Optional[float],
    target: Optional[float],
) -> None:
    """Check reward:risk for an entry on SYMBOL.

    Without --stop/--target the stop and target come from stored bars
    (support/resistance, then ATR).

    \b
    Examples:
      tradescore rr AAPL --entry 182.5
      tradescore rr AAPL --entry 182.5 --score 72
      tradescore rr AAPL --entry 182.5 --stop 178 --target 192
    """
    from tradescore.risk.reward import approve_trade_with_rr, simple_risk_reward

    symbol = symbol.upper()
    settings = get_settings(ctx)
    trade_direction = parse_direction(direction, settings.direction)

    if (stop is None) != (target is None):
        fail("Invalid levels", ValueError("--stop and --target must be given together"))

    try:
        if stop is not None:
            result = simple_risk_reward(entry, stop, target, settings.min_ratio)
            print_risk_reward(symbol, result)
            return

        bars = get_data_store(ctx).get_bars(symbol)
        setup = approve_trade_with_rr(
            symbol,
            trade_direction,
            entry,
            score if score is not None else 0.0,
            bars,
            min_ratio=settings.min_ratio,
            min_score=settings.min_score,
            lookback=settings.levels_lookback(),
        )
    except ValueError as e:
        fail("Risk/reward failed", e)

    if setup is None:
        console.print(f"[yellow]Not enough bars stored for {symbol} to compute ATR[/yellow]")
        return

    print_risk_reward(symbol, setup.risk_reward)
    if score is not None:
        verdict = "[bold green]YES[/bold green]" if setup.final_approval else "[bold red]NO[/bold red]"
        console.print(f"Final approval (score {score:g} >= {settings.min_score:g} and R:R): {verdict}")
