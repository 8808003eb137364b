"""Shared helpers for CLI commands."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from tradescore.config import Settings, load_settings
from tradescore.models import Direction

console = Console()


def get_settings(ctx: click.Context) -> Settings:
    """Load settings once per invocation, honouring --config."""
    obj = ctx.ensure_object(dict)
    if "settings" not in obj:
        obj["settings"] = load_settings(obj.get("config_path"))
    return obj["settings"]


def get_data_store(ctx: click.Context):
    """Get the data store instance, honouring --db over the config file."""
    from tradescore.db.store import DataStore

    obj = ctx.ensure_object(dict)
    db_path: Optional[Path] = obj.get("db_path")
    return DataStore(db_path or get_settings(ctx).db_path)


def fail(title: str, error: Exception) -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{title}:[/red]\n\n{error}",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def parse_direction(value: Optional[str], default: Direction) -> Direction:
    """Map a case-insensitive --direction value onto Direction."""
    if value is None:
        return default
    return Direction(value.capitalize())
