"""Main CLI entry point for TradeScore.

This module provides the main click group, logging setup and lazy
loading of command modules to keep startup fast.
"""

import importlib
import logging
from pathlib import Path
from typing import Optional

import click
from rich.logging import RichHandler

from tradescore.cli.common import console, get_settings


class LazyGroup(click.Group):
    """A click Group that imports command modules only when invoked."""

    def __init__(self, *args, lazy_subcommands: Optional[dict[str, str]] = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]
        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)
        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Import a command from its module path and register it."""
        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = getattr(module, cmd_name, None)
        if not isinstance(cmd, click.Command):
            # Fall back to a command whose click name matches
            cmd = next(
                (
                    attr for attr in vars(module).values()
                    if isinstance(attr, click.Command) and attr.name == cmd_name
                ),
                None,
            )
        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    "data": "tradescore.cli.data",
    "watch": "tradescore.cli.watchlist",
    "analyze": "tradescore.cli.analyze",
    "rr": "tradescore.cli.analyze",
    "scan": "tradescore.cli.scan",
    "premarket": "tradescore.cli.scan",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(level: str) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradescore")
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/tradescore/config.toml).",
)
@click.option(
    "--db", "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SQLite database file (overrides the config file).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    db_path: Optional[Path],
    verbose: bool,
) -> None:
    """TradeScore - technical scoring and risk/reward trade approval.

    Import daily bars, keep a watch-list, and score each symbol on
    momentum, trend, volatility and relative strength before checking
    its reward:risk.

    \b
    Quick Start:
      tradescore data import bars.json   # Load OHLCV history
      tradescore watch add AAPL          # Add to watch-list
      tradescore scan                    # Analyze the watch-list
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["db_path"] = db_path

    try:
        settings = get_settings(ctx)
    except ValueError as e:
        raise click.ClickException(str(e))
    setup_logging("DEBUG" if verbose else settings.log_level)


@cli.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_context
def init_config(ctx: click.Context, force: bool) -> None:
    """Write a template config file with the default settings."""
    from tradescore.config import CONFIG_PATH, create_template_config

    path = ctx.obj.get("config_path") or CONFIG_PATH
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path} (use --force to overwrite)[/yellow]")
        return

    create_template_config(path)
    console.print(f"[green]✓ Wrote config template to {path}[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
