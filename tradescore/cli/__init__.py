"""CLI commands for TradeScore.

This package provides the command-line interface for TradeScore,
including data import, watch-list management, analysis and scanning.
"""

from tradescore.cli.main import cli, main

__all__ = ["cli", "main"]
