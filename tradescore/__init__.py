"""TradeScore - technical indicator scoring and risk/reward trade approval."""

__version__ = "0.1.0"
