"""Persistence layer for TradeScore."""
