"""Instrument data model (watch-list / scanner entry)."""

from typing import Optional

from pydantic import BaseModel, Field


class Instrument(BaseModel):
    """A symbol selected for analysis, with scan-time liquidity metrics."""

    symbol: str = Field(..., min_length=1, description="Trading symbol")
    name: str = Field("", description="Company name")
    last_price: float = Field(0.0, ge=0, description="Last known price")
    volume: float = Field(0.0, ge=0, description="Average daily volume")
    dollar_volume: float = Field(0.0, ge=0, description="Average dollar volume")
    float_shares: Optional[float] = Field(None, ge=0, description="Share float")
    spread: Optional[float] = Field(None, ge=0, description="Bid/ask spread")
    market_cap: Optional[float] = Field(None, ge=0, description="Market capitalisation")

    model_config = {"frozen": True, "allow_inf_nan": False}
