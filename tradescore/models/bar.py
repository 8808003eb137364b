"""Bar (daily OHLCV) data model."""

import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Bar(BaseModel):
    """A single trading-day OHLCV bar for one symbol."""

    date: datetime.date = Field(..., description="Trading day")
    symbol: str = Field(..., min_length=1, description="Trading symbol")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: float = Field(0, ge=0, description="Trading volume")
    adjusted_close: Optional[float] = Field(
        None, ge=0, description="Split/dividend adjusted close"
    )

    model_config = {"frozen": True, "allow_inf_nan": False}

    @model_validator(mode="after")
    def _check_price_order(self) -> "Bar":
        if self.high < max(self.open, self.close):
            raise ValueError(
                f"{self.symbol} {self.date}: high {self.high} below open/close"
            )
        if self.low > min(self.open, self.close):
            raise ValueError(
                f"{self.symbol} {self.date}: low {self.low} above open/close"
            )
        return self
