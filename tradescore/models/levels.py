"""Support/resistance level model."""

from enum import Enum

from pydantic import BaseModel, Field


class LevelType(str, Enum):
    """Level classification."""

    SUPPORT = "Support"
    RESISTANCE = "Resistance"


class Level(BaseModel):
    """A clustered support or resistance zone."""

    price: float = Field(..., ge=0, description="Weighted average price of the zone")
    type: LevelType = Field(..., description="Support or Resistance")
    strength: int = Field(..., ge=1, description="Number of touches in the cluster")
    distance_percent: float = Field(
        ..., description="Signed distance from reference price, (price - ref) / ref * 100"
    )

    model_config = {"frozen": True}
