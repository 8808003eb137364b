"""Risk/reward result models."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from tradescore.models.reading import Direction


class RiskRewardResult(BaseModel):
    """Stop, target and reward:risk decision for one entry."""

    entry: float = Field(..., ge=0, description="Entry price")
    stop_loss: float = Field(..., description="Stop-loss price")
    target: float = Field(..., description="Target price")
    risk: float = Field(..., ge=0, description="|entry - stop|")
    reward: float = Field(..., ge=0, description="|target - entry|")
    risk_percent: float = Field(..., ge=0, description="Risk as % of entry")
    reward_percent: float = Field(..., ge=0, description="Reward as % of entry")
    ratio: float = Field(..., ge=0, description="reward / risk (0 when risk is 0)")
    approved: bool = Field(..., description="ratio >= minimum ratio")
    confidence: int = Field(..., ge=0, le=100, description="Mean of stop and target confidence")
    method: str = Field("", description="How stop and target were derived")

    model_config = {"frozen": True}


class TradeSetup(BaseModel):
    """Risk/reward result combined with a composite score."""

    symbol: str = Field(..., description="Trading symbol")
    direction: Direction = Field(..., description="Trade direction")
    entry_price: float = Field(..., ge=0, description="Entry price")
    risk_reward: RiskRewardResult = Field(..., description="Risk/reward computation")
    composite_score: float = Field(..., description="Externally computed composite score")
    final_approval: bool = Field(..., description="score >= min score and R:R approved")

    model_config = {"frozen": True}


class GapAdjustment(BaseModel):
    """A trade setup re-priced against a pre-market quote."""

    symbol: str = Field(..., description="Trading symbol")
    direction: Direction = Field(..., description="Trade direction")
    previous_close: float = Field(..., ge=0, description="Prior session close")
    premarket_price: float = Field(..., ge=0, description="Pre-market quote price")
    premarket_volume: Optional[float] = Field(None, ge=0, description="Pre-market volume")
    gap_percent: float = Field(..., description="(pm - close) / close * 100")
    priority: int = Field(..., ge=-1, le=1, description="1 ideal gap, 0 acceptable, -1 avoid")
    entry: float = Field(..., ge=0, description="Adjusted entry price")
    stop_loss: float = Field(..., description="Gap-shifted stop")
    target: float = Field(..., description="Gap-shifted target")
    risk: float = Field(..., description="Adjusted risk (signed for the direction)")
    reward: float = Field(..., description="Adjusted reward (signed for the direction)")
    ratio: float = Field(..., ge=0, description="Adjusted reward/risk, 0 when risk <= 0")
    valid: bool = Field(..., description="Adjusted ratio still meets the minimum")
    as_of: Optional[date] = Field(None, description="Session the quote belongs to")

    model_config = {"frozen": True}
