"""Risk/reward engine."""

from tradescore.risk.reward import (
    DEFAULT_MIN_RATIO,
    DEFAULT_MIN_SCORE,
    approve_trade_with_rr,
    build_result,
    calculate_risk_reward,
    calculate_stop_loss,
    calculate_target,
    gap_adjust,
    gap_priority,
    risk_reward_from_levels,
    simple_risk_reward,
)

__all__ = [
    "DEFAULT_MIN_RATIO",
    "DEFAULT_MIN_SCORE",
    "approve_trade_with_rr",
    "build_result",
    "calculate_risk_reward",
    "calculate_stop_loss",
    "calculate_target",
    "gap_adjust",
    "gap_priority",
    "risk_reward_from_levels",
    "simple_risk_reward",
]
