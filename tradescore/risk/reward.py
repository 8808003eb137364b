"""Risk/reward engine: stops, targets and trade approval.

Stops and targets prefer nearby support/resistance zones and fall back to
ATR multiples. A trade is approved when reward:risk meets the minimum
ratio; final approval additionally needs a high enough composite score.
"""

from typing import Optional, Sequence

from tradescore.indicators.levels import DEFAULT_LOOKBACK, find_levels
from tradescore.indicators.technical import calculate_atr
from tradescore.models import (
    Bar,
    Direction,
    GapAdjustment,
    Level,
    LevelType,
    RiskRewardResult,
    TradeSetup,
)
from tradescore.utils import clamp, require_finite, require_non_negative, round_half_up

DEFAULT_MIN_RATIO = 2.0
DEFAULT_MIN_SCORE = 60

# A stop level must sit within this % of entry, a target level within this %
STOP_LEVEL_MAX_DISTANCE = 5.0
TARGET_LEVEL_MAX_DISTANCE = 15.0

# Stops sit just beyond a level, targets just short of one
LEVEL_BUFFER = 0.005

STOP_ATR_MULTIPLE = 2.0
TARGET_ATR_MULTIPLE = 3.0
TARGET_RISK_MULTIPLE = 2.0

ATR_STOP_CONFIDENCE = 60
ATR_TARGET_CONFIDENCE = 65

# Absorbs float noise so that a reward of exactly 2 * risk passes at 2.0
RATIO_TOLERANCE = 1e-9

# Pre-market entries pay a small buffer over the quote
GAP_ENTRY_BUFFER = 0.001


def _validate_entry(entry: float) -> None:
    require_finite([entry], "entry")
    if entry <= 0:
        raise ValueError(f"entry must be positive, got {entry}")


def _nearest_level(
    levels: Sequence[Level],
    entry: float,
    level_type: LevelType,
    above: bool,
    max_distance: float,
) -> Optional[tuple[Level, float]]:
    """Closest level of a type on one side of entry, within max_distance %."""
    best = None
    for level in levels:
        if level.type != level_type:
            continue
        if above and level.price <= entry:
            continue
        if not above and level.price >= entry:
            continue
        distance = abs(level.price - entry) / entry * 100
        if best is None or distance < best[1]:
            best = (level, distance)

    if best is None or best[1] >= max_distance:
        return None
    return best


def _is_approved(ratio: float, risk: float, min_ratio: float) -> bool:
    return risk > 0 and ratio >= min_ratio - RATIO_TOLERANCE


def calculate_stop_loss(
    entry: float,
    direction: Direction,
    atr: float,
    levels: Sequence[Level] = (),
) -> tuple[float, int, str]:
    """Derive a stop-loss price.

    Long: nearest support below entry within 5% gives support * 0.995 with
    confidence min(90, 60 + 5 * strength); otherwise entry - 2 * ATR at
    confidence 60. Short mirrors with resistance above entry.

    Returns:
        Tuple of (stop_loss, confidence, method)
    """
    _validate_entry(entry)
    require_non_negative([atr], "atr")

    if direction == Direction.LONG:
        found = _nearest_level(levels, entry, LevelType.SUPPORT, False, STOP_LEVEL_MAX_DISTANCE)
        if found:
            level = found[0]
            return (
                level.price * (1 - LEVEL_BUFFER),
                min(90, 60 + level.strength * 5),
                f"Support Level ({level.strength}x tested)",
            )
        return entry - STOP_ATR_MULTIPLE * atr, ATR_STOP_CONFIDENCE, "2x ATR Stop"

    found = _nearest_level(levels, entry, LevelType.RESISTANCE, True, STOP_LEVEL_MAX_DISTANCE)
    if found:
        level = found[0]
        return (
            level.price * (1 + LEVEL_BUFFER),
            min(90, 60 + level.strength * 5),
            f"Resistance Level ({level.strength}x tested)",
        )
    return entry + STOP_ATR_MULTIPLE * atr, ATR_STOP_CONFIDENCE, "2x ATR Stop"


def calculate_target(
    entry: float,
    direction: Direction,
    stop_loss: float,
    atr: float,
    levels: Sequence[Level] = (),
) -> tuple[float, int, str]:
    """Derive a profit target.

    Long: nearest resistance above entry within 15% gives resistance * 0.995
    with confidence min(85, 55 + 5 * strength) when that is still above
    entry; otherwise the further of entry + 2 * risk and entry + 3 * ATR at
    confidence 65. Short mirrors with support below entry and the nearer
    (lower) of the two fallbacks.

    Returns:
        Tuple of (target, confidence, method)
    """
    _validate_entry(entry)
    require_non_negative([atr], "atr")
    require_finite([stop_loss], "stop_loss")
    risk = abs(entry - stop_loss)

    if direction == Direction.LONG:
        found = _nearest_level(
            levels, entry, LevelType.RESISTANCE, True, TARGET_LEVEL_MAX_DISTANCE
        )
        if found and found[0].price * (1 - LEVEL_BUFFER) > entry:
            level = found[0]
            return (
                level.price * (1 - LEVEL_BUFFER),
                min(85, 55 + level.strength * 5),
                f"Resistance Target ({level.strength}x tested)",
            )
        risk_target = entry + TARGET_RISK_MULTIPLE * risk
        atr_target = entry + TARGET_ATR_MULTIPLE * atr
        target = max(risk_target, atr_target)
    else:
        found = _nearest_level(
            levels, entry, LevelType.SUPPORT, False, TARGET_LEVEL_MAX_DISTANCE
        )
        if found and found[0].price * (1 + LEVEL_BUFFER) < entry:
            level = found[0]
            return (
                level.price * (1 + LEVEL_BUFFER),
                min(85, 55 + level.strength * 5),
                f"Support Target ({level.strength}x tested)",
            )
        risk_target = entry - TARGET_RISK_MULTIPLE * risk
        atr_target = entry - TARGET_ATR_MULTIPLE * atr
        target = min(risk_target, atr_target)

    method = "2:1 R:R Target" if target == risk_target else "3x ATR Target"
    return target, ATR_TARGET_CONFIDENCE, method


def build_result(
    entry: float,
    stop_loss: float,
    target: float,
    min_ratio: float = DEFAULT_MIN_RATIO,
    confidence: int = 0,
    method: str = "",
) -> RiskRewardResult:
    """Compute risk, reward, ratio and approval for fixed levels.

    ratio is 0 when risk is 0, and such a trade is never approved.
    """
    _validate_entry(entry)
    require_finite([stop_loss, target, min_ratio], "levels")

    risk = abs(entry - stop_loss)
    reward = abs(target - entry)
    ratio = reward / risk if risk > 0 else 0.0

    return RiskRewardResult(
        entry=entry,
        stop_loss=stop_loss,
        target=target,
        risk=risk,
        reward=reward,
        risk_percent=risk / entry * 100,
        reward_percent=reward / entry * 100,
        ratio=ratio,
        approved=_is_approved(ratio, risk, min_ratio),
        confidence=int(clamp(confidence, 0, 100)),
        method=method,
    )


def risk_reward_from_levels(
    entry: float,
    direction: Direction,
    atr: float,
    levels: Sequence[Level] = (),
    min_ratio: float = DEFAULT_MIN_RATIO,
) -> RiskRewardResult:
    """Risk/reward for an entry given a precomputed ATR and level set."""
    stop, stop_confidence, stop_method = calculate_stop_loss(entry, direction, atr, levels)
    target, target_confidence, target_method = calculate_target(
        entry, direction, stop, atr, levels
    )
    return build_result(
        entry,
        stop,
        target,
        min_ratio=min_ratio,
        confidence=round_half_up((stop_confidence + target_confidence) / 2),
        method=f"Stop: {stop_method} | Target: {target_method}",
    )


def calculate_risk_reward(
    entry: float,
    direction: Direction,
    bars: Sequence[Bar],
    min_ratio: float = DEFAULT_MIN_RATIO,
    atr_period: int = 14,
    lookback: int = DEFAULT_LOOKBACK,
) -> Optional[RiskRewardResult]:
    """Risk/reward for an entry using ATR and levels detected from bars.

    Returns:
        RiskRewardResult, or None if there are too few bars for the ATR.
        Too few bars for level detection only means no levels are used.
    """
    _validate_entry(entry)
    atr = calculate_atr(bars, atr_period)
    if atr is None:
        return None
    levels = find_levels(bars, entry, lookback=lookback)
    return risk_reward_from_levels(entry, direction, atr, levels, min_ratio)


def approve_trade_with_rr(
    symbol: str,
    direction: Direction,
    entry: float,
    composite_score: float,
    bars: Sequence[Bar],
    min_ratio: float = DEFAULT_MIN_RATIO,
    min_score: float = DEFAULT_MIN_SCORE,
    atr_period: int = 14,
    lookback: int = DEFAULT_LOOKBACK,
) -> Optional[TradeSetup]:
    """Combine a composite score with the risk/reward decision.

    final_approval = composite_score >= min_score and the R:R is approved.

    Returns:
        TradeSetup, or None if the bars cannot support an ATR.
    """
    require_finite([composite_score], "composite_score")
    result = calculate_risk_reward(entry, direction, bars, min_ratio, atr_period, lookback)
    if result is None:
        return None

    return TradeSetup(
        symbol=symbol,
        direction=direction,
        entry_price=entry,
        risk_reward=result,
        composite_score=composite_score,
        final_approval=composite_score >= min_score and result.approved,
    )


def simple_risk_reward(
    entry: float,
    stop_loss: float,
    target: float,
    min_ratio: float = DEFAULT_MIN_RATIO,
) -> RiskRewardResult:
    """Risk/reward for manually chosen stop and target prices."""
    return build_result(entry, stop_loss, target, min_ratio=min_ratio, method="Manual levels")


def gap_priority(gap_percent: float, direction: Direction) -> int:
    """Rank a pre-market gap: 1 ideal, 0 acceptable, -1 avoid.

    A small gap in the trade's direction (under 2%) is ideal, 2-5% is
    acceptable, larger gaps and gaps against the trade are avoided.
    """
    favourable = gap_percent if direction == Direction.LONG else -gap_percent
    if 0 < favourable < 2:
        return 1
    elif 2 <= favourable < 5:
        return 0
    return -1


def gap_adjust(
    symbol: str,
    direction: Direction,
    previous_close: float,
    premarket_price: float,
    stop_loss: float,
    target: float,
    premarket_volume: Optional[float] = None,
    min_ratio: float = DEFAULT_MIN_RATIO,
) -> GapAdjustment:
    """Re-price a trade setup against a pre-market quote.

    The stop and target are shifted by the gap percentage and the entry
    becomes the pre-market price plus a 0.1% buffer in the trade's
    direction. The new ratio is 0 when the shifted stop is not on the
    losing side of the entry.
    """
    _validate_entry(previous_close)
    require_non_negative([premarket_price], "premarket_price")
    require_finite([stop_loss, target, min_ratio], "levels")

    gap = (premarket_price - previous_close) / previous_close * 100
    shift = 1 + gap / 100
    new_stop = stop_loss * shift
    new_target = target * shift

    if direction == Direction.LONG:
        entry = premarket_price * (1 + GAP_ENTRY_BUFFER)
        risk = entry - new_stop
        reward = new_target - entry
    else:
        entry = premarket_price * (1 - GAP_ENTRY_BUFFER)
        risk = new_stop - entry
        reward = entry - new_target

    ratio = max(0.0, reward / risk) if risk > 0 else 0.0

    return GapAdjustment(
        symbol=symbol,
        direction=direction,
        previous_close=previous_close,
        premarket_price=premarket_price,
        premarket_volume=premarket_volume,
        gap_percent=gap,
        priority=gap_priority(gap, direction),
        entry=entry,
        stop_loss=new_stop,
        target=new_target,
        risk=risk,
        reward=reward,
        ratio=ratio,
        valid=_is_approved(ratio, risk, min_ratio),
    )
