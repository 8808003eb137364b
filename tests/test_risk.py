"""Tests for stop/target derivation, trade approval and gap adjustment."""

from datetime import date, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradescore.models import Bar, Direction, Level, LevelType
from tradescore.risk import (
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


def create_test_bars(
    num_bars: int = 60, start: float = 100.0, step: float = 0.0, spread: float = 1.0
) -> list[Bar]:
    """Create weekday bars on a straight line with a true range of 2 * spread."""
    day = date(2024, 1, 1)
    bars = []
    for i in range(num_bars):
        while day.weekday() >= 5:
            day += timedelta(days=1)
        close = start + step * i
        bars.append(Bar(
            date=day,
            symbol="TEST",
            open=close,
            high=close + spread,
            low=close - spread,
            close=close,
            volume=1_000_000,
        ))
        day += timedelta(days=1)
    return bars


def support(price: float, strength: int, reference: float = 100.0) -> Level:
    return Level(
        price=price,
        type=LevelType.SUPPORT,
        strength=strength,
        distance_percent=(price - reference) / reference * 100,
    )


def resistance(price: float, strength: int, reference: float = 100.0) -> Level:
    return Level(
        price=price,
        type=LevelType.RESISTANCE,
        strength=strength,
        distance_percent=(price - reference) / reference * 100,
    )


class TestStopLoss:
    """Stop-loss placement."""

    def test_support_level_stop(self):
        """A 4x tested support at 97 puts a long stop just below it."""
        stop, confidence, method = calculate_stop_loss(100.0, Direction.LONG, 1.0, [support(97.0, 4)])

        assert stop == pytest.approx(96.515)
        assert confidence == 80
        assert "4x tested" in method

    def test_confidence_capped(self):
        _, confidence, _ = calculate_stop_loss(100.0, Direction.LONG, 1.0, [support(97.0, 10)])
        assert confidence == 90

    def test_nearest_support_wins(self):
        levels = [support(96.0, 5), support(98.0, 2)]
        stop, _, _ = calculate_stop_loss(100.0, Direction.LONG, 1.0, levels)
        assert stop == pytest.approx(98.0 * 0.995)

    def test_distant_support_falls_back_to_atr(self):
        stop, confidence, method = calculate_stop_loss(100.0, Direction.LONG, 1.5, [support(94.0, 3)])

        assert stop == pytest.approx(97.0)
        assert confidence == 60
        assert method == "2x ATR Stop"

    def test_short_uses_resistance(self):
        stop, confidence, method = calculate_stop_loss(
            100.0, Direction.SHORT, 1.0, [resistance(103.0, 3)]
        )

        assert stop == pytest.approx(103.515)
        assert confidence == 75
        assert method.startswith("Resistance Level")

    def test_short_atr_stop_above_entry(self):
        stop, _, _ = calculate_stop_loss(100.0, Direction.SHORT, 2.0)
        assert stop == pytest.approx(104.0)

    def test_invalid_entry_rejected(self):
        with pytest.raises(ValueError):
            calculate_stop_loss(0.0, Direction.LONG, 1.0)
        with pytest.raises(ValueError):
            calculate_stop_loss(float("nan"), Direction.LONG, 1.0)


class TestTarget:
    """Target placement."""

    def test_resistance_target(self):
        target, confidence, method = calculate_target(
            100.0, Direction.LONG, 98.0, 1.0, [resistance(110.0, 2)]
        )

        assert target == pytest.approx(109.45)
        assert confidence == 65
        assert method == "Resistance Target (2x tested)"

    def test_no_resistance_uses_further_fallback(self):
        """Entry 100, stop 96.515 and ATR 1 give a 2:1 target at 106.97."""
        target, confidence, method = calculate_target(100.0, Direction.LONG, 96.515, 1.0)

        assert target == pytest.approx(106.97)
        assert confidence == 65
        assert method == "2:1 R:R Target"

    def test_atr_target_when_wider(self):
        target, _, method = calculate_target(100.0, Direction.LONG, 99.0, 2.0)

        assert target == pytest.approx(106.0)
        assert method == "3x ATR Target"

    def test_short_support_target(self):
        target, _, method = calculate_target(
            100.0, Direction.SHORT, 102.0, 1.0, [support(90.0, 3)]
        )

        assert target == pytest.approx(90.45)
        assert method.startswith("Support Target")

    def test_short_fallback_below_entry(self):
        target, _, _ = calculate_target(100.0, Direction.SHORT, 102.0, 1.0)
        assert target == pytest.approx(96.0)

    def test_resistance_inside_buffer_falls_back(self):
        """A resistance 0.3% above entry would put the buffered target below it."""
        target, confidence, method = calculate_target(
            100.0, Direction.LONG, 99.98, 0.01, [resistance(100.3, 2)]
        )

        assert target > 100.0
        assert target == pytest.approx(100.04)
        assert confidence == 65
        assert method == "2:1 R:R Target"

    def test_short_support_inside_buffer_falls_back(self):
        target, _, method = calculate_target(
            100.0, Direction.SHORT, 100.02, 0.01, [support(99.7, 2)]
        )

        assert target < 100.0
        assert target == pytest.approx(99.96)
        assert method == "2:1 R:R Target"


class TestRiskReward:
    """
    **Property: ratio is never negative**

    *For any* entry, ATR and level set, ratio >= 0 and confidence is in
    [0, 100].
    """

    def test_support_stop_with_two_to_one_target_is_approved(self):
        result = risk_reward_from_levels(100.0, Direction.LONG, 1.0, [support(97.0, 4)])

        assert result.stop_loss == pytest.approx(96.515)
        assert result.target == pytest.approx(106.97)
        assert result.ratio == pytest.approx(2.0)
        assert result.approved is True
        # mean of 80 and 65, half rounded up
        assert result.confidence == 73
        assert result.method == "Stop: Support Level (4x tested) | Target: 2:1 R:R Target"

    def test_atr_only(self):
        result = risk_reward_from_levels(100.0, Direction.LONG, 1.0)

        assert result.stop_loss == pytest.approx(98.0)
        assert result.target == pytest.approx(104.0)
        assert result.risk_percent == pytest.approx(2.0)
        assert result.reward_percent == pytest.approx(4.0)
        assert result.approved is True

    def test_nearby_resistance_rejects(self):
        result = risk_reward_from_levels(
            100.0, Direction.LONG, 1.0, [support(97.0, 4), resistance(102.0, 2)]
        )

        assert result.ratio < 2.0
        assert result.approved is False

    def test_level_target_stays_on_profit_side(self):
        result = risk_reward_from_levels(100.0, Direction.LONG, 0.01, [resistance(100.3, 2)])

        assert result.stop_loss == pytest.approx(99.98)
        assert result.target > result.entry
        assert result.ratio == pytest.approx(2.0)
        assert result.method == "Stop: 2x ATR Stop | Target: 2:1 R:R Target"

    def test_zero_risk_never_approved(self):
        result = build_result(100.0, 100.0, 110.0)

        assert result.ratio == 0.0
        assert result.approved is False

    def test_zero_atr_without_levels(self):
        result = risk_reward_from_levels(100.0, Direction.LONG, 0.0)

        assert result.risk == 0.0
        assert result.ratio == 0.0
        assert result.approved is False

    def test_min_ratio_respected(self):
        result = simple_risk_reward(100.0, 95.0, 107.5, min_ratio=1.5)
        assert result.approved is True
        result = simple_risk_reward(100.0, 95.0, 107.5, min_ratio=2.0)
        assert result.approved is False

    def test_simple_risk_reward(self):
        result = simple_risk_reward(100.0, 95.0, 110.0)

        assert result.risk == pytest.approx(5.0)
        assert result.reward == pytest.approx(10.0)
        assert result.ratio == pytest.approx(2.0)
        assert result.approved is True
        assert result.method == "Manual levels"

    @given(
        entry=st.floats(min_value=1, max_value=10_000),
        atr_pct=st.floats(min_value=0, max_value=0.3),
        direction=st.sampled_from(list(Direction)),
        support_pct=st.floats(min_value=0.001, max_value=0.2),
        resistance_pct=st.floats(min_value=0.001, max_value=0.2),
        strength=st.integers(min_value=2, max_value=12),
    )
    @settings(max_examples=200, deadline=None)
    def test_ratio_non_negative(
        self, entry, atr_pct, direction, support_pct, resistance_pct, strength
    ):
        levels = [
            support(entry * (1 - support_pct), strength, entry),
            resistance(entry * (1 + resistance_pct), strength, entry),
        ]
        result = risk_reward_from_levels(entry, direction, entry * atr_pct, levels)

        assert result.ratio >= 0
        assert 0 <= result.confidence <= 100
        assert result.approved == (result.risk > 0 and result.ratio >= 2.0 - 1e-9)


class TestApproval:
    """Final approval combines the composite score with R:R."""

    def test_trending_history_is_approved_with_high_score(self):
        # A straight climb has no swing points, so ATR (2.0) sets stop and target
        bars = create_test_bars(60, start=80.0, step=0.3)
        setup = approve_trade_with_rr("TEST", Direction.LONG, 100.0, 72, bars)

        assert setup.risk_reward.stop_loss == pytest.approx(96.0)
        assert setup.risk_reward.target == pytest.approx(108.0)

        assert setup.risk_reward.approved is True
        assert setup.final_approval is True
        assert setup.entry_price == 100.0
        assert setup.composite_score == 72

    def test_low_score_blocks_final_approval(self):
        setup = approve_trade_with_rr(
            "TEST", Direction.LONG, 100.0, 55, create_test_bars(60, start=80.0, step=0.3)
        )

        assert setup.risk_reward.approved is True
        assert setup.final_approval is False

    def test_score_at_threshold_passes(self):
        setup = approve_trade_with_rr(
            "TEST", Direction.LONG, 100.0, 60, create_test_bars(60, start=80.0, step=0.3)
        )
        assert setup.final_approval is True

    def test_insufficient_bars_is_none(self):
        assert approve_trade_with_rr("TEST", Direction.LONG, 100.0, 80, create_test_bars(10)) is None
        assert calculate_risk_reward(100.0, Direction.LONG, create_test_bars(14)) is None

    def test_short_history_for_levels_still_uses_atr(self):
        result = calculate_risk_reward(100.0, Direction.SHORT, create_test_bars(20))

        assert result.stop_loss == pytest.approx(104.0)
        assert result.method.startswith("Stop: 2x ATR Stop")


class TestGapAdjustment:
    """Pre-market gap re-pricing."""

    @pytest.mark.parametrize("gap,long_priority,short_priority", [
        (1.0, 1, -1),
        (3.0, 0, -1),
        (6.0, -1, -1),
        (-1.0, -1, 1),
        (-3.0, -1, 0),
        (0.0, -1, -1),
    ])
    def test_priority(self, gap: float, long_priority: int, short_priority: int):
        assert gap_priority(gap, Direction.LONG) == long_priority
        assert gap_priority(gap, Direction.SHORT) == short_priority

    def test_long_gap_up_shifts_levels(self):
        adj = gap_adjust("TEST", Direction.LONG, 100.0, 101.0, 95.0, 110.0, premarket_volume=250_000)

        assert adj.gap_percent == pytest.approx(1.0)
        assert adj.priority == 1
        assert adj.entry == pytest.approx(101.101)
        assert adj.stop_loss == pytest.approx(95.95)
        assert adj.target == pytest.approx(111.1)
        assert adj.risk == pytest.approx(101.101 - 95.95)
        assert adj.reward == pytest.approx(111.1 - 101.101)
        assert adj.ratio == pytest.approx((111.1 - 101.101) / (101.101 - 95.95))
        assert adj.valid is (adj.ratio >= 2.0)
        assert adj.premarket_volume == 250_000

    def test_short_gap_down(self):
        adj = gap_adjust("TEST", Direction.SHORT, 100.0, 99.0, 103.0, 90.0)

        assert adj.priority == 1
        assert adj.entry == pytest.approx(98.901)
        assert adj.stop_loss == pytest.approx(101.97)
        assert adj.target == pytest.approx(89.1)
        assert adj.ratio == pytest.approx((98.901 - 89.1) / (101.97 - 98.901))
        assert adj.valid is True

    def test_gap_through_target_is_never_negative(self):
        adj = gap_adjust("TEST", Direction.LONG, 100.0, 100.0, 90.0, 100.05)

        assert adj.reward < 0
        assert adj.ratio == 0.0
        assert adj.valid is False

    def test_stop_on_wrong_side_is_invalid(self):
        adj = gap_adjust("TEST", Direction.LONG, 100.0, 100.0, 101.0, 120.0)

        assert adj.risk <= 0
        assert adj.ratio == 0.0
        assert adj.valid is False
