"""Tests for support/resistance detection."""

from datetime import date, timedelta
from typing import Optional

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradescore.indicators import find_levels, find_swing_points
from tradescore.models import Bar, LevelType


def create_test_bars(
    num_bars: int = 50,
    close: float = 100.0,
    lows: Optional[dict[int, float]] = None,
    highs: Optional[dict[int, float]] = None,
) -> list[Bar]:
    """Create flat bars with selected lows/highs pushed out to form swings."""
    lows = lows or {}
    highs = highs or {}
    day = date(2024, 1, 1)
    bars = []
    for i in range(num_bars):
        while day.weekday() >= 5:
            day += timedelta(days=1)
        bars.append(Bar(
            date=day,
            symbol="TEST",
            open=close,
            high=highs.get(i, close + 0.5),
            low=lows.get(i, close - 0.5),
            close=close,
            volume=1_000_000,
        ))
        day += timedelta(days=1)
    return bars


class TestSwingPoints:
    """Swing detection relative to the reference price."""

    def test_dip_below_reference_is_support(self):
        bars = create_test_bars(10, lows={5: 97.0})
        points = find_swing_points(bars, 100.0)
        assert (LevelType.SUPPORT, 97.0) in points

    def test_peak_above_reference_is_resistance(self):
        bars = create_test_bars(10, highs={5: 104.0})
        points = find_swing_points(bars, 100.0)
        assert (LevelType.RESISTANCE, 104.0) in points

    def test_far_swings_are_ignored(self):
        bars = create_test_bars(10, lows={4: 85.0}, highs={6: 115.0})
        points = find_swing_points(bars, 100.0)
        assert all(price not in (85.0, 115.0) for _, price in points)

    def test_edges_are_not_scanned(self):
        bars = create_test_bars(10, lows={1: 97.0, 8: 96.0})
        prices = [price for _, price in find_swing_points(bars, 100.0)]
        assert 97.0 not in prices
        assert 96.0 not in prices


class TestFindLevels:
    """
    **Property: clustered levels**

    *For any* bar window, every returned level has strength >= 2, supports
    sit below the reference and resistances above it, and levels are sorted
    by strength then distance.
    """

    def test_touches_cluster_into_zones(self):
        bars = create_test_bars(
            50,
            lows={10: 97.0, 25: 97.2, 40: 96.9},
            highs={15: 104.0, 30: 104.3},
        )
        levels = find_levels(bars, 100.0, lookback=50)

        support = [lv for lv in levels if lv.type == LevelType.SUPPORT and lv.price < 98]
        resistance = [lv for lv in levels if lv.type == LevelType.RESISTANCE and lv.price > 103]

        assert len(support) == 1
        assert support[0].strength == 3
        assert support[0].price == pytest.approx((97.0 + 97.2 + 96.9) / 3)
        assert support[0].distance_percent == pytest.approx(support[0].price - 100.0)

        assert len(resistance) == 1
        assert resistance[0].strength == 2
        assert resistance[0].price == pytest.approx(104.15)

    def test_single_touch_is_dropped(self):
        bars = create_test_bars(50, lows={10: 97.0, 30: 95.0})
        levels = find_levels(bars, 100.0, lookback=50)
        assert all(lv.price > 98 for lv in levels)

    def test_sorted_by_strength_then_distance(self):
        bars = create_test_bars(
            50,
            lows={10: 97.0, 25: 97.2, 40: 96.9},
            highs={15: 104.0, 30: 104.3},
        )
        levels = find_levels(bars, 100.0, lookback=50)
        keys = [(-lv.strength, abs(lv.distance_percent)) for lv in levels]
        assert keys == sorted(keys)

    def test_fewer_bars_than_lookback_is_empty(self):
        bars = create_test_bars(49, lows={10: 97.0, 25: 97.2})
        assert find_levels(bars, 100.0, lookback=50) == []

    def test_only_recent_window_is_scanned(self):
        bars = create_test_bars(80, lows={5: 97.0, 15: 97.1})
        levels = find_levels(bars, 100.0, lookback=50)
        assert all(lv.price > 98 for lv in levels)

    def test_non_positive_reference_rejected(self):
        with pytest.raises(ValueError):
            find_levels(create_test_bars(50), 0.0)

    @given(closes=st.lists(st.floats(min_value=90, max_value=110), min_size=50, max_size=80))
    @settings(max_examples=50, deadline=None)
    def test_level_invariants(self, closes: list[float]):
        day = date(2024, 1, 1)
        bars = []
        for i, close in enumerate(closes):
            bars.append(Bar(
                date=day + timedelta(days=i),
                symbol="TEST",
                open=close,
                high=close + 1,
                low=close - 1,
                close=close,
            ))
        reference = closes[-1]
        levels = find_levels(bars, reference, lookback=50)

        for level in levels:
            assert level.strength >= 2
            if level.type == LevelType.SUPPORT:
                assert level.price < reference
            else:
                assert level.price > reference
            assert abs(level.distance_percent) < 10

        keys = [(-lv.strength, abs(lv.distance_percent)) for lv in levels]
        assert keys == sorted(keys)
