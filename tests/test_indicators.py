"""Property-based tests for moving-average and oscillator calculations.

Tests validate indicator calculations against pandas as a reference
implementation.
"""

import math
from datetime import date, timedelta

import pandas as pd
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradescore.indicators import (
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_macd,
    calculate_sma,
    calculate_true_ranges,
    select_macd_periods,
)
from tradescore.models import Bar


# Strategy for generating realistic price series
@st.composite
def price_series(draw, min_length: int = 50, max_length: int = 200):
    """Generate a realistic price series with positive values and varied movements."""
    length = draw(st.integers(min_value=min_length, max_value=max_length))

    base_price = draw(st.floats(min_value=50.0, max_value=500.0))

    changes = draw(st.lists(
        st.sampled_from([-0.05, -0.04, -0.03, -0.02, -0.01, -0.005,
                         0.005, 0.01, 0.02, 0.03, 0.04, 0.05]),
        min_size=length - 1,
        max_size=length - 1
    ))

    prices = [base_price]
    for change in changes:
        prices.append(max(0.01, prices[-1] * (1 + change)))

    return prices


def create_test_bars(closes: list[float], spread: float = 1.0) -> list[Bar]:
    """Create weekday bars with high/low a fixed spread around each close."""
    day = date(2024, 1, 1)
    bars = []
    for close in closes:
        while day.weekday() >= 5:
            day += timedelta(days=1)
        bars.append(Bar(
            date=day,
            symbol="TEST",
            open=close,
            high=close + spread,
            low=max(0.0, close - spread),
            close=close,
            volume=1_000_000,
        ))
        day += timedelta(days=1)
    return bars


class TestSMALengthLaw:
    """
    **Property: SMA/EMA length law**

    *For any* series and period, sma has max(0, n - p + 1) values and ema
    has n - p + 1 values when n >= p, else none.
    """

    @given(
        values=st.lists(st.floats(min_value=-1e6, max_value=1e6), max_size=60),
        period=st.integers(min_value=1, max_value=30),
    )
    @settings(max_examples=100, deadline=None)
    def test_sma_length(self, values: list[float], period: int):
        assert len(calculate_sma(values, period)) == max(0, len(values) - period + 1)

    @given(
        values=st.lists(st.floats(min_value=-1e6, max_value=1e6), max_size=60),
        period=st.integers(min_value=1, max_value=30),
    )
    @settings(max_examples=100, deadline=None)
    def test_ema_length(self, values: list[float], period: int):
        expected = len(values) - period + 1 if len(values) >= period else 0
        assert len(calculate_ema(values, period)) == expected

    def test_scenario_thirteen_closes_period_three(self):
        """13 closes with period 3 give 11 SMA values starting at 11."""
        closes = [10, 11, 12, 11, 10, 9, 10, 11, 12, 13, 14, 13, 12]
        result = calculate_sma(closes, 3)

        assert len(result) == 11
        assert result[0] == 11.0
        assert result[-1] == pytest.approx((14 + 13 + 12) / 3)

    def test_insufficient_data_is_empty(self):
        assert calculate_sma([1.0, 2.0], 3) == []
        assert calculate_ema([1.0, 2.0], 3) == []


class TestMovingAverageAccuracy:
    """
    **Property: moving averages match pandas**
    """

    @given(prices=price_series(min_length=30, max_length=120))
    @settings(max_examples=50, deadline=None)
    def test_sma_matches_pandas(self, prices: list[float]):
        period = 10
        ours = calculate_sma(prices, period)
        ref = pd.Series(prices).rolling(period).mean().dropna().tolist()

        assert len(ours) == len(ref)
        for a, b in zip(ours, ref):
            assert a == pytest.approx(b, rel=1e-9)

    @given(prices=price_series(min_length=30, max_length=120))
    @settings(max_examples=50, deadline=None)
    def test_ema_matches_pandas_seeded_with_sma(self, prices: list[float]):
        """Seeding pandas' recursive EWM with the SMA reproduces our EMA."""
        period = 12
        ours = calculate_ema(prices, period)

        seed = sum(prices[:period]) / period
        seeded = pd.Series([seed] + prices[period:])
        ref = seeded.ewm(span=period, adjust=False).mean().tolist()

        assert len(ours) == len(ref)
        for a, b in zip(ours, ref):
            assert a == pytest.approx(b, rel=1e-9)

    def test_ema_of_constant_series_is_constant(self):
        assert calculate_ema([5.0] * 20, 7) == pytest.approx([5.0] * 14)


class TestMACDConsistency:
    """
    **Property: MACD consistency**

    *For any* price series, histogram = macd_line - signal_line elementwise
    after alignment.
    """

    @given(prices=price_series(min_length=26, max_length=150))
    @settings(max_examples=100, deadline=None)
    def test_histogram_is_macd_minus_signal(self, prices: list[float]):
        fast, slow, signal = 12, 26, 9
        macd_line, signal_line, histogram = calculate_macd(prices, fast, slow, signal)

        assert len(macd_line) == len(prices) - slow + 1
        assert len(signal_line) == max(0, len(macd_line) - signal + 1)
        assert len(histogram) == len(signal_line)

        for i, h in enumerate(histogram):
            assert h == pytest.approx(macd_line[i + signal - 1] - signal_line[i], abs=1e-9)

    @given(prices=price_series(min_length=40, max_length=120))
    @settings(max_examples=50, deadline=None)
    def test_macd_line_matches_ema_difference(self, prices: list[float]):
        macd_line = calculate_macd(prices, 12, 26, 9).macd_line
        fast_ema = calculate_ema(prices, 12)
        slow_ema = calculate_ema(prices, 26)

        assert macd_line[-1] == pytest.approx(fast_ema[-1] - slow_ema[-1])
        assert macd_line[0] == pytest.approx(fast_ema[26 - 12] - slow_ema[0])

    def test_insufficient_data_returns_empty(self):
        result = calculate_macd([100.0] * 25, 12, 26, 9)
        assert result.macd_line == []
        assert result.signal_line == []
        assert result.histogram == []

    def test_fast_not_shorter_than_slow_rejected(self):
        with pytest.raises(ValueError):
            calculate_macd([100.0] * 50, 26, 12, 9)

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            calculate_macd([100.0] * 40 + [-1.0], 12, 26, 9)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_non_finite_rejected(self, bad: float):
        with pytest.raises(ValueError):
            calculate_sma([1.0, bad, 3.0], 2)
        with pytest.raises(ValueError):
            calculate_ema([1.0, bad, 3.0], 2)

    def test_non_positive_period_rejected(self):
        with pytest.raises(ValueError):
            calculate_sma([1.0, 2.0], 0)


class TestMACDPeriodSelection:
    """MACD periods scale down with available history."""

    LADDER = [(12, 26, 9), (8, 16, 6), (6, 12, 4), (5, 10, 3)]

    def test_full_history_uses_default_periods(self):
        assert select_macd_periods(34, self.LADDER) == ((12, 26, 9), False)

    def test_shorter_history_is_flagged_as_reduced(self):
        assert select_macd_periods(25, self.LADDER) == ((8, 16, 6), True)
        assert select_macd_periods(15, self.LADDER) == ((6, 12, 4), True)
        assert select_macd_periods(12, self.LADDER) == ((5, 10, 3), True)

    def test_too_short_for_any_profile(self):
        assert select_macd_periods(11, self.LADDER) is None

    @given(bar_count=st.integers(min_value=12, max_value=200))
    @settings(max_examples=50, deadline=None)
    def test_selected_profile_yields_histogram(self, bar_count: int):
        periods, _ = select_macd_periods(bar_count, self.LADDER)
        prices = [100.0 + (i % 7) for i in range(bar_count)]
        assert calculate_macd(prices, *periods).histogram


class TestBollingerBands:
    """
    **Property: Bollinger bands match pandas population statistics**
    """

    @given(prices=price_series(min_length=20, max_length=100))
    @settings(max_examples=50, deadline=None)
    def test_matches_pandas(self, prices: list[float]):
        bands = calculate_bollinger_bands(prices, 20, 2.0)
        window = pd.Series(prices[-20:])
        mean = window.mean()
        std = window.std(ddof=0)

        assert bands.middle == pytest.approx(mean, rel=1e-9)
        assert bands.upper == pytest.approx(mean + 2 * std, rel=1e-9, abs=1e-9)
        assert bands.lower == pytest.approx(mean - 2 * std, rel=1e-9, abs=1e-9)
        assert 0.0 <= bands.percent_b <= 1.0
        assert bands.width >= 0

    def test_flat_series_has_zero_width_and_mid_percent_b(self):
        bands = calculate_bollinger_bands([50.0] * 20)
        assert bands.width == 0.0
        assert bands.percent_b == 0.5

    def test_close_above_upper_band_clamps_to_one(self):
        bands = calculate_bollinger_bands([10.0] * 19 + [20.0])
        assert bands.percent_b == 1.0

    def test_width_is_band_over_mean(self):
        prices = [float(x) for x in range(1, 21)]
        bands = calculate_bollinger_bands(prices, 20, 2.0)
        assert bands.width == pytest.approx((bands.upper - bands.lower) / bands.middle * 100)

    def test_insufficient_data_is_none(self):
        assert calculate_bollinger_bands([1.0] * 19, 20) is None


class TestATR:
    """ATR is the simple mean of the most recent true ranges."""

    def test_constant_range(self):
        bars = create_test_bars([100.0] * 20, spread=1.0)
        assert calculate_atr(bars, 14) == pytest.approx(2.0)

    def test_gap_uses_previous_close(self):
        bars = create_test_bars([100.0, 110.0], spread=1.0)
        # max(2, |111 - 100|, |109 - 100|) = 11
        assert calculate_true_ranges(bars) == [pytest.approx(11.0)]
        assert calculate_atr(bars, 1) == pytest.approx(11.0)

    def test_uses_most_recent_window(self):
        bars = create_test_bars([100.0] * 10, spread=5.0) + create_test_bars([100.0] * 6, spread=1.0)
        assert calculate_atr(bars, 5) == pytest.approx(2.0)

    def test_insufficient_data_is_none(self):
        bars = create_test_bars([100.0] * 14)
        assert calculate_atr(bars, 14) is None

    @given(prices=price_series(min_length=15, max_length=80))
    @settings(max_examples=50, deadline=None)
    def test_atr_non_negative_and_deterministic(self, prices: list[float]):
        bars = create_test_bars(prices, spread=0.5)
        first = calculate_atr(bars, 14)
        assert first is not None and first >= 0
        assert calculate_atr(bars, 14) == first
        assert not math.isnan(first)
