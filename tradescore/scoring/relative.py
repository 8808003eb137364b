"""Relative strength against a benchmark."""

from tradescore.models import Direction
from tradescore.utils import clamp, require_finite, round_half_away

# Benchmark returns smaller than this (in %) are treated as flat
FLAT_BENCHMARK_PCT = 0.001


def period_return(start_price: float, end_price: float) -> float:
    """Percentage return from start to end, 0 when the start price is 0."""
    require_finite([start_price, end_price], "prices")
    if start_price <= 0:
        return 0.0
    return (end_price - start_price) / start_price * 100


def relative_strength_ratio(instrument_pct: float, benchmark_pct: float) -> float:
    """Multiplicative relative strength, (1 + r_i) / (1 + r_b).

    A flat benchmark gives 1 for a flat instrument, otherwise 2 when the
    instrument rose and 0.5 when it fell.
    """
    require_finite([instrument_pct, benchmark_pct], "returns")
    if abs(benchmark_pct) < FLAT_BENCHMARK_PCT:
        if instrument_pct == 0:
            return 1.0
        return 2.0 if instrument_pct > 0 else 0.5
    return (1 + instrument_pct / 100) / (1 + benchmark_pct / 100)


def relative_strength_score(
    instrument_pct: float, benchmark_pct: float, direction: Direction
) -> int:
    """Score out/under-performance against the benchmark on 0-100.

    Long: 50 + 2 * diff, Short: 50 - 2 * diff, where diff is the return
    difference in percentage points. The offset is rounded half away from
    zero before it is applied, so Long + Short == 100 whenever neither side
    hits the clamp.
    """
    require_finite([instrument_pct, benchmark_pct], "returns")
    offset = round_half_away((instrument_pct - benchmark_pct) * 2)
    if direction == Direction.SHORT:
        offset = -offset
    return int(clamp(50 + offset, 0, 100))
