"""Pre-market gap check for approved trade setups."""

import logging
from datetime import date, time
from typing import Optional, Sequence

from tradescore.models import GapAdjustment, TradeSetup
from tradescore.risk.reward import DEFAULT_MIN_RATIO, gap_adjust
from tradescore.sources.base import BaseBarSource

logger = logging.getLogger(__name__)

PREMARKET_TIME = time(9, 0)


def previous_close(bar_source: BaseBarSource, symbol: str, day: date) -> Optional[float]:
    """Close of the last bar strictly before `day`."""
    earlier = [b for b in bar_source.get_series(symbol) if b.date < day]
    return earlier[-1].close if earlier else None


def premarket_check(
    bar_source: BaseBarSource,
    setups: Sequence[TradeSetup],
    day: date,
    at: time = PREMARKET_TIME,
    min_ratio: float = DEFAULT_MIN_RATIO,
) -> list[GapAdjustment]:
    """Re-price each setup against its pre-market quote.

    Setups without a quote or a prior close are left out. Results are
    sorted best first: priority descending, then adjusted ratio descending.
    """
    adjustments = []
    for setup in setups:
        quote = bar_source.get_quote_at(setup.symbol, day, at)
        close = previous_close(bar_source, setup.symbol, day)
        if quote is None or close is None or close <= 0:
            logger.info("No pre-market data for %s on %s", setup.symbol, day.isoformat())
            continue

        adjustment = gap_adjust(
            setup.symbol,
            setup.direction,
            close,
            quote.price,
            setup.risk_reward.stop_loss,
            setup.risk_reward.target,
            premarket_volume=quote.volume,
            min_ratio=min_ratio,
        )
        adjustments.append(adjustment.model_copy(update={"as_of": day}))

    adjustments.sort(key=lambda a: (-a.priority, -a.ratio))
    return adjustments
