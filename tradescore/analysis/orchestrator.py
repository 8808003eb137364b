"""Batch analysis over a watch-list.

For each symbol: indicator reading -> directional scores -> composite
score -> risk/reward trade setup. Symbols are independent; one symbol
failing or lacking history never stops the batch.
"""

import logging
from datetime import date
from enum import Enum
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from tradescore.config import CadenceProfile, Settings, get_cadence
from tradescore.data.index import SeriesIndex, build_index, lookback
from tradescore.indicators import (
    calculate_adx,
    calculate_atr,
    calculate_bollinger_bands,
    calculate_macd,
    calculate_sma,
    select_macd_periods,
)
from tradescore.models import (
    Bar,
    Direction,
    DirectionalScore,
    IndicatorReading,
    TradeSetup,
)
from tradescore.risk.reward import approve_trade_with_rr
from tradescore.scoring import (
    composite_score,
    detect_crossover,
    period_return,
    score_reading,
    signal_label,
)
from tradescore.sources.base import AnalysisSink, BaseBarSource, BaseWatchlistSource

logger = logging.getLogger(__name__)

FINAL_STAGE = "final"


class AnalysisStatus(str, Enum):
    """Outcome of analyzing one symbol."""

    SKIPPED = "skipped"  # not enough history to compute
    REJECTED = "rejected"  # computed, failed score or R:R
    APPROVED = "approved"


class SymbolAnalysis(BaseModel):
    """Result of analyzing one symbol."""

    symbol: str = Field(..., description="Trading symbol")
    status: AnalysisStatus = Field(..., description="Skipped, rejected or approved")
    reason: str = Field("", description="Why the symbol was skipped or rejected")
    reading: Optional[IndicatorReading] = Field(None, description="Indicator snapshot")
    scores: list[DirectionalScore] = Field(default_factory=list, description="Directional scores")
    composite_score: Optional[int] = Field(None, description="Composite 1-100 score")
    signal: Optional[str] = Field(None, description="Signal label for the composite")
    trade_setup: Optional[TradeSetup] = Field(None, description="Risk/reward decision")

    model_config = {"frozen": True}


class AnalysisReport(BaseModel):
    """All symbol results from one batch run."""

    analysis_date: date = Field(..., description="As-of date of the run")
    cadence: str = Field(..., description="Bar cadence")
    direction: Direction = Field(..., description="Trade direction")
    benchmark: str = Field(..., description="Relative strength benchmark")
    benchmark_return_pct: Optional[float] = Field(None, description="Benchmark return, %")
    results: list[SymbolAnalysis] = Field(default_factory=list, description="Per-symbol results")

    model_config = {"frozen": True}

    def by_status(self, status: AnalysisStatus) -> list[SymbolAnalysis]:
        return [r for r in self.results if r.status == status]

    @property
    def approved(self) -> list[SymbolAnalysis]:
        return self.by_status(AnalysisStatus.APPROVED)

    @property
    def rejected(self) -> list[SymbolAnalysis]:
        return self.by_status(AnalysisStatus.REJECTED)

    @property
    def skipped(self) -> list[SymbolAnalysis]:
        return self.by_status(AnalysisStatus.SKIPPED)

    def to_records(self) -> dict[str, dict[str, Any]]:
        """symbol -> JSON-ready record for the persistence sink."""
        return {r.symbol: r.model_dump(mode="json") for r in self.results}


def _skipped(symbol: str, reason: str) -> SymbolAnalysis:
    logger.info("Skipping %s: %s", symbol, reason)
    return SymbolAnalysis(symbol=symbol, status=AnalysisStatus.SKIPPED, reason=reason)


class AnalysisOrchestrator:
    """Runs the indicator, scoring and risk/reward engines over an index.

    The index is built once per session by the caller and only read here.
    """

    def __init__(
        self,
        index: SeriesIndex,
        settings: Optional[Settings] = None,
        cadence: Optional[str] = None,
    ):
        self.index = index
        self.settings = settings or Settings()
        self.cadence = cadence or self.settings.cadence
        self.profile: CadenceProfile = get_cadence(self.cadence)

    def window(self, symbol: str, as_of: date) -> list[Bar]:
        """Bars feeding one analysis, oldest first."""
        if self.profile.name == "daily":
            return lookback(self.index, symbol, as_of, self.profile.history_bars)
        return self.index.tail(symbol, as_of, self.profile.history_bars)

    def series_return(self, bars: Sequence[Bar]) -> Optional[float]:
        """Return over the profile's return lookback, or None if too short."""
        n = self.profile.return_bars
        if len(bars) < n + 1:
            return None
        return period_return(bars[-1 - n].close, bars[-1].close)

    def compute_reading(self, symbol: str, bars: Sequence[Bar]) -> Optional[IndicatorReading]:
        """Compute the indicator snapshot, or None if any indicator lacks data."""
        profile = self.profile
        if len(bars) < profile.min_bars:
            return None

        closes = [b.close for b in bars]
        sma_short = calculate_sma(closes, profile.sma_short)
        sma_long = calculate_sma(closes, profile.sma_long)
        if not sma_short or not sma_long:
            return None

        has_prev = len(sma_short) > 1 and len(sma_long) > 1
        crossover = detect_crossover(
            sma_short[-1],
            sma_long[-1],
            sma_short[-2] if has_prev else None,
            sma_long[-2] if has_prev else None,
        )

        selected = select_macd_periods(len(closes), profile.macd_ladder)
        if selected is None:
            return None
        periods, reduced = selected
        if reduced:
            logger.debug("%s: MACD reduced to %s for %d bars", symbol, periods, len(closes))
        histogram = calculate_macd(closes, *periods).histogram

        adx = calculate_adx(bars, profile.adx_period)
        atr = calculate_atr(bars, profile.atr_period)
        bands = calculate_bollinger_bands(closes, profile.bb_period, profile.bb_std_dev)
        if not histogram or adx is None or atr is None or bands is None:
            return None

        return IndicatorReading(
            symbol=symbol,
            as_of=bars[-1].date,
            close=closes[-1],
            sma_short=sma_short[-1],
            sma_long=sma_long[-1],
            crossover=crossover,
            macd_histogram=histogram[-1],
            macd_periods=periods,
            macd_reduced=reduced,
            adx=adx.adx,
            plus_di=adx.plus_di,
            minus_di=adx.minus_di,
            atr=atr,
            bollinger=bands,
            return_pct=self.series_return(bars),
        )

    def analyze_symbol(
        self,
        symbol: str,
        as_of: date,
        direction: Direction,
        benchmark_return_pct: Optional[float] = None,
    ) -> SymbolAnalysis:
        """Analyze one symbol as of a date."""
        bars = self.window(symbol, as_of)
        reading = self.compute_reading(symbol, bars)
        if reading is None:
            return _skipped(
                symbol,
                f"insufficient history ({len(bars)} bars, need {self.profile.min_bars})",
            )

        scores = score_reading(reading, direction, benchmark_return_pct)
        composite = composite_score(scores)

        setup = approve_trade_with_rr(
            symbol,
            direction,
            reading.close,
            composite,
            bars,
            min_ratio=self.settings.min_ratio,
            min_score=self.settings.min_score,
            atr_period=self.profile.atr_period,
            lookback=self.settings.levels_lookback(self.profile),
        )
        if setup is None:
            return _skipped(symbol, "insufficient history for ATR")

        if setup.final_approval:
            status, reason = AnalysisStatus.APPROVED, ""
        elif composite < self.settings.min_score:
            status = AnalysisStatus.REJECTED
            reason = f"score {composite} below {self.settings.min_score:g}"
        else:
            status = AnalysisStatus.REJECTED
            reason = (
                f"R:R {setup.risk_reward.ratio:.2f} below {self.settings.min_ratio:g}"
            )

        return SymbolAnalysis(
            symbol=symbol,
            status=status,
            reason=reason,
            reading=reading,
            scores=scores,
            composite_score=composite,
            signal=signal_label(composite, direction),
            trade_setup=setup,
        )

    def run(
        self,
        symbols: Sequence[str],
        as_of: date,
        direction: Optional[Direction] = None,
    ) -> AnalysisReport:
        """Analyze every symbol; results keep the input order."""
        direction = direction or self.settings.direction
        benchmark = self.settings.benchmark
        benchmark_return = self.series_return(self.window(benchmark, as_of))

        results = []
        for symbol in symbols:
            if benchmark_return is None:
                results.append(_skipped(symbol, f"no history for benchmark {benchmark}"))
                continue
            try:
                results.append(
                    self.analyze_symbol(symbol, as_of, direction, benchmark_return)
                )
            except ValueError as e:
                logger.warning("Analysis failed for %s: %s", symbol, e)
                results.append(
                    SymbolAnalysis(
                        symbol=symbol, status=AnalysisStatus.SKIPPED, reason=f"invalid data: {e}"
                    )
                )

        return AnalysisReport(
            analysis_date=as_of,
            cadence=self.cadence,
            direction=direction,
            benchmark=benchmark,
            benchmark_return_pct=benchmark_return,
            results=results,
        )


def run_analysis(
    bar_source: BaseBarSource,
    watchlist: BaseWatchlistSource,
    sink: Optional[AnalysisSink],
    as_of: date,
    settings: Optional[Settings] = None,
    cadence: Optional[str] = None,
    direction: Optional[Direction] = None,
) -> AnalysisReport:
    """Build the index once, analyze the watch-list and persist the batch.

    The batch is handed to the sink under the "final" stage key.
    """
    settings = settings or Settings()
    symbols = [i.symbol for i in watchlist.get_instruments()]
    wanted = list(dict.fromkeys(symbols + [settings.benchmark]))

    index = build_index(bar_source.get_all_series(wanted))
    orchestrator = AnalysisOrchestrator(index, settings, cadence)
    report = orchestrator.run(symbols, as_of, direction)

    logger.info(
        "Analysis %s: %d approved, %d rejected, %d skipped",
        as_of.isoformat(),
        len(report.approved),
        len(report.rejected),
        len(report.skipped),
    )

    if sink is not None:
        sink.save_analysis_results(
            as_of, FINAL_STAGE, report.to_records(), frequency=report.cadence
        )
    return report
