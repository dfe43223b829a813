# moon_engine/aggregator.py
# ----------------------------------------------------
# Moon phase / price range aggregation.
# Pure: reads the row tuples, returns a fresh AggregationResult.
# ----------------------------------------------------
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from moon_engine.numbers import fixed, round2
from moon_engine.records import MoonRow, Phase, PHASE_ORDER, PriceRow

LOG = logging.getLogger("moonrange.aggregate")


@dataclass(frozen=True)
class PhaseSummary:
    phase: Phase
    avg_range: float = 0.0
    max_range: float = 0.0
    min_range: float = 0.0
    count: int = 0
    period_avg: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        # Same shape as the chart rows the UI has always consumed
        return {
            "phase": self.phase.label,
            "avgRange": fixed(self.avg_range),
            "maxRange": fixed(self.max_range),
            "minRange": fixed(self.min_range),
            "count": self.count,
            "periodAvg": fixed(self.period_avg),
        }


@dataclass(frozen=True)
class AggregationResult:
    summaries: Tuple[PhaseSummary, ...]
    period_average: float
    period_cycles: int
    period_mean: Optional[float] = None
    window_start: Optional[date] = None
    moon_rows_used: int = 0
    price_rows_used: int = 0
    boundaries: Tuple[date, ...] = field(default_factory=tuple)

    @property
    def has_data(self) -> bool:
        return self.window_start is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period_cycles,
            "periodAverage": self.period_average,
            "windowStart": self.window_start.isoformat() if self.window_start else None,
            "moonRows": self.moon_rows_used,
            "priceRows": self.price_rows_used,
            "rows": [s.to_dict() for s in self.summaries],
        }


def _moon_frame(rows: Sequence[MoonRow]) -> pd.DataFrame:
    return pd.DataFrame({
        "date": pd.to_datetime(pd.Series([r.date for r in rows], dtype="object")),
        "phase": pd.Series([r.phase.label for r in rows], dtype="object"),
        "value": pd.Series([r.price_range_percent for r in rows], dtype="float64"),
    })


def _price_frame(rows: Sequence[PriceRow]) -> pd.DataFrame:
    return pd.DataFrame({
        "date": pd.to_datetime(pd.Series([r.date for r in rows], dtype="object")),
        "value": pd.Series([r.price_range_percent for r in rows], dtype="float64"),
    })


def cycle_boundaries(moon_rows: Sequence[MoonRow]) -> List[date]:
    """New Moon dates in ascending order."""
    return sorted(r.date for r in moon_rows if r.phase is Phase.NEW_MOON)


def selected_boundaries(moon_rows: Sequence[MoonRow], period_cycles: int) -> List[date]:
    """The last period_cycles + 1 New Moons (all of them when fewer exist)."""
    if period_cycles < 0:
        raise ValueError(f"period_cycles must be >= 0, got {period_cycles}")
    return cycle_boundaries(moon_rows)[-(period_cycles + 1):]


def window_start(moon_rows: Sequence[MoonRow], period_cycles: int) -> Optional[date]:
    bounds = selected_boundaries(moon_rows, period_cycles)
    return bounds[0] if bounds else None


def empty_result(period_cycles: int) -> AggregationResult:
    return AggregationResult(
        summaries=tuple(PhaseSummary(phase=p) for p in PHASE_ORDER),
        period_average=0.0,
        period_cycles=period_cycles,
    )


def aggregate(moon_rows: Sequence[MoonRow], price_rows: Sequence[PriceRow],
              period_cycles: int) -> AggregationResult:
    bounds = selected_boundaries(moon_rows, period_cycles)
    if not bounds:
        LOG.info("[Aggregate] no New Moon rows; returning empty result")
        return empty_result(period_cycles)

    start = bounds[0]
    cut = pd.Timestamp(start)

    moon = _moon_frame(moon_rows)
    moon = moon[moon["date"] >= cut]
    price = _price_frame(price_rows)
    price = price[price["date"] >= cut]

    valid_prices = price["value"].dropna()
    period_mean = float(valid_prices.mean()) if len(valid_prices) else None
    period_avg = round2(period_mean)

    stats = (moon.dropna(subset=["value"])
                 .groupby("phase")["value"]
                 .agg(["mean", "max", "min", "count"]))

    summaries = []
    for phase in PHASE_ORDER:
        if phase.label in stats.index:
            row = stats.loc[phase.label]
            summaries.append(PhaseSummary(
                phase=phase,
                avg_range=round2(row["mean"]),
                max_range=round2(row["max"]),
                min_range=round2(row["min"]),
                count=int(row["count"]),
                period_avg=period_avg,
            ))
        else:
            summaries.append(PhaseSummary(phase=phase, period_avg=period_avg))

    LOG.debug(f"[Aggregate] period={period_cycles} start={start} "
              f"moon={len(moon)} price={len(price)} avg={period_avg:.2f}")

    return AggregationResult(
        summaries=tuple(summaries),
        period_average=period_avg,
        period_cycles=period_cycles,
        period_mean=period_mean,
        window_start=start,
        moon_rows_used=len(moon),
        price_rows_used=len(price),
        boundaries=tuple(bounds),
    )
