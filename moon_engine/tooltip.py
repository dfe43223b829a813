# moon_engine/tooltip.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from moon_engine.aggregator import PhaseSummary
from moon_engine.numbers import fixed, round_half_up


def phase_tooltip(s: PhaseSummary, period_average: float) -> Dict[str, Any]:
    """Detail for one hovered phase, compared against the period average."""
    diff = round_half_up(s.avg_range - period_average, 2)
    diff_pct: Optional[float] = None
    if period_average:
        diff_pct = round_half_up((s.avg_range / period_average - 1) * 100, 1)
    return {
        "phase": s.phase.label,
        "average": fixed(s.avg_range),
        "periodAvg": fixed(s.period_avg),
        "diff": f"{diff:.2f}",
        "diffPercent": None if diff_pct is None else f"{diff_pct:.1f}",
        "above": diff > 0,
        "max": fixed(s.max_range),
        "min": fixed(s.min_range),
        "samples": s.count,
    }


def tooltip_lines(tip: Dict[str, Any]) -> List[str]:
    pct = "n/a" if tip["diffPercent"] is None else f"{tip['diffPercent']}%"
    return [
        f"Average: {tip['average']}%",
        f"Period Avg: {tip['periodAvg']}%",
        f"Difference: {tip['diff']}% ({pct})",
        f"Max: {tip['max']}%",
        f"Min: {tip['min']}%",
        f"Samples: {tip['samples']}",
    ]
