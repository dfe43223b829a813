# chart_json.py - build Chart.js payload for the moon phase chart
# Returns {labels, datasets, tooltips} for one aggregation result
from typing import Dict, Any, List

from moon_engine.aggregator import AggregationResult
from moon_engine.tooltip import phase_tooltip, tooltip_lines

COLORS = {
    "moonPhase": "#FF6B6B",   # coral
    "periodAvg": "#4ECDC4",   # turquoise
    "background": "#f8f9ff",
    "grid": "#e0e6ff",
    "text": "#2C3E50",
}

def _constant_series(value: float, n: int) -> List[float]:
    return [float(value)] * n

def build_chartjs_payload(result: AggregationResult) -> Dict[str, Any]:
    """
    Returns a dict suited for Chart.js:
    {
      "labels": ["New Moon", ...],
      "datasets": [{label, data, borderColor, ...}, ...],
      "tooltips": [[line, ...], ...]
    }
    """
    labels = [s.phase.label for s in result.summaries]
    tips = [phase_tooltip(s, result.period_average) for s in result.summaries]

    datasets = [
        {
            "label": "Moon Phase Avg",
            "data": [s.avg_range for s in result.summaries],
            "borderColor": COLORS["moonPhase"],
            "backgroundColor": COLORS["moonPhase"],
            "borderWidth": 3,
            "pointRadius": 6,
            "pointHoverRadius": 8,
            "tension": 0.35,
        },
        {
            "label": "Period Avg",
            "data": _constant_series(result.period_average, len(labels)),
            "borderColor": COLORS["periodAvg"],
            "borderWidth": 2,
            "borderDash": [5, 5],
            "pointRadius": 0,
            "tension": 0.0,
        },
    ]

    return {
        "labels": labels,
        "datasets": datasets,
        "tooltips": [tooltip_lines(t) for t in tips],
        "axes": {"x": "Moon Phase", "y": "Daily Price Range (%)"},
    }
