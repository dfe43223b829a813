# moon_engine/periods.py
from __future__ import annotations
import logging
from typing import Any, Dict, List

from moon_engine.numbers import round_half_up

LOG = logging.getLogger("moonrange.periods")

PERIODS = (1, 3, 6, 12, 24, 36, 48, 60, 72, 84)
DEFAULT_PERIOD = 12

# Display only; the window itself follows recorded New Moon dates.
CYCLE_DAYS = 29.5


def period_label(n: int) -> str:
    days = int(round_half_up(n * CYCLE_DAYS, 0))
    unit = "cycle" if n == 1 else "cycles"
    return f"{n} {unit} ({days} days)"


def parse_period(raw: Any, default: int = DEFAULT_PERIOD) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    try:
        n = int(str(raw).strip())
    except ValueError:
        raise ValueError(f"period must be an integer, got {raw!r}")
    if n not in PERIODS:
        raise ValueError(f"period {n} not in {list(PERIODS)}")
    return n


def resolve_default(p: Any) -> int:
    """Configured default period, or DEFAULT_PERIOD when it is not selectable."""
    try:
        return parse_period(p, DEFAULT_PERIOD)
    except ValueError as e:
        LOG.warning(f"[Config] {e}; using default period {DEFAULT_PERIOD}")
        return DEFAULT_PERIOD


def period_options(default: int = DEFAULT_PERIOD) -> List[Dict[str, Any]]:
    return [{"value": n, "label": period_label(n), "selected": n == default} for n in PERIODS]
