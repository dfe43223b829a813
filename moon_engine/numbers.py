# moon_engine/numbers.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


def round_half_up(x: float, places: int = 2) -> float:
    """Round the exact binary value half-up, like JavaScript's toFixed."""
    q = Decimal(1).scaleb(-places)
    return float(Decimal(x).quantize(q, rounding=ROUND_HALF_UP))


def round2(x: Optional[float]) -> float:
    if x is None:
        return 0.0
    return round_half_up(float(x), 2)


def fixed(x: Optional[float], places: int = 2) -> str:
    if x is None:
        x = 0.0
    return f"{round_half_up(float(x), places):.{places}f}"
