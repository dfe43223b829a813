# moon_engine/records.py
# ----------------------------------------------------
# Typed rows for the two datasets. Parsing either yields a valid row
# or raises RowError; missing/non-numeric ranges become None.
# ----------------------------------------------------
from __future__ import annotations
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional

import pandas as pd


class Phase(Enum):
    NEW_MOON = "New Moon"
    FIRST_QUARTER = "First Quarter"
    FULL_MOON = "Full Moon"
    LAST_QUARTER = "Last Quarter"

    @property
    def label(self) -> str:
        return self.value


PHASE_ORDER = (Phase.NEW_MOON, Phase.FIRST_QUARTER, Phase.FULL_MOON, Phase.LAST_QUARTER)

# "New Moon", "NewMoon", "new_moon", "NEW-MOON" all collapse to "newmoon"
_PHASE_KEYS = {re.sub(r"[^a-z]", "", p.value.lower()): p for p in Phase}


class RowError(ValueError):
    def __init__(self, dataset: str, line: Optional[int], field: str, reason: str):
        self.dataset = dataset
        self.line = line
        self.field = field
        self.reason = reason
        where = f"{dataset} line {line}" if line is not None else dataset
        super().__init__(f"{where}: {field}: {reason}")


@dataclass(frozen=True)
class MoonRow:
    date: date
    phase: Phase
    price_range_percent: Optional[float] = None


@dataclass(frozen=True)
class PriceRow:
    date: date
    price_range_percent: Optional[float] = None


def _blank(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    return isinstance(raw, str) and not raw.strip()


def parse_phase(raw: Any, dataset: str = "moon", line: Optional[int] = None) -> Phase:
    if isinstance(raw, Phase):
        return raw
    if _blank(raw):
        raise RowError(dataset, line, "phase", "missing")
    phase = _PHASE_KEYS.get(re.sub(r"[^a-z]", "", str(raw).lower()))
    if phase is None:
        raise RowError(dataset, line, "phase", f"unknown phase {raw!r}")
    return phase


def parse_date(raw: Any, dataset: str = "moon", line: Optional[int] = None) -> date:
    if isinstance(raw, pd.Timestamp):
        if pd.isna(raw):
            raise RowError(dataset, line, "date", "missing")
        return raw.date()
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if _blank(raw):
        raise RowError(dataset, line, "date", "missing")
    # ISO only: no "now", no month-first guessing
    ts = pd.to_datetime(str(raw).strip(), format="ISO8601", errors="coerce")
    if pd.isna(ts):
        raise RowError(dataset, line, "date", f"invalid date {raw!r}")
    return ts.date()


def parse_range(raw: Any) -> Optional[float]:
    if _blank(raw):
        return None
    try:
        f = float(str(raw).strip().rstrip("%")) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return f


def parse_moon_row(rec: Mapping[str, Any], line: Optional[int] = None) -> MoonRow:
    return MoonRow(
        date=parse_date(rec.get("date"), "moon", line),
        phase=parse_phase(rec.get("phase"), "moon", line),
        price_range_percent=parse_range(rec.get("price_range_percent")),
    )


def parse_price_row(rec: Mapping[str, Any], line: Optional[int] = None) -> PriceRow:
    return PriceRow(
        date=parse_date(rec.get("date"), "price", line),
        price_range_percent=parse_range(rec.get("price_range_percent")),
    )
