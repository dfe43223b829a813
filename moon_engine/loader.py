# moon_engine/loader.py
# ----------------------------------------------------
# One-shot CSV load for the moon and price snapshots.
# Bad rows are logged and skipped (or fail the load when strict).
# ----------------------------------------------------
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

import pandas as pd

from moon_engine.records import (
    MoonRow, PriceRow, RowError, parse_moon_row, parse_price_row,
)

LOG = logging.getLogger("moonrange.loader")

MOON_COLUMNS = ("date", "phase", "price_range_percent")
PRICE_COLUMNS = ("date", "price_range_percent")

T = TypeVar("T")


class LoadError(RuntimeError):
    def __init__(self, path, cause: str):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


@dataclass(frozen=True)
class Datasets:
    moon_rows: Tuple[MoonRow, ...] = ()
    price_rows: Tuple[PriceRow, ...] = ()
    rejected: int = 0
    loaded_at: Optional[datetime] = None
    errors: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls, error: Optional[str] = None) -> "Datasets":
        return cls(errors=(error,) if error else ())

    @property
    def is_empty(self) -> bool:
        return not self.moon_rows or not self.price_rows


def read_frame(path, required: Sequence[str]) -> pd.DataFrame:
    p = Path(path)
    if not p.exists():
        raise LoadError(p, "file not found")
    try:
        # strings in, typed rows out; coercion happens in records
        df = pd.read_csv(p, dtype=str, keep_default_na=False,
                         skip_blank_lines=True, encoding="utf-8")
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise LoadError(p, f"unreadable CSV ({e})") from e
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise LoadError(p, f"missing columns {missing}")
    return df


def _convert(df: pd.DataFrame, path, parse: Callable[..., T], strict: bool) -> Tuple[List[T], List[RowError]]:
    rows: List[T] = []
    bad: List[RowError] = []
    for i, rec in enumerate(df.to_dict(orient="records"), start=2):  # line 1 is the header
        try:
            rows.append(parse(rec, i))
        except RowError as e:
            if strict:
                raise LoadError(path, str(e)) from e
            bad.append(e)
    for e in bad[:20]:
        LOG.warning(f"[Load] skipped row: {e}")
    if len(bad) > 20:
        LOG.warning(f"[Load] ... {len(bad) - 20} more rejected rows in {path}")
    return rows, bad


def load_moon_rows(path, strict: bool = False) -> Tuple[List[MoonRow], List[RowError]]:
    df = read_frame(path, MOON_COLUMNS)
    return _convert(df, path, parse_moon_row, strict)


def load_price_rows(path, strict: bool = False) -> Tuple[List[PriceRow], List[RowError]]:
    df = read_frame(path, PRICE_COLUMNS)
    return _convert(df, path, parse_price_row, strict)


def load_datasets(moon_path, price_path, strict: bool = False) -> Datasets:
    moon, moon_bad = load_moon_rows(moon_path, strict)
    price, price_bad = load_price_rows(price_path, strict)
    LOG.info(f"[Load] moon={len(moon)} price={len(price)} rejected={len(moon_bad) + len(price_bad)}")
    return Datasets(
        moon_rows=tuple(moon),
        price_rows=tuple(price),
        rejected=len(moon_bad) + len(price_bad),
        loaded_at=datetime.now(timezone.utc),
        errors=tuple(str(e) for e in moon_bad + price_bad),
    )
