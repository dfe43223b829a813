from datetime import date

import pytest

from moon_engine.loader import (
    Datasets, LoadError, load_datasets, load_moon_rows, load_price_rows,
)
from moon_engine.records import Phase

from conftest import write_csv


def test_load_datasets(csv_files):
    moon, price = csv_files
    data = load_datasets(moon, price)

    assert len(data.moon_rows) == 5
    assert len(data.price_rows) == 5
    assert data.rejected == 0
    assert data.loaded_at is not None
    assert data.moon_rows[0].phase is Phase.NEW_MOON
    assert data.moon_rows[-1].date == date(2024, 1, 31)
    assert not data.is_empty


def test_missing_file_raises(tmp_path):
    with pytest.raises(LoadError) as exc:
        load_moon_rows(tmp_path / "nope.csv")
    assert "file not found" in str(exc.value)


def test_missing_column_raises(tmp_path):
    p = write_csv(tmp_path / "moon.csv", "date,price_range_percent", ["2024-01-01,1.0"])
    with pytest.raises(LoadError) as exc:
        load_moon_rows(p)
    assert "phase" in exc.value.cause


def test_empty_file_raises(tmp_path):
    p = tmp_path / "empty.csv"
    p.write_text("", encoding="utf-8")
    with pytest.raises(LoadError):
        load_price_rows(p)


def test_bad_rows_skipped_by_default(tmp_path, caplog):
    p = write_csv(tmp_path / "moon.csv", "date,phase,price_range_percent", [
        "2024-01-01,New Moon,2.0",
        "garbage,Full Moon,1.0",
        "2024-01-03,Blue Moon,1.0",
        "2024-01-04,Full Moon,abc",
    ])
    with caplog.at_level("WARNING", logger="moonrange.loader"):
        rows, bad = load_moon_rows(p)

    assert [r.date for r in rows] == [date(2024, 1, 1), date(2024, 1, 4)]
    assert rows[1].price_range_percent is None
    assert [e.field for e in bad] == ["date", "phase"]
    assert bad[0].line == 3
    assert "[Load] skipped row" in caplog.text


def test_strict_mode_fails_whole_load(tmp_path):
    p = write_csv(tmp_path / "price.csv", "date,price_range_percent", [
        "2024-01-01,2.0",
        "2024-02-30,1.0",
    ])
    with pytest.raises(LoadError) as exc:
        load_price_rows(p, strict=True)
    assert "date" in str(exc.value)


def test_extra_columns_and_padding_tolerated(tmp_path):
    p = write_csv(tmp_path / "price.csv", " date , price_range_percent ,close", [
        "2024-01-01,2.0,42000",
    ])
    rows, bad = load_price_rows(p)
    assert rows[0].price_range_percent == 2.0
    assert not bad


def test_empty_datasets():
    d = Datasets.empty("boom")
    assert d.is_empty
    assert d.errors == ("boom",)
    assert d.rejected == 0
