from datetime import date
from pathlib import Path

import pytest

from moon_engine.loader import Datasets
from moon_engine.records import MoonRow, Phase, PriceRow


SCENARIO = [
    (date(2024, 1, 1), Phase.NEW_MOON, 2.0),
    (date(2024, 1, 8), Phase.FIRST_QUARTER, 3.0),
    (date(2024, 1, 15), Phase.FULL_MOON, 1.0),
    (date(2024, 1, 23), Phase.LAST_QUARTER, 4.0),
    (date(2024, 1, 31), Phase.NEW_MOON, 2.5),
]


@pytest.fixture()
def moon_rows():
    return tuple(MoonRow(d, p, v) for d, p, v in SCENARIO)


@pytest.fixture()
def price_rows():
    return tuple(PriceRow(d, v) for d, _, v in SCENARIO)


@pytest.fixture()
def datasets(moon_rows, price_rows):
    return Datasets(moon_rows=moon_rows, price_rows=price_rows)


def write_csv(path: Path, header: str, lines) -> Path:
    path.write_text(header + "\n" + "\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def csv_files(tmp_path):
    moon = write_csv(tmp_path / "moon_bitcoin_merged.csv", "date,phase,price_range_percent", [
        "2024-01-01,New Moon,2.0",
        "2024-01-08,First Quarter,3.0",
        "2024-01-15,Full Moon,1.0",
        "",
        "2024-01-23,Last Quarter,4.0",
        "2024-01-31,New Moon,2.5",
    ])
    price = write_csv(tmp_path / "bitcoin_daily_range.csv", "date,price_range_percent", [
        "2024-01-01,2.0",
        "2024-01-08,3.0",
        "2024-01-15,1.0",
        "2024-01-23,4.0",
        "2024-01-31,2.5",
    ])
    return moon, price


@pytest.fixture()
def settings_for(tmp_path):
    """Settings pointing at a directory; files may or may not exist."""
    from config import Settings

    def make(data_dir: Path, strict: bool = False, default_period: int = 12):
        class TestSettings(Settings):
            DATA_DIR = data_dir
            STRICT_DATES = strict
            DEFAULT_PERIOD = default_period
            OUT_DIR = tmp_path / "exports"
        return TestSettings

    return make
