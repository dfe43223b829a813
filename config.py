import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

ROOT = Path(__file__).parent.resolve()


def _flag(raw: str) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Datasets (static snapshots, read once at startup)
    DATA_DIR  = Path(os.getenv("MOON_DATA_DIR", str(ROOT / "data")))
    MOON_CSV  = os.getenv("MOON_CSV", "moon_bitcoin_merged.csv")
    PRICE_CSV = os.getenv("PRICE_CSV", "bitcoin_daily_range.csv")

    # Selector
    DEFAULT_PERIOD = os.getenv("MOON_DEFAULT_PERIOD", "12")  # validated by periods.resolve_default

    # Reject the whole load on a bad row instead of skipping it
    STRICT_DATES = _flag(os.getenv("MOON_STRICT_DATES", "0"))

    # Static PNG exports
    OUT_DIR = Path(os.getenv("MOON_OUT_DIR", str(ROOT / "exports")))

    # Dev server
    HOST = os.getenv("MOON_HOST", "127.0.0.1")
    PORT = int(os.getenv("MOON_PORT", "8080"))

    LOG_LEVEL = os.getenv("MOON_LOG_LEVEL", "INFO").upper()

    BRAND_NAME = "Bitcoin & The Lunar Cycle"

    @classmethod
    def moon_path(cls) -> Path:
        return cls.DATA_DIR / cls.MOON_CSV

    @classmethod
    def price_path(cls) -> Path:
        return cls.DATA_DIR / cls.PRICE_CSV
