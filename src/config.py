"""Runtime configuration, read from the environment (and .env if present)."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root if present
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


def _int_env(key: str, default: int) -> int:
    val = os.environ.get(key)
    if val is None or val == "":
        return default
    try:
        v = int(val)
    except ValueError:
        return default
    return v if v >= 1 else default


# OpenWeatherMap
WEATHER_API_URL = os.environ.get("WEATHER_API_URL", "https://api.openweathermap.org/data/2.5")
WEATHER_API_KEY = os.environ.get("WEATHER_API_KEY", "")

# Weather lookups by coordinate are cached for 10 minutes
WEATHER_CACHE_TTL = _int_env("WEATHER_CACHE_TTL", 600)
WEATHER_CACHE_MAX_ENTRIES = _int_env("WEATHER_CACHE_MAX_ENTRIES", 256)

# Alerts flat file
ALERTS_FILE = os.environ.get(
    "ALERTS_FILE",
    str(Path(__file__).resolve().parent.parent / "data" / "alerts.json"),
)

# Service
CORS_ORIGIN = os.environ.get("CORS_ORIGIN", "*")
PORT = _int_env("PORT", 5000)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for an entry point (API or dashboard)"""
    # force: library modules may already have installed a default handler
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True
    )
