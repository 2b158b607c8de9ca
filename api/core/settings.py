"""
Environment-driven settings.

Everything is read lazily from `os.environ` so tests can monkeypatch values
per test. `load_env()` pulls a local `.env` file into the environment once at
process start (API and import CLI).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_env() -> None:
    # Real environment variables win over .env entries.
    load_dotenv(override=False)


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def server_port() -> int:
    return env_int("PORT", 8000)


def cors_allow_origins() -> list[str]:
    raw = env_str("CORS_ALLOW_ORIGINS", "*")
    origins = [part.strip() for part in raw.split(",") if part.strip()]
    return origins or ["*"]


def usda_api_key() -> str:
    return env_str("USDA_API_KEY")


def usda_base_url() -> str:
    return env_str("USDA_BASE_URL", "https://api.nal.usda.gov/fdc/v1")


def usda_timeout_s() -> float:
    return env_float("USDA_TIMEOUT_S", 30.0)


def nutrient_csv_path() -> str:
    return env_str("NUTRIENT_CSV", "nutrient.csv")
