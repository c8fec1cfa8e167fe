from __future__ import annotations

import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./stockwise.db")

SCHEDULER_ENABLED = _env_flag("STOCKWISE_SCHEDULER_ENABLED", "true")
SYNC_INTERVAL_MINUTES = _env_int("STOCKWISE_SYNC_INTERVAL_MINUTES", 30)

FORECAST_WINDOW_DAYS = _env_int("STOCKWISE_FORECAST_WINDOW_DAYS", 90)
VELOCITY_WINDOW_DAYS = _env_int("STOCKWISE_VELOCITY_WINDOW_DAYS", 7)
