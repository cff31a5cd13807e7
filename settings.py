from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_FEED_BASE_URL_ENV = "FEED_BASE_URL"
_FEED_CHANNEL_ENV = "FEED_CHANNEL_ID"
_FEED_API_KEY_ENV = "FEED_READ_API_KEY"
_FEED_RESULTS_ENV = "FEED_RESULTS"
_FEED_TIMEOUT_ENV = "FEED_TIMEOUT_SECONDS"
_READ_KEY_ENV = "MOCK_API_READ_KEY"
_WRITE_KEY_ENV = "MOCK_API_WRITE_KEY"
_FLEET_SIZE_ENV = "FLEET_SIZE"
_REFRESH_INTERVAL_ENV = "REFRESH_INTERVAL_MS"
_AUTO_REFRESH_ENV = "AUTO_REFRESH_ENABLED"
_TIME_RANGE_ENV = "DEFAULT_TIME_RANGE"
_SEED_ENV = "SYNTHETIC_SEED"
_LOG_LEVEL_ENV = "LOG_LEVEL"

MAX_FLEET_SIZE = 2
_TIME_RANGES = ("day", "week", "month")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    feed_base_url: str
    feed_channel_id: str
    feed_api_key: Optional[str]
    feed_results: int
    feed_timeout: float
    read_api_key: str
    write_api_key: str
    fleet_size: int
    refresh_interval_ms: int
    auto_refresh: bool
    default_time_range: str
    synthetic_seed: Optional[int]
    log_level: str

    @property
    def refresh_interval_seconds(self) -> float:
        return self.refresh_interval_ms / 1000


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int, maximum: Optional[int] = None) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    if parsed <= 0:
        return default
    if maximum is not None and parsed > maximum:
        return default
    return parsed


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUE:
        return True
    if candidate in _FALSE:
        return False
    return default


def _read_seed() -> Optional[int]:
    value = os.getenv(_SEED_ENV)
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _read_time_range(default: str) -> str:
    candidate = _read_str_env(_TIME_RANGE_ENV, default).lower()
    return candidate if candidate in _TIME_RANGES else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        feed_base_url=_read_str_env(_FEED_BASE_URL_ENV, "https://api.thingspeak.com").rstrip("/"),
        feed_channel_id=_read_str_env(_FEED_CHANNEL_ENV, "2923888"),
        feed_api_key=_read_optional_env(_FEED_API_KEY_ENV, None),
        feed_results=_read_positive_int(_FEED_RESULTS_ENV, 50),
        feed_timeout=_read_positive_float(_FEED_TIMEOUT_ENV, 10.0),
        read_api_key=_read_str_env(_READ_KEY_ENV, "local-read-key"),
        write_api_key=_read_str_env(_WRITE_KEY_ENV, "local-write-key"),
        fleet_size=_read_positive_int(_FLEET_SIZE_ENV, 2, maximum=MAX_FLEET_SIZE),
        refresh_interval_ms=_read_positive_int(_REFRESH_INTERVAL_ENV, 20000),
        auto_refresh=_read_flag(_AUTO_REFRESH_ENV, True),
        default_time_range=_read_time_range("day"),
        synthetic_seed=_read_seed(),
        log_level=_read_log_level("INFO"),
    )
