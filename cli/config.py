from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_REFRESH_INTERVAL = 20.0
DEFAULT_TIMEOUT = 30.0

_BASE_URL_ENV = "API_BASE_URL"
_API_KEY_ENV = "DASHBOARD_API_KEY"
_REFRESH_INTERVAL_ENV = "CLI_REFRESH_INTERVAL"
_TIMEOUT_ENV = "CLI_TIMEOUT"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    timeout: float = DEFAULT_TIMEOUT


def _read_float(value: Optional[str], default: float) -> float:
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


def load_config(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    refresh_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    key = api_key or (os.getenv(_API_KEY_ENV) or "").strip() or None
    if refresh_interval is None:
        refresh_interval = _read_float(os.getenv(_REFRESH_INTERVAL_ENV), DEFAULT_REFRESH_INTERVAL)
    if timeout is None:
        timeout = _read_float(os.getenv(_TIMEOUT_ENV), DEFAULT_TIMEOUT)
    return CLIConfig(
        base_url=url.rstrip("/"),
        api_key=key,
        refresh_interval=refresh_interval,
        timeout=timeout,
    )
