from __future__ import annotations

import time
from typing import Any, Dict, Iterator, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the dashboard service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_snapshot(self, time_range: Optional[str] = None) -> Dict[str, Any]:
        return self._request("GET", "/dashboard", params=self._range_params(time_range))

    def refresh(self, time_range: Optional[str] = None) -> Dict[str, Any]:
        return self._request("POST", "/dashboard/refresh", params=self._range_params(time_range))

    def get_devices(self) -> List[Dict[str, Any]]:
        if not self._config.api_key:
            raise typer.BadParameter("An API key is required to list devices (--api-key).")
        payload = self._request("GET", "/api/devices", headers={"X-API-Key": self._config.api_key})
        if not isinstance(payload, list):
            raise typer.BadParameter("Unexpected response payload when listing devices.")
        return payload

    def watch(
        self, time_range: Optional[str], interval: float, count: int = 0
    ) -> Iterator[Dict[str, Any]]:
        """Yield a fresh snapshot every ``interval`` seconds; ``count=0`` runs forever."""
        emitted = 0
        while True:
            yield self.refresh(time_range)
            emitted += 1
            if count and emitted >= count:
                return
            time.sleep(interval)

    @staticmethod
    def _range_params(time_range: Optional[str]) -> Dict[str, str]:
        return {"timeRange": time_range} if time_range else {}

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.HTTPError as exc:
            typer.secho(f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
