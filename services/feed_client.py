"""HTTP client for the remote telemetry feed."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from services.errors import TransportError

logger = logging.getLogger(__name__)


class FeedClient:
    """Reads the latest feed entries of one channel."""

    def __init__(
        self,
        base_url: str,
        channel_id: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.channel_id = channel_id
        self._api_key = api_key
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def fetch_feed(self, results: int = 50) -> Dict[str, Any]:
        params: Dict[str, Any] = {"results": results}
        if self._api_key:
            params["api_key"] = self._api_key

        try:
            response = self._client.get(
                f"/channels/{self.channel_id}/feeds.json",
                params=params,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            raise TransportError(
                f"Failed to fetch feed. Status: {status_code}", status_code=status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to reach feed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError("Feed returned a non-JSON body.") from exc
        if not isinstance(payload, dict):
            raise TransportError("Feed returned an unexpected document.")

        logger.debug(
            "Fetched feed",
            extra={"channel_id": self.channel_id, "status_code": response.status_code},
        )
        return payload
