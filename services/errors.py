"""Error taxonomy for the telemetry pipeline."""

from __future__ import annotations

from typing import Optional


class TelemetryError(Exception):
    """Base class for recoverable telemetry failures."""


class TransportError(TelemetryError):
    """The feed was unreachable or answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyDataError(TelemetryError):
    """The feed was reachable but carried no usable samples."""


class ParseError(TelemetryError, ValueError):
    """A single field could not be read as a number."""


class AuthError(Exception):
    """The API key supplied to the mock API was missing or unknown."""
