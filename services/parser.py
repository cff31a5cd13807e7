"""Normalization of raw feed documents into typed channel readings."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from models.records import CHANNEL_COUNT, ChannelSeries, FeedSample, SeriesPoint
from services.errors import EmptyDataError, ParseError

logger = logging.getLogger(__name__)

CHANNEL_NAMES: Dict[int, str] = {
    1: "primary_bulb_1",
    2: "secondary_bulb_1",
    3: "primary_bulb_2",
    4: "secondary_bulb_2",
    5: "current_1",
    6: "current_2",
}


def parse_reading(raw: Any) -> float:
    """Read one field as a float, substituting 0.0 for anything unusable."""
    try:
        return _coerce_float(raw)
    except ParseError as exc:
        logger.debug(
            "Substituting 0.0 for unreadable field",
            extra={"reason": str(exc), "invalid_value": raw},
        )
        return 0.0


def _coerce_float(raw: Any) -> float:
    if raw is None:
        raise ParseError("missing value")
    if isinstance(raw, bool):
        raise ParseError("boolean is not a reading")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        candidate = str(raw).strip()
        if not candidate:
            raise ParseError("blank value")
        try:
            value = float(candidate)
        except ValueError as exc:
            raise ParseError("invalid numeric value") from exc
    if not math.isfinite(value):
        raise ParseError("non-finite value")
    return value


def parse_timestamp(value: str) -> datetime:
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError("Invalid timestamp format") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


class FeedParser:
    """Turns a ``{"feeds": [...]}`` document into samples and channel series."""

    def parse_feed(self, payload: Mapping[str, Any]) -> list[FeedSample]:
        feeds = payload.get("feeds") if isinstance(payload, Mapping) else None
        if not isinstance(feeds, list) or not feeds:
            raise EmptyDataError("No data received from feed.")

        samples: list[FeedSample] = []
        dropped = 0
        for entry in feeds:
            sample = self.parse_entry(entry)
            if sample is None:
                dropped += 1
                continue
            samples.append(sample)

        if dropped:
            logger.warning(
                "Dropped feed entries without a usable timestamp",
                extra={"dropped_count": dropped, "sample_count": len(samples)},
            )
        if not samples:
            raise EmptyDataError("Feed contained no entries with a usable timestamp.")
        return samples

    def parse_entry(self, entry: Any) -> FeedSample | None:
        if not isinstance(entry, Mapping):
            return None
        created_at = entry.get("created_at")
        if not isinstance(created_at, str):
            return None
        try:
            timestamp = parse_timestamp(created_at)
        except ValueError:
            return None

        # Channels the feed leaves out or sends as null stay unreported.
        fields = {
            channel: parse_reading(entry[f"field{channel}"])
            for channel in range(1, CHANNEL_COUNT + 1)
            if entry.get(f"field{channel}") is not None
        }
        return FeedSample(timestamp=timestamp, fields=fields)

    @staticmethod
    def to_channel_series(samples: list[FeedSample]) -> Dict[int, ChannelSeries]:
        return {
            channel: ChannelSeries(
                name=name,
                points=tuple(
                    SeriesPoint(timestamp=sample.timestamp, value=sample.value(channel))
                    for sample in samples
                ),
            )
            for channel, name in CHANNEL_NAMES.items()
        }
