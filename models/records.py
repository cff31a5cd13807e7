"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Tuple

CHANNEL_COUNT = 6


@dataclass(frozen=True, slots=True)
class FeedSample:
    """One timestamped feed record.

    ``fields`` holds only the channels the feed reported; any other channel
    reads as 0.0.
    """

    timestamp: datetime
    fields: Dict[int, float] = field(default_factory=dict)

    def value(self, channel: int) -> float:
        return self.fields.get(channel, 0.0)

    def reports(self, channel: int) -> bool:
        return channel in self.fields


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    timestamp: datetime
    value: float


@dataclass(frozen=True, slots=True)
class ChannelSeries:
    """Chronologically ordered readings for one logical channel."""

    name: str
    points: Tuple[SeriesPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def values(self) -> list[float]:
        return [point.value for point in self.points]

    @property
    def latest(self) -> float:
        if not self.points:
            return 0.0
        return self.points[-1].value


@dataclass(frozen=True, slots=True)
class PairSeries:
    """Status and current series for one primary/backup bulb pair."""

    pair: int
    primary_status: ChannelSeries
    primary_current: ChannelSeries
    backup_status: ChannelSeries
    backup_current: ChannelSeries
