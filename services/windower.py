"""Time windows over feed history and synthetic telemetry for when the feed is unavailable."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Sequence, Tuple

from app.schemas import TimeRange
from models.records import ChannelSeries, FeedSample, PairSeries, SeriesPoint
from services.aggregator import utc_now

POINT_COUNTS: Dict[TimeRange, int] = {
    TimeRange.day: 24,
    TimeRange.week: 7,
    TimeRange.month: 30,
}

_STEPS: Dict[TimeRange, timedelta] = {
    TimeRange.day: timedelta(hours=1),
    TimeRange.week: timedelta(days=1),
    TimeRange.month: timedelta(days=1),
}

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# Cumulative draw thresholds per pair: below ``off`` the primary failed,
# below ``partial`` it is dimmed, otherwise fully on.
_PRIMARY_WEIGHTS: Dict[int, Tuple[float, float]] = {
    1: (0.15, 0.30),
    2: (0.20, 0.30),
}
PARTIAL_CURRENT_BAND = (150, 179)
FULL_CURRENT_BAND = (280, 319)


def point_count(time_range: TimeRange) -> int:
    return POINT_COUNTS[TimeRange(time_range)]


def window_samples(
    samples: Sequence[FeedSample], time_range: TimeRange
) -> Tuple[FeedSample, ...]:
    """The most recent ``point_count(time_range)`` samples, oldest first.

    Shorter histories are returned whole.
    """
    return tuple(samples[-point_count(time_range):])


def window_timestamps(time_range: TimeRange, now: datetime) -> list[datetime]:
    """Evenly spaced timestamps ending one step before ``now``."""
    count = point_count(time_range)
    step = _STEPS[TimeRange(time_range)]
    return [now - (count - index) * step for index in range(count)]


def format_label(timestamp: datetime, time_range: TimeRange) -> str:
    time_range = TimeRange(time_range)
    if time_range is TimeRange.day:
        return f"{timestamp.hour}:00"
    if time_range is TimeRange.week:
        # datetime.weekday() counts from Monday.
        return WEEKDAY_LABELS[(timestamp.weekday() + 1) % 7]
    return f"{timestamp.day}/{timestamp.month}"


@dataclass(frozen=True)
class SyntheticWindow:
    time_range: TimeRange
    samples: Tuple[FeedSample, ...]
    pairs: Tuple[PairSeries, ...]


class SeriesWindower:
    """Generates plausible readings that keep the failover correlations.

    A backup bulb is active exactly when its primary is off, and currents
    follow the status of the bulb that draws them.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.rng = rng or random.Random()
        self.clock = clock

    def synthesize(
        self, time_range: TimeRange, pairs: Sequence[int] = (1, 2)
    ) -> SyntheticWindow:
        time_range = TimeRange(time_range)
        timestamps = window_timestamps(time_range, self.clock())
        fields: list[Dict[int, float]] = [{} for _ in timestamps]
        pair_series: list[PairSeries] = []

        for pair in pairs:
            primary = [self._draw_primary(pair) for _ in timestamps]
            primary_current = [self._primary_current(status) for status in primary]
            backup = [1.0 if status == 0 else 0.0 for status in primary]
            backup_current = [
                float(self.rng.randint(*FULL_CURRENT_BAND)) if status == 1 else 0.0
                for status in backup
            ]

            for index, row in enumerate(fields):
                row[2 * pair - 1] = primary[index]
                row[2 * pair] = backup[index]
                row[4 + pair] = primary_current[index] + backup_current[index]

            pair_series.append(
                PairSeries(
                    pair=pair,
                    primary_status=_series(f"primary_bulb_{pair}", timestamps, primary),
                    primary_current=_series(
                        f"primary_current_{pair}", timestamps, primary_current
                    ),
                    backup_status=_series(f"secondary_bulb_{pair}", timestamps, backup),
                    backup_current=_series(
                        f"secondary_current_{pair}", timestamps, backup_current
                    ),
                )
            )

        samples = tuple(
            FeedSample(timestamp=timestamp, fields=row)
            for timestamp, row in zip(timestamps, fields)
        )
        return SyntheticWindow(time_range=time_range, samples=samples, pairs=tuple(pair_series))

    def _draw_primary(self, pair: int) -> float:
        off, partial = _PRIMARY_WEIGHTS.get(pair, _PRIMARY_WEIGHTS[1])
        draw = self.rng.random()
        if draw < off:
            return 0.0
        if draw < partial:
            return 0.5
        return 1.0

    def _primary_current(self, status: float) -> float:
        if status == 0:
            return 0.0
        if status == 0.5:
            return float(self.rng.randint(*PARTIAL_CURRENT_BAND))
        return float(self.rng.randint(*FULL_CURRENT_BAND))


def _series(name: str, timestamps: Sequence[datetime], values: Sequence[float]) -> ChannelSeries:
    return ChannelSeries(
        name=name,
        points=tuple(
            SeriesPoint(timestamp=timestamp, value=value)
            for timestamp, value in zip(timestamps, values)
        ),
    )
