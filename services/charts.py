"""Assembly of the four bulb status charts."""

from __future__ import annotations

from typing import Mapping, Sequence

from app.schemas import BulbChart, ChartPoint, TimeRange
from models.records import ChannelSeries, PairSeries, SeriesPoint
from services.classifier import ClassifierMode, classify
from services.windower import format_label


def pair_series_from_channels(
    channels: Mapping[int, ChannelSeries], pairs: Sequence[int] = (1, 2)
) -> tuple[PairSeries, ...]:
    """Map raw feed channels onto per-pair status and current series.

    A pair shares one current channel; it is attributed to the backup only
    while the backup reports a non-zero status.
    """
    result = []
    for pair in pairs:
        primary = channels[2 * pair - 1]
        backup = channels[2 * pair]
        current = channels[4 + pair]
        backup_current = ChannelSeries(
            name=f"secondary_current_{pair}",
            points=tuple(
                SeriesPoint(
                    timestamp=point.timestamp,
                    value=amps.value if point.value > 0 else 0.0,
                )
                for point, amps in zip(backup.points, current.points)
            ),
        )
        result.append(
            PairSeries(
                pair=pair,
                primary_status=primary,
                primary_current=ChannelSeries(
                    name=f"primary_current_{pair}", points=current.points
                ),
                backup_status=backup,
                backup_current=backup_current,
            )
        )
    return tuple(result)


def build_charts(
    pairs: Sequence[PairSeries], time_range: TimeRange
) -> tuple[BulbChart, ...]:
    charts: list[BulbChart] = []
    for series in pairs:
        charts.append(
            _chart(
                key=f"primary_{series.pair}",
                title=f"Primary Bulb {series.pair} Status",
                mode=ClassifierMode.primary,
                status=series.primary_status,
                current=series.primary_current,
                time_range=time_range,
            )
        )
        charts.append(
            _chart(
                key=f"secondary_{series.pair}",
                title=f"Secondary Bulb {series.pair} Status",
                mode=ClassifierMode.backup,
                status=series.backup_status,
                current=series.backup_current,
                time_range=time_range,
            )
        )
    return tuple(charts)


def _chart(
    key: str,
    title: str,
    mode: ClassifierMode,
    status: ChannelSeries,
    current: ChannelSeries,
    time_range: TimeRange,
) -> BulbChart:
    points = tuple(
        ChartPoint(
            timestamp=point.timestamp,
            label=format_label(point.timestamp, time_range),
            value=point.value,
            status=classify(point.value, mode),
            current=amps.value,
        )
        for point, amps in zip(status.points, current.points)
    )
    return BulbChart(key=key, title=title, mode=mode, points=points)
