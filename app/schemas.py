"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from services.classifier import BackupStatus, BulbStatus, ClassifierMode


class TimeRange(str, Enum):
    """Window selectors offered by the dashboard."""

    day = "day"
    week = "week"
    month = "month"


class DataSource(str, Enum):
    feed = "feed"
    synthetic = "synthetic"


class DeviceStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class SnapshotModel(BaseModel):
    """Immutable payload base; serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DeviceSummary(SnapshotModel):
    """Per-streetlight state derived from the latest sample and the window."""

    id: str
    location: str
    status: DeviceStatus
    primary_bulb_1: bool = False
    secondary_bulb_1: bool = False
    primary_bulb_2: bool = False
    secondary_bulb_2: bool = False
    current_bulb_label: str = "None"
    last_switched: Union[Literal["Never", "N/A"], datetime] = Field(
        default="N/A",
        description="Approximate time of the last failover; not an audit log.",
    )
    current_milliamps: float = 0.0
    health: int = Field(
        default=0, ge=0, le=100, description="Synthetic placeholder score."
    )
    total_switches: int = Field(default=0, ge=0, le=9)


class FleetStats(SnapshotModel):
    fleet_size: int = Field(..., ge=0)
    active_count: int = Field(..., ge=0)
    primary_active_count: int = Field(..., ge=0)
    secondary_active_count: int = Field(..., ge=0)
    failure_count: int = Field(
        ..., ge=0, description="Cumulative pair failures over the window."
    )


class ChartPoint(SnapshotModel):
    timestamp: datetime
    label: str
    value: float
    status: Union[BulbStatus, BackupStatus]
    current: float


class BulbChart(SnapshotModel):
    """Status and current series for one bulb, ready for plotting."""

    key: str
    title: str
    mode: ClassifierMode
    points: Tuple[ChartPoint, ...] = ()


class DashboardSnapshot(SnapshotModel):
    """Everything the presentation layer needs for one refresh cycle."""

    request_id: int = Field(..., ge=0)
    time_range: TimeRange
    source: DataSource
    generated_at: datetime
    devices: Tuple[DeviceSummary, ...] = ()
    stats: FleetStats
    charts: Tuple[BulbChart, ...] = ()
    notice: Optional[str] = None


class SensorDataResponse(SnapshotModel):
    time_range: TimeRange
    charts: Tuple[BulbChart, ...] = ()


class ActivityPoint(SnapshotModel):
    timestamp: datetime
    label: str
    failures: int = Field(..., ge=0)
    backups_active: int = Field(..., ge=0)


class ActivityResponse(SnapshotModel):
    time_range: TimeRange
    stats: FleetStats
    points: Tuple[ActivityPoint, ...] = ()
