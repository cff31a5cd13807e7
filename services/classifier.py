"""Bulb state classification rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

ACTIVITY_THRESHOLD = 0.5
FAILURE_THRESHOLD = 0.1
FULL_ON = 1.0


class BulbStatus(str, Enum):
    """Tri-state status of a primary bulb."""

    on = "ON"
    partial = "PARTIAL"
    off = "OFF"


class BackupStatus(str, Enum):
    """Binary status of a backup bulb."""

    active = "ACTIVE"
    standby = "STANDBY"


class ClassifierMode(str, Enum):
    primary = "primary"
    backup = "backup"


_DESCRIPTIONS = {
    BulbStatus.on: "ON (Healthy)",
    BulbStatus.partial: "PARTIAL (Dimmed)",
    BulbStatus.off: "OFF (Failure)",
    BackupStatus.active: "ACTIVE (Primary Failed)",
    BackupStatus.standby: "STANDBY (Primary Working)",
}


@dataclass(frozen=True, slots=True)
class BulbState:
    primary: BulbStatus
    backup: BackupStatus

    @property
    def backup_active(self) -> bool:
        return self.backup is BackupStatus.active


def classify(
    value: float, mode: ClassifierMode = ClassifierMode.primary
) -> Union[BulbStatus, BackupStatus]:
    """Classify a single channel value.

    Primary channels use three classes so that a dimmed bulb stays visible
    on the status charts. Backup channels are standby or active only.
    """
    if mode is ClassifierMode.backup:
        return BackupStatus.active if value >= FULL_ON else BackupStatus.standby
    if value >= FULL_ON:
        return BulbStatus.on
    if value > 0:
        return BulbStatus.partial
    return BulbStatus.off


def classify_pair(primary: float, secondary: float) -> BulbState:
    return BulbState(
        primary=classify(primary, ClassifierMode.primary),
        backup=classify(secondary, ClassifierMode.backup),
    )


def is_active(value: float) -> bool:
    """Coarse on/off test used for device flags and switch counting."""
    return value > ACTIVITY_THRESHOLD


def is_failed(value: float) -> bool:
    return value < FAILURE_THRESHOLD


def describe(status: Union[BulbStatus, BackupStatus]) -> str:
    return _DESCRIPTIONS[status]
