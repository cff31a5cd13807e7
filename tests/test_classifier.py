from __future__ import annotations

import pytest

from services.classifier import (
    ACTIVITY_THRESHOLD,
    FAILURE_THRESHOLD,
    FULL_ON,
    BackupStatus,
    BulbStatus,
    ClassifierMode,
    classify,
    classify_pair,
    describe,
    is_active,
    is_failed,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (-1.0, BulbStatus.off),
        (0.0, BulbStatus.off),
        (0.05, BulbStatus.partial),
        (0.5, BulbStatus.partial),
        (0.99, BulbStatus.partial),
        (1.0, BulbStatus.on),
        (300.0, BulbStatus.on),
    ],
)
def test_primary_classification(value: float, expected: BulbStatus) -> None:
    assert classify(value, ClassifierMode.primary) is expected


def test_primary_is_default_mode() -> None:
    assert classify(0.5) is BulbStatus.partial


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.0, BackupStatus.standby),
        (0.5, BackupStatus.standby),
        (1.0, BackupStatus.active),
        (2.0, BackupStatus.active),
    ],
)
def test_backup_classification_is_binary(value: float, expected: BackupStatus) -> None:
    assert classify(value, ClassifierMode.backup) is expected


def test_thresholds_are_distinct() -> None:
    assert FAILURE_THRESHOLD < ACTIVITY_THRESHOLD < FULL_ON
    assert is_active(0.51)
    assert not is_active(0.5)
    assert is_failed(0.09)
    assert not is_failed(0.1)


def test_classify_pair_reports_backup_flag() -> None:
    state = classify_pair(0.0, 1.0)

    assert state.primary is BulbStatus.off
    assert state.backup is BackupStatus.active
    assert state.backup_active is True
    assert classify_pair(1.0, 0.0).backup_active is False


def test_describe_labels() -> None:
    assert describe(BulbStatus.off) == "OFF (Failure)"
    assert describe(BulbStatus.partial) == "PARTIAL (Dimmed)"
    assert describe(BackupStatus.active) == "ACTIVE (Primary Failed)"
