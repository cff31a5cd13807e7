"""Unit tests for the per-device aggregation."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from app.schemas import DeviceStatus
from models.records import FeedSample
from services.aggregator import DeviceAggregator, build_fleet
from services.errors import EmptyDataError

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


def _sample(hour: int, **fields: float) -> FeedSample:
    """Helper to build a sample from ``f1=...`` style keyword arguments."""

    values = {int(key[1:]): value for key, value in fields.items()}
    return FeedSample(timestamp=NOW - timedelta(hours=hour), fields=values)


def _aggregator(seed: int = 7) -> DeviceAggregator:
    return DeviceAggregator(rng=random.Random(seed), clock=lambda: NOW)


def _scenario_history() -> list[FeedSample]:
    return [
        _sample(3, f1=1, f2=0, f5=300),
        _sample(2, f1=0, f2=1, f5=0),
        _sample(1, f1=1, f2=0, f5=300),
    ]


def test_build_fleet_uses_fixed_ids() -> None:
    fleet = build_fleet()

    assert [device.id for device in fleet] == ["SL-1000", "SL-1001"]
    assert [device.location for device in fleet] == ["Main St & 5th Ave", "Park Rd & Elm St"]
    assert (fleet[1].primary_channel, fleet[1].secondary_channel, fleet[1].current_channel) == (3, 4, 6)


@pytest.mark.parametrize("size", [0, 3])
def test_build_fleet_rejects_unsupported_sizes(size: int) -> None:
    with pytest.raises(ValueError):
        build_fleet(size)


def test_latest_sample_drives_device_flags() -> None:
    first, second = build_fleet()
    aggregator = _aggregator()

    summary = aggregator.summarize(first, _scenario_history())

    assert summary.status is DeviceStatus.active
    assert summary.primary_bulb_1 is True
    assert summary.secondary_bulb_1 is False
    assert summary.primary_bulb_2 is False
    assert summary.current_milliamps == 300.0
    assert summary.current_bulb_label == "Primary 1"
    assert summary.last_switched == "Never"
    assert summary.total_switches == 1
    assert 70 <= summary.health <= 100

    idle = aggregator.summarize(second, _scenario_history())
    assert idle.current_bulb_label == "None"
    assert idle.last_switched == "N/A"
    assert idle.current_milliamps == 0.0


def test_active_backup_reports_recent_switch() -> None:
    _, second = build_fleet()
    history = [_sample(1, f3=1, f6=310), _sample(0, f3=0, f4=1, f6=295)]

    summary = _aggregator().summarize(second, history)

    assert summary.secondary_bulb_2 is True
    assert summary.current_bulb_label == "Secondary 2"
    assert isinstance(summary.last_switched, datetime)
    assert NOW - timedelta(days=3) <= summary.last_switched <= NOW


def test_both_bulbs_lit_are_listed_in_order() -> None:
    first, _ = build_fleet()

    summary = _aggregator().summarize(first, [_sample(0, f1=1, f2=1, f5=600)])

    assert summary.current_bulb_label == "Primary 1, Secondary 1"


def test_switch_counter_wraps_at_ten() -> None:
    first, _ = build_fleet()
    history = [_sample(hour, f1=0, f2=1) for hour in range(12, 0, -1)]

    summary = _aggregator().summarize(first, history)

    assert summary.total_switches == 2


def test_inactive_device_reports_no_draw() -> None:
    first, _ = build_fleet()

    summary = _aggregator().summarize(first, _scenario_history(), active=False)

    assert summary.status is DeviceStatus.inactive
    assert summary.current_bulb_label == "None"
    assert summary.current_milliamps == 0.0
    assert summary.health == 0


def test_summaries_are_deterministic_apart_from_synthetic_fields() -> None:
    fleet = build_fleet()
    history = _scenario_history() + [_sample(0, f1=0, f2=1, f3=0.5, f5=290, f6=160)]

    first_pass = _aggregator(seed=1).summarize_fleet(fleet, history)
    second_pass = _aggregator(seed=2).summarize_fleet(fleet, history)

    synthetic = {"health", "last_switched"}
    assert [s.model_dump(exclude=synthetic) for s in first_pass] == [
        s.model_dump(exclude=synthetic) for s in second_pass
    ]


def test_same_seed_reproduces_synthetic_fields() -> None:
    fleet = build_fleet()
    history = [_sample(0, f1=0, f2=1, f5=300)]

    assert _aggregator(seed=3).summarize_fleet(fleet, history) == _aggregator(
        seed=3
    ).summarize_fleet(fleet, history)


def test_empty_history_is_rejected() -> None:
    first, _ = build_fleet()

    with pytest.raises(EmptyDataError):
        _aggregator().summarize(first, [])


def test_dimmed_primary_with_idle_backup_reads_as_unlit() -> None:
    first, _ = build_fleet()

    summary = _aggregator().summarize(first, [_sample(1, f1=0.5, f2=0, f5=160)])

    assert summary.primary_bulb_1 is False
    assert summary.secondary_bulb_1 is False
    assert summary.current_bulb_label == "None"
    assert summary.last_switched == "N/A"
    assert summary.current_milliamps == 160.0
