from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.schemas import DeviceStatus, DeviceSummary
from models.records import FeedSample
from services.aggregator import build_fleet
from services.reducer import FleetStatsReducer

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _samples(rows: list[dict[int, float]]) -> list[FeedSample]:
    return [
        FeedSample(timestamp=START + timedelta(hours=index), fields=row)
        for index, row in enumerate(rows)
    ]


def _device(device_id: str, **flags) -> DeviceSummary:
    return DeviceSummary(id=device_id, location="somewhere", status=DeviceStatus.active, **flags)


def test_counts_follow_device_flags() -> None:
    fleet = build_fleet()
    summaries = [
        _device("SL-1000", primary_bulb_1=True, secondary_bulb_1=True),
        DeviceSummary(id="SL-1001", location="elsewhere", status=DeviceStatus.inactive),
    ]

    stats = FleetStatsReducer().reduce(summaries, [], fleet)

    assert stats.fleet_size == 2
    assert stats.active_count == 1
    assert stats.primary_active_count == 1
    assert stats.secondary_active_count == 1
    assert stats.failure_count == 0


def test_every_dark_sample_counts_as_failure() -> None:
    fleet = build_fleet()
    samples = _samples([{1: 0.05, 2: 0.02} for _ in range(5)])

    assert FleetStatsReducer.count_failures(samples, fleet) == 5


def test_partial_primary_is_not_a_failure() -> None:
    fleet = build_fleet(1)
    samples = _samples([{1: 0.5, 2: 0.0}, {1: 0.0, 2: 1.0}, {1: 0.0, 2: 0.0}])

    assert FleetStatsReducer.count_failures(samples, fleet) == 1


def test_failures_accumulate_across_pairs_and_samples() -> None:
    fleet = build_fleet(2)
    samples = _samples(
        [
            {1: 0.0, 2: 0.0, 3: 0.0, 4: 0.0},
            {1: 1.0, 2: 0.0, 3: 0.0, 4: 0.0},
            {1: 1.0, 2: 0.0, 3: 1.0, 4: 0.0},
        ]
    )

    stats = FleetStatsReducer().reduce([], samples, fleet)

    assert stats.failure_count == 3
    assert FleetStatsReducer.failures_in_sample(samples[0], fleet) == 2


def test_reduce_is_repeatable() -> None:
    fleet = build_fleet()
    summaries = [_device("SL-1000", primary_bulb_1=True), _device("SL-1001", secondary_bulb_2=True)]
    samples = _samples([{1: 1.0, 3: 0.0, 4: 1.0}, {1: 0.0, 2: 0.0}])
    reducer = FleetStatsReducer()

    assert reducer.reduce(summaries, samples, fleet) == reducer.reduce(summaries, samples, fleet)


def test_unreported_pair_is_never_a_failure() -> None:
    fleet = build_fleet()
    samples = _samples([{1: 0.0, 2: 0.0, 3: 0.0}, {1: 1.0, 2: 0.0, 3: 0.0, 4: 0.0}])

    assert FleetStatsReducer.count_failures(samples, fleet) == 2
    assert FleetStatsReducer.failures_in_sample(samples[0], fleet) == 1
