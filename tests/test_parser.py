from __future__ import annotations

from datetime import datetime, timezone

import pytest

from services.errors import EmptyDataError
from services.parser import CHANNEL_NAMES, FeedParser, parse_reading, parse_timestamp


def _feed(*entries: dict) -> dict:
    return {"channel": {"id": 2923888}, "feeds": list(entries)}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1", 1.0),
        (" 2.5 ", 2.5),
        ("300", 300.0),
        (0.5, 0.5),
        (7, 7.0),
        (None, 0.0),
        ("", 0.0),
        ("   ", 0.0),
        ("on", 0.0),
        ("nan", 0.0),
        ("inf", 0.0),
        (True, 0.0),
        ({"value": 1}, 0.0),
    ],
)
def test_parse_reading_never_raises(raw, expected) -> None:
    assert parse_reading(raw) == expected


def test_parse_timestamp_normalizes_to_utc() -> None:
    assert parse_timestamp("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T02:00:00+02:00") == datetime(
        2024, 1, 1, tzinfo=timezone.utc
    )
    assert parse_timestamp("2024-01-01T00:00:00").tzinfo is timezone.utc


def test_parse_timestamp_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_timestamp("yesterday")


def test_parse_feed_keeps_order_and_zeroes_missing_fields() -> None:
    parser = FeedParser()
    payload = _feed(
        {"created_at": "2024-01-01T00:00:00Z", "field1": "1", "field2": "0", "field5": "300"},
        {"created_at": "2024-01-01T01:00:00Z", "field1": "0", "field2": "1", "field5": "oops"},
        {"created_at": "2024-01-01T02:00:00Z", "field1": "1", "field2": None, "field5": "300"},
    )

    samples = parser.parse_feed(payload)

    assert [sample.timestamp.hour for sample in samples] == [0, 1, 2]
    assert [sample.value(1) for sample in samples] == [1.0, 0.0, 1.0]
    assert [sample.value(5) for sample in samples] == [300.0, 0.0, 300.0]
    assert all(sample.value(6) == 0.0 for sample in samples)
    assert [sample.reports(2) for sample in samples] == [True, True, False]
    assert samples[1].reports(5) is True
    assert not any(sample.reports(6) for sample in samples)


def test_to_channel_series_has_equal_lengths() -> None:
    parser = FeedParser()
    samples = parser.parse_feed(
        _feed(
            {"created_at": "2024-01-01T00:00:00Z", "field3": "0.5"},
            {"created_at": "2024-01-01T01:00:00Z", "field3": "1"},
        )
    )

    channels = parser.to_channel_series(samples)

    assert sorted(channels) == [1, 2, 3, 4, 5, 6]
    assert {len(series) for series in channels.values()} == {2}
    assert channels[3].name == CHANNEL_NAMES[3] == "primary_bulb_2"
    assert channels[3].values == [0.5, 1.0]
    assert channels[3].latest == 1.0


@pytest.mark.parametrize("payload", [{"feeds": []}, {}, {"feeds": None}, []])
def test_parse_feed_without_samples_signals_empty(payload) -> None:
    with pytest.raises(EmptyDataError):
        FeedParser().parse_feed(payload)


def test_entries_without_usable_timestamp_are_dropped() -> None:
    parser = FeedParser()
    samples = parser.parse_feed(
        _feed(
            {"created_at": "not-a-date", "field1": "1"},
            "garbage",
            {"field1": "1"},
            {"created_at": "2024-01-01T00:00:00Z", "field1": "1"},
        )
    )

    assert len(samples) == 1
    assert samples[0].value(1) == 1.0


def test_feed_with_only_unusable_entries_signals_empty() -> None:
    with pytest.raises(EmptyDataError):
        FeedParser().parse_feed(_feed({"created_at": "bad"}, {"field1": "1"}))
