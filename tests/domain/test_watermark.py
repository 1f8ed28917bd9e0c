from __future__ import annotations

from datetime import UTC, datetime

import pytest

from grantsync.domain.errors import SourceFormatError
from grantsync.domain.watermark import WatermarkTracker, later_of, parse_source_timestamp


def test_parse_source_timestamp_accepts_fractional_seconds() -> None:
    parsed = parse_source_timestamp("2018-03-14 06:00:00.25")

    assert parsed == datetime(2018, 3, 14, 6, 0, 0, 250000, tzinfo=UTC)


def test_parse_source_timestamp_accepts_whole_seconds_and_dates() -> None:
    assert parse_source_timestamp("2018-03-14 06:00:00") == datetime(2018, 3, 14, 6, tzinfo=UTC)
    assert parse_source_timestamp("2018-03-14") == datetime(2018, 3, 14, tzinfo=UTC)


def test_parse_source_timestamp_rejects_garbage() -> None:
    with pytest.raises(SourceFormatError, match="Invalid source timestamp"):
        parse_source_timestamp("yesterday")


def test_later_of_compares_chronologically_not_lexically() -> None:
    # "2020-1-2" sorts before "2020-01-01" as text but is a later day
    assert later_of("2020-01-01 00:00:00.0", "2020-1-2 00:00:00.0") == "2020-1-2 00:00:00.0"
    assert later_of("2020-1-2 00:00:00.0", "2020-01-01 00:00:00.0") == "2020-1-2 00:00:00.0"


def test_later_of_keeps_current_representation_on_ties() -> None:
    assert later_of("2020-01-01 00:00:00.0", "2020-01-01 00:00:00.000") == "2020-01-01 00:00:00.0"


def test_tracker_takes_first_value_and_keeps_maximum() -> None:
    tracker = WatermarkTracker()

    tracker.fold("2020-01-02 00:00:00.0")
    tracker.fold("2020-01-01 00:00:00.0")
    tracker.fold("2019-12-31 23:59:59.9")

    assert tracker.latest == "2020-01-02 00:00:00.0"


@pytest.mark.parametrize(
    "timestamps",
    [
        ("2020-01-01 00:00:00.0", "2020-01-02 00:00:00.0"),
        ("2020-01-02 00:00:00.0", "2020-01-01 00:00:00.0"),
    ],
)
def test_tracker_result_is_order_independent(timestamps: tuple[str, str]) -> None:
    tracker = WatermarkTracker()
    for value in timestamps:
        tracker.fold(value)

    assert tracker.latest == "2020-01-02 00:00:00.0"


def test_tracker_ignores_missing_timestamps() -> None:
    tracker = WatermarkTracker()

    tracker.fold(None)
    tracker.fold("2020-01-01 00:00:00.0")
    tracker.fold(None)
    tracker.fold("  ")

    assert tracker.latest == "2020-01-01 00:00:00.0"


def test_tracker_rejects_malformed_first_value() -> None:
    tracker = WatermarkTracker()

    with pytest.raises(SourceFormatError):
        tracker.fold("not a timestamp")
    assert tracker.latest == ""
