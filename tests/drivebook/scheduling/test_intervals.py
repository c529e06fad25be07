from datetime import datetime, timedelta, timezone

import pytest

from drivebook.scheduling.errors import InvalidRangeError
from drivebook.scheduling.intervals import (
    TimeInterval,
    describe_interval,
    ensure_utc,
    find_overlapping,
    format_timestamp,
    overlaps,
)
from drivebook.scheduling.ports import StoredInterval

BASE = datetime(2025, 6, 10, tzinfo=timezone.utc)


def span(start_minute: int, end_minute: int) -> TimeInterval:
    return TimeInterval(BASE + timedelta(minutes=start_minute), BASE + timedelta(minutes=end_minute))


@pytest.mark.parametrize(
    ('first', 'second', 'expected'),
    [
        (span(0, 10), span(10, 20), False),
        (span(0, 10), span(20, 30), False),
        (span(0, 10), span(5, 15), True),
        (span(0, 30), span(10, 20), True),
        (span(0, 10), span(0, 10), True),
        (span(0, 10), span(0, 5), True),
        (span(0, 10), span(9, 10), True),
    ],
)
def test_overlaps_is_symmetric(first: TimeInterval, second: TimeInterval, expected: bool) -> None:
    assert overlaps(first, second) is expected
    assert overlaps(second, first) is expected


def test_interval_overlaps_itself() -> None:
    interval = span(60, 120)

    assert overlaps(interval, interval)


@pytest.mark.parametrize(('start_minute', 'end_minute'), [(10, 10), (10, 5)])
def test_time_interval_rejects_empty_or_reversed_range(start_minute: int, end_minute: int) -> None:
    with pytest.raises(InvalidRangeError):
        span(start_minute, end_minute)


def test_time_interval_treats_naive_values_as_utc() -> None:
    interval = TimeInterval(datetime(2025, 6, 10, 10, 0), datetime(2025, 6, 10, 12, 0))

    assert interval.start == datetime(2025, 6, 10, 10, 0, tzinfo=timezone.utc)
    assert interval.end.tzinfo is timezone.utc


def test_ensure_utc_converts_other_offsets() -> None:
    paris = timezone(timedelta(hours=2))

    assert ensure_utc(datetime(2025, 6, 10, 12, 0, tzinfo=paris)) == datetime(2025, 6, 10, 10, 0, tzinfo=timezone.utc)


def test_find_overlapping_keeps_read_order() -> None:
    entries = [
        StoredInterval(id=3, interval=span(50, 70)),
        StoredInterval(id=1, interval=span(0, 10)),
        StoredInterval(id=2, interval=span(30, 45)),
    ]

    conflicting = find_overlapping(span(40, 60), entries)

    assert [entry.id for entry in conflicting] == [3, 2]


def test_format_timestamp_round_trips() -> None:
    value = datetime(2025, 6, 10, 10, 0, 30, 123000, tzinfo=timezone.utc)

    rendered = format_timestamp(value)

    assert rendered == '2025-06-10T10:00:30.123Z'
    assert datetime.fromisoformat(rendered.replace('Z', '+00:00')) == value


def test_describe_interval_renders_start_and_end() -> None:
    assert describe_interval(span(600, 720)) == '2025-06-10T10:00:00.000Z - 2025-06-10T12:00:00.000Z'
