"""Half-open time intervals and the overlap predicate."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, TypeVar

from drivebook.scheduling.errors import InvalidRangeError

Clock = Callable[[], datetime]

T = TypeVar('T')


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    # Naive values come back from SQLite and are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TimeInterval:
    """A `[start, end)` range; constructing one with `end <= start` raises."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, 'start', ensure_utc(self.start))
        object.__setattr__(self, 'end', ensure_utc(self.end))
        if self.end <= self.start:
            raise InvalidRangeError()


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Touching intervals (one ends where the other starts) do not overlap."""
    return a.start < b.end and b.start < a.end


def find_overlapping(interval: TimeInterval, entries: Iterable[T]) -> list[T]:
    return [entry for entry in entries if overlaps(interval, entry.interval)]


def format_timestamp(value: datetime) -> str:
    return ensure_utc(value).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def describe_interval(interval: TimeInterval) -> str:
    return f'{format_timestamp(interval.start)} - {format_timestamp(interval.end)}'

