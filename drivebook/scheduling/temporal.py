from datetime import datetime

from drivebook.scheduling.errors import InvalidRangeError, InvalidTimestampError, PastStartError
from drivebook.scheduling.intervals import TimeInterval, ensure_utc


def parse_timestamp(value: datetime | str) -> datetime:
    """Return an aware UTC datetime; unparseable strings are rejected."""
    if isinstance(value, datetime):
        return ensure_utc(value)

    if not isinstance(value, str) or not value.strip():
        raise InvalidTimestampError(value)

    normalized = value.strip()
    if normalized.endswith(('Z', 'z')):
        normalized = normalized[:-1] + '+00:00'

    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise InvalidTimestampError(value) from exc

    return ensure_utc(parsed)


def validate_range(start: datetime, end: datetime, now: datetime) -> TimeInterval:
    start = ensure_utc(start)
    end = ensure_utc(end)

    if end <= start:
        raise InvalidRangeError()

    if start < ensure_utc(now):
        raise PastStartError()

    return TimeInterval(start, end)
