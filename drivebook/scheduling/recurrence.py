"""Recurrence and expiry policy for availability windows.

The checks run in a fixed order; each one assumes the previous ones
passed, so a non-recurring entry never reaches the expiry date checks.
"""

from datetime import datetime
from enum import Enum

from drivebook.scheduling.errors import (
    ExpiryBeforeIntervalError,
    ExpiryInPastError,
    ExpiryNotApplicableError,
    InvalidRecurrenceRuleError,
    RecurrenceRuleRequiredError,
)
from drivebook.scheduling.intervals import TimeInterval, ensure_utc


class RecurrenceRule(str, Enum):
    DAILY = 'DAILY'
    WEEKLY = 'WEEKLY'
    MONTHLY = 'MONTHLY'
    YEARLY = 'YEARLY'


def parse_recurrence_rule(value: RecurrenceRule | str | None) -> RecurrenceRule | None:
    """Accept an enum member or a case-insensitive name; blank means no rule."""
    if value is None or isinstance(value, RecurrenceRule):
        return value
    if not isinstance(value, str):
        raise InvalidRecurrenceRuleError(value)

    normalized = value.strip().upper()
    if not normalized:
        return None
    try:
        return RecurrenceRule(normalized)
    except ValueError as exc:
        raise InvalidRecurrenceRuleError(value) from exc


def validate_recurrence(
    is_recurring: bool,
    recurrence_rule: RecurrenceRule | None,
    expiry_date: datetime | None,
    interval: TimeInterval,
    now: datetime,
) -> None:
    if is_recurring and not recurrence_rule:
        raise RecurrenceRuleRequiredError()

    if not is_recurring and expiry_date is not None:
        raise ExpiryNotApplicableError()

    if expiry_date is None:
        return

    expiry = ensure_utc(expiry_date)
    if expiry <= ensure_utc(now):
        raise ExpiryInPastError()

    # interval.end > interval.start, so this also covers expiry <= start.
    if expiry <= interval.end:
        raise ExpiryBeforeIntervalError()
