from datetime import datetime, timedelta, timezone

import pytest

from drivebook.scheduling.errors import (
    ExpiryBeforeIntervalError,
    ExpiryInPastError,
    ExpiryNotApplicableError,
    InvalidRecurrenceRuleError,
    RecurrenceRuleRequiredError,
)
from drivebook.scheduling.intervals import TimeInterval
from drivebook.scheduling.recurrence import RecurrenceRule, parse_recurrence_rule, validate_recurrence

NOW = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)
WINDOW = TimeInterval(datetime(2025, 6, 10, 10, 0, tzinfo=timezone.utc), datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc))


def test_recurring_window_requires_rule() -> None:
    with pytest.raises(RecurrenceRuleRequiredError):
        validate_recurrence(True, None, None, WINDOW, NOW)


def test_missing_rule_is_reported_before_expiry_problems() -> None:
    with pytest.raises(RecurrenceRuleRequiredError):
        validate_recurrence(True, None, NOW - timedelta(days=1), WINDOW, NOW)


def test_expiry_not_applicable_to_one_off_window() -> None:
    with pytest.raises(ExpiryNotApplicableError):
        validate_recurrence(False, None, WINDOW.end + timedelta(days=30), WINDOW, NOW)


def test_not_applicable_takes_precedence_over_past_expiry() -> None:
    with pytest.raises(ExpiryNotApplicableError):
        validate_recurrence(False, None, NOW - timedelta(days=1), WINDOW, NOW)


@pytest.mark.parametrize('expiry', [NOW - timedelta(days=1), NOW])
def test_expiry_must_be_after_now(expiry: datetime) -> None:
    with pytest.raises(ExpiryInPastError):
        validate_recurrence(True, RecurrenceRule.WEEKLY, expiry, WINDOW, NOW)


@pytest.mark.parametrize(
    'expiry',
    [
        NOW + timedelta(days=2),
        WINDOW.start,
        WINDOW.start + timedelta(minutes=30),
        WINDOW.end,
    ],
)
def test_expiry_must_be_after_window_end(expiry: datetime) -> None:
    with pytest.raises(ExpiryBeforeIntervalError):
        validate_recurrence(True, RecurrenceRule.DAILY, expiry, WINDOW, NOW)


def test_expiry_after_window_end_is_accepted() -> None:
    validate_recurrence(True, RecurrenceRule.MONTHLY, WINDOW.end + timedelta(minutes=1), WINDOW, NOW)


@pytest.mark.parametrize('rule', list(RecurrenceRule))
def test_recurring_window_without_expiry_is_accepted(rule: RecurrenceRule) -> None:
    validate_recurrence(True, rule, None, WINDOW, NOW)


def test_one_off_window_without_expiry_is_accepted() -> None:
    validate_recurrence(False, None, None, WINDOW, NOW)


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        (RecurrenceRule.DAILY, RecurrenceRule.DAILY),
        ('weekly', RecurrenceRule.WEEKLY),
        (' Monthly ', RecurrenceRule.MONTHLY),
        ('', None),
        (None, None),
    ],
)
def test_parse_recurrence_rule_normalizes_names(value, expected) -> None:
    assert parse_recurrence_rule(value) is expected


@pytest.mark.parametrize('value', ['HOURLY', 'every tuesday', 7])
def test_parse_recurrence_rule_rejects_unknown_rules(value) -> None:
    with pytest.raises(InvalidRecurrenceRuleError) as exception_info:
        parse_recurrence_rule(value)

    assert exception_info.value.value == value
