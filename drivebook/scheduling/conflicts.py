"""
Schedule conflict checker.

Guards an instructor's calendar: a proposed interval is rejected when it
overlaps a stored availability, unavailability or confirmed appointment of
the same instructor. Categories are evaluated in a fixed order and the
first non-empty one is raised; conflicts are never aggregated across
categories.
"""

import logging
from datetime import datetime

from drivebook.scheduling.errors import CONFLICT_ERRORS, ConflictKind
from drivebook.scheduling.intervals import Clock, TimeInterval, describe_interval, find_overlapping, utc_now
from drivebook.scheduling.ports import ConflictQueryPort
from drivebook.scheduling.recurrence import RecurrenceRule, validate_recurrence
from drivebook.scheduling.temporal import validate_range

logger = logging.getLogger(__name__)


class ScheduleConflictChecker:
    """
    Validation entry point used by the lifecycle services.

    Args:
        port: Read access to stored intervals
        clock: Source of "now"; tests pass a fixed clock
    """

    def __init__(self, port: ConflictQueryPort, clock: Clock = utc_now):
        self.port = port
        self.clock = clock

    def validate_range(self, start: datetime, end: datetime) -> TimeInterval:
        return validate_range(start, end, self.clock())

    def validate_recurrence(
        self,
        is_recurring: bool,
        recurrence_rule: RecurrenceRule | None,
        expiry_date: datetime | None,
        start: datetime,
        end: datetime,
    ) -> None:
        validate_recurrence(is_recurring, recurrence_rule, expiry_date, TimeInterval(start, end), self.clock())

    def check_conflicts(self, instructor_id: int, start: datetime, end: datetime) -> None:
        self.check_conflicts_for_update(instructor_id, start, end)

    def check_conflicts_for_update(
        self,
        instructor_id: int,
        start: datetime,
        end: datetime,
        exclude_availability_id: int | None = None,
        exclude_unavailability_id: int | None = None,
        exclude_appointment_id: int | None = None,
    ) -> None:
        """
        Raise the first conflict category found for the interval.

        The excluded ids drop the record being edited from its own scan.
        Appointments are only excluded when an appointment is rescheduled.
        """
        interval = TimeInterval(start, end)

        scans = [
            (
                ConflictKind.AVAILABILITY,
                self.port.find_availabilities(instructor_id, interval, exclude_availability_id),
            ),
            (
                ConflictKind.UNAVAILABILITY,
                self.port.find_unavailabilities(instructor_id, interval, exclude_unavailability_id),
            ),
            (
                ConflictKind.APPOINTMENT,
                self.port.find_confirmed_appointments(instructor_id, interval, exclude_appointment_id),
            ),
        ]

        for kind, entries in scans:
            conflicting = find_overlapping(interval, entries)
            if conflicting:
                logger.warning(
                    'Found %d %s entries for instructor %s between %s',
                    len(conflicting),
                    kind.value,
                    instructor_id,
                    describe_interval(interval),
                )
                raise CONFLICT_ERRORS[kind]([describe_interval(entry.interval) for entry in conflicting])
