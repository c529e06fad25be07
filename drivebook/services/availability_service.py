"""Create, modify and delete instructor availability windows."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from drivebook.models.availability import AvailabilitySchedule
from drivebook.repositories.conflict_query_repository import SqlConflictQueryRepository
from drivebook.scheduling.conflicts import ScheduleConflictChecker
from drivebook.scheduling.intervals import Clock, ensure_utc, utc_now
from drivebook.scheduling.recurrence import RecurrenceRule, parse_recurrence_rule
from drivebook.services.common import get_instructor_or_raise, get_owned_or_raise, instructor_write_lock

logger = logging.getLogger(__name__)

AVAILABILITY_LABEL = 'Disponibilité'
RECURRENCE_FIELDS = ('is_recurring', 'recurrence_rule', 'expiry_date')


class AvailabilityService:
    def __init__(self, db: Session, checker: ScheduleConflictChecker | None = None, clock: Clock = utc_now):
        self.db = db
        self.checker = checker or ScheduleConflictChecker(SqlConflictQueryRepository(db), clock)

    def create_availability(
        self,
        instructor_id: int,
        start: datetime,
        end: datetime,
        is_recurring: bool = False,
        recurrence_rule: RecurrenceRule | None = None,
        expiry_date: datetime | None = None,
        note: str | None = None,
    ) -> AvailabilitySchedule:
        get_instructor_or_raise(self.db, instructor_id)

        with instructor_write_lock(instructor_id):
            interval = self.checker.validate_range(start, end)
            recurrence_rule = parse_recurrence_rule(recurrence_rule)
            self.checker.validate_recurrence(is_recurring, recurrence_rule, expiry_date, interval.start, interval.end)
            self.checker.check_conflicts(instructor_id, interval.start, interval.end)

            availability = AvailabilitySchedule(
                instructor_id=instructor_id,
                start_date_time=interval.start,
                end_date_time=interval.end,
                is_recurring=is_recurring,
                recurrence_rule=_rule_value(recurrence_rule) if is_recurring else None,
                expiry_date=ensure_utc(expiry_date) if expiry_date else None,
                note=note,
            )
            self.db.add(availability)
            self.db.commit()
            self.db.refresh(availability)

        logger.info('Created availability %s for instructor %s', availability.id, instructor_id)
        return availability

    def list_availabilities(self, instructor_id: int) -> list[AvailabilitySchedule]:
        get_instructor_or_raise(self.db, instructor_id)

        return self.db.query(AvailabilitySchedule).filter(
            AvailabilitySchedule.instructor_id == instructor_id,
        ).order_by(AvailabilitySchedule.start_date_time.asc()).all()

    def modify_availability(
        self,
        instructor_id: int,
        availability_id: int,
        changes: dict[str, Any],
    ) -> AvailabilitySchedule:
        """
        Apply a partial update.

        Range and conflict checks only run when the start or end moves; the
        recurrence policy runs on the merged record whenever a date or a
        recurrence field is part of the update.
        """
        get_instructor_or_raise(self.db, instructor_id)
        availability = get_owned_or_raise(
            self.db, AvailabilitySchedule, availability_id, instructor_id, AVAILABILITY_LABEL
        )

        current_start = ensure_utc(availability.start_date_time)
        current_end = ensure_utc(availability.end_date_time)
        start = ensure_utc(changes.get('start') or current_start)
        end = ensure_utc(changes.get('end') or current_end)
        dates_changed = (start, end) != (current_start, current_end)

        is_recurring = changes.get('is_recurring', availability.is_recurring)
        recurrence_rule = parse_recurrence_rule(changes.get('recurrence_rule', availability.recurrence_rule))
        expiry_date = changes.get('expiry_date', availability.expiry_date)
        if not is_recurring and 'expiry_date' not in changes:
            # Turning recurrence off drops the stored expiry along with the rule.
            expiry_date = None

        with instructor_write_lock(instructor_id):
            if dates_changed:
                self.checker.validate_range(start, end)

            if dates_changed or any(field in changes for field in RECURRENCE_FIELDS):
                self.checker.validate_recurrence(is_recurring, recurrence_rule, expiry_date, start, end)

            if dates_changed:
                self.checker.check_conflicts_for_update(
                    instructor_id, start, end, exclude_availability_id=availability_id
                )

            availability.start_date_time = start
            availability.end_date_time = end
            availability.is_recurring = is_recurring
            availability.recurrence_rule = _rule_value(recurrence_rule) if is_recurring else None
            availability.expiry_date = ensure_utc(expiry_date) if expiry_date else None
            if 'note' in changes:
                availability.note = changes['note']

            self.db.commit()
            self.db.refresh(availability)

        logger.info('Modified availability %s for instructor %s', availability_id, instructor_id)
        return availability

    def delete_availability(self, instructor_id: int, availability_id: int) -> None:
        get_instructor_or_raise(self.db, instructor_id)
        availability = get_owned_or_raise(
            self.db, AvailabilitySchedule, availability_id, instructor_id, AVAILABILITY_LABEL
        )

        self.db.delete(availability)
        self.db.commit()
        logger.info('Deleted availability %s for instructor %s', availability_id, instructor_id)


def _rule_value(rule: RecurrenceRule | None) -> str | None:
    return rule.value if rule is not None else None
