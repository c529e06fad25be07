"""Create, modify and delete instructor unavailability blocks."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from drivebook.models.unavailability import InstructorUnavailability
from drivebook.repositories.conflict_query_repository import SqlConflictQueryRepository
from drivebook.scheduling.conflicts import ScheduleConflictChecker
from drivebook.scheduling.intervals import Clock, ensure_utc, utc_now
from drivebook.services.common import get_instructor_or_raise, get_owned_or_raise, instructor_write_lock

logger = logging.getLogger(__name__)

UNAVAILABILITY_LABEL = 'Indisponibilité'


class UnavailabilityService:
    def __init__(self, db: Session, checker: ScheduleConflictChecker | None = None, clock: Clock = utc_now):
        self.db = db
        self.checker = checker or ScheduleConflictChecker(SqlConflictQueryRepository(db), clock)

    def create_unavailability(
        self,
        instructor_id: int,
        start: datetime,
        end: datetime,
        reason: str,
    ) -> InstructorUnavailability:
        get_instructor_or_raise(self.db, instructor_id)

        with instructor_write_lock(instructor_id):
            interval = self.checker.validate_range(start, end)
            self.checker.check_conflicts(instructor_id, interval.start, interval.end)

            unavailability = InstructorUnavailability(
                instructor_id=instructor_id,
                start_date_time=interval.start,
                end_date_time=interval.end,
                reason=reason,
            )
            self.db.add(unavailability)
            self.db.commit()
            self.db.refresh(unavailability)

        logger.info('Created unavailability %s for instructor %s', unavailability.id, instructor_id)
        return unavailability

    def list_unavailabilities(self, instructor_id: int) -> list[InstructorUnavailability]:
        get_instructor_or_raise(self.db, instructor_id)

        return self.db.query(InstructorUnavailability).filter(
            InstructorUnavailability.instructor_id == instructor_id,
        ).order_by(InstructorUnavailability.start_date_time.asc()).all()

    def modify_unavailability(
        self,
        instructor_id: int,
        unavailability_id: int,
        changes: dict[str, Any],
    ) -> InstructorUnavailability:
        get_instructor_or_raise(self.db, instructor_id)
        unavailability = get_owned_or_raise(
            self.db, InstructorUnavailability, unavailability_id, instructor_id, UNAVAILABILITY_LABEL
        )

        current_start = ensure_utc(unavailability.start_date_time)
        current_end = ensure_utc(unavailability.end_date_time)
        start = ensure_utc(changes.get('start') or current_start)
        end = ensure_utc(changes.get('end') or current_end)

        with instructor_write_lock(instructor_id):
            if (start, end) != (current_start, current_end):
                self.checker.validate_range(start, end)
                self.checker.check_conflicts_for_update(
                    instructor_id, start, end, exclude_unavailability_id=unavailability_id
                )

            unavailability.start_date_time = start
            unavailability.end_date_time = end
            if 'reason' in changes:
                unavailability.reason = changes['reason']

            self.db.commit()
            self.db.refresh(unavailability)

        logger.info('Modified unavailability %s for instructor %s', unavailability_id, instructor_id)
        return unavailability

    def delete_unavailability(self, instructor_id: int, unavailability_id: int) -> None:
        get_instructor_or_raise(self.db, instructor_id)
        unavailability = get_owned_or_raise(
            self.db, InstructorUnavailability, unavailability_id, instructor_id, UNAVAILABILITY_LABEL
        )

        self.db.delete(unavailability)
        self.db.commit()
        logger.info('Deleted unavailability %s for instructor %s', unavailability_id, instructor_id)
