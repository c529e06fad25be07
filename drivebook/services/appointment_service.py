"""
Appointment lifecycle.

Booking checks that the instructor, student and meeting point exist, then
scans the instructor's calendar before anything is written. Status or
description changes never re-run the conflict scan; a new start or end does,
with the appointment itself excluded.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy.orm import Session

from drivebook.models.appointment import Appointment, AppointmentStatus
from drivebook.models.student import Student
from drivebook.repositories.conflict_query_repository import SqlConflictQueryRepository
from drivebook.scheduling.conflicts import ScheduleConflictChecker
from drivebook.scheduling.errors import EntityNotFound, StudentNotFound
from drivebook.scheduling.intervals import Clock, TimeInterval, ensure_utc, utc_now
from drivebook.scheduling.temporal import parse_timestamp
from drivebook.services.common import get_instructor_or_raise, get_meeting_point_or_raise, instructor_write_lock

logger = logging.getLogger(__name__)

APPOINTMENT_LABEL = 'Rendez-vous'


class UserKind(str, Enum):
    INSTRUCTOR = 'INSTRUCTOR'
    STUDENT = 'STUDENT'


@dataclass(frozen=True)
class UserRef:
    """A caller identified by an explicit kind rather than by its fields."""

    kind: UserKind
    id: int


class AppointmentService:
    def __init__(self, db: Session, checker: ScheduleConflictChecker | None = None, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.checker = checker or ScheduleConflictChecker(SqlConflictQueryRepository(db), clock)

    def create_appointment(
        self,
        instructor_id: int,
        student_id: int,
        meeting_point_id: int,
        start_time: datetime | str,
        end_time: datetime | str,
        description: str | None = None,
    ) -> Appointment:
        get_instructor_or_raise(self.db, instructor_id)
        self._get_student_or_raise(student_id)
        get_meeting_point_or_raise(self.db, meeting_point_id)

        interval = TimeInterval(parse_timestamp(start_time), parse_timestamp(end_time))

        with instructor_write_lock(instructor_id):
            self.checker.check_conflicts(instructor_id, interval.start, interval.end)

            now = self.clock()
            appointment = Appointment(
                instructor_id=instructor_id,
                student_id=student_id,
                meeting_point_id=meeting_point_id,
                start_time=interval.start,
                end_time=interval.end,
                status=AppointmentStatus.PENDING.value,
                is_accepted=False,
                is_valid=True,
                description=description or None,
                created_at=now,
                modified_at=now,
            )
            self.db.add(appointment)
            self.db.commit()
            self.db.refresh(appointment)

        logger.info(
            'Booked appointment %s for student %s with instructor %s',
            appointment.id,
            student_id,
            instructor_id,
        )
        return appointment

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if appointment is None:
            raise EntityNotFound(APPOINTMENT_LABEL, appointment_id)
        return appointment

    def list_appointments_for_user(self, user: UserRef) -> list[Appointment]:
        if user.kind is UserKind.INSTRUCTOR:
            get_instructor_or_raise(self.db, user.id)
            owner_column = Appointment.instructor_id
        else:
            self._get_student_or_raise(user.id)
            owner_column = Appointment.student_id

        return self.db.query(Appointment).filter(
            owner_column == user.id,
        ).order_by(Appointment.start_time.asc()).all()

    def modify_appointment(self, appointment_id: int, changes: dict[str, Any]) -> Appointment:
        appointment = self.get_appointment(appointment_id)

        if changes.get('meeting_point_id') is not None:
            get_meeting_point_or_raise(self.db, changes['meeting_point_id'])

        current_start = ensure_utc(appointment.start_time)
        current_end = ensure_utc(appointment.end_time)
        start = parse_timestamp(changes['start_time']) if changes.get('start_time') else current_start
        end = parse_timestamp(changes['end_time']) if changes.get('end_time') else current_end

        with instructor_write_lock(appointment.instructor_id):
            if (start, end) != (current_start, current_end):
                interval = TimeInterval(start, end)
                self.checker.check_conflicts_for_update(
                    appointment.instructor_id,
                    interval.start,
                    interval.end,
                    exclude_appointment_id=appointment_id,
                )

            appointment.start_time = start
            appointment.end_time = end
            if changes.get('meeting_point_id') is not None:
                appointment.meeting_point_id = changes['meeting_point_id']
            if changes.get('status') is not None:
                appointment.status = AppointmentStatus(changes['status']).value
            if changes.get('is_accepted') is not None:
                appointment.is_accepted = changes['is_accepted']
            if 'description' in changes:
                appointment.description = changes['description']
            appointment.modified_at = self.clock()

            self.db.commit()
            self.db.refresh(appointment)

        logger.info('Modified appointment %s', appointment_id)
        return appointment

    def delete_appointment(self, appointment_id: int) -> None:
        appointment = self.get_appointment(appointment_id)

        self.db.delete(appointment)
        self.db.commit()
        logger.info('Deleted appointment %s', appointment_id)

    def _get_student_or_raise(self, student_id: int) -> Student:
        student = self.db.query(Student).filter(Student.id == student_id).first()
        if student is None:
            raise StudentNotFound(student_id)
        return student
