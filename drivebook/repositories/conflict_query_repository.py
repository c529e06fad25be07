"""
SQLAlchemy adapter for the conflict query port.

The instructor scope and the overlap predicate are pushed into SQL so that
only candidate rows are loaded; the checker re-applies the predicate in
Python on whatever comes back. Rows whose end is not after their start
cannot overlap anything and are never returned.
"""

from sqlalchemy.orm import Session

from drivebook.models.appointment import Appointment
from drivebook.models.availability import AvailabilitySchedule
from drivebook.models.unavailability import InstructorUnavailability
from drivebook.scheduling.intervals import TimeInterval
from drivebook.scheduling.ports import StoredInterval


class SqlConflictQueryRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_availabilities(
        self,
        instructor_id: int,
        overlapping: TimeInterval,
        exclude_id: int | None = None,
    ) -> list[StoredInterval]:
        query = self.db.query(
            AvailabilitySchedule.id,
            AvailabilitySchedule.start_date_time,
            AvailabilitySchedule.end_date_time,
        ).filter(
            AvailabilitySchedule.instructor_id == instructor_id,
            AvailabilitySchedule.start_date_time < overlapping.end,
            AvailabilitySchedule.end_date_time > overlapping.start,
            AvailabilitySchedule.end_date_time > AvailabilitySchedule.start_date_time,
        )
        if exclude_id is not None:
            query = query.filter(AvailabilitySchedule.id != exclude_id)

        return _to_stored_intervals(query.all())

    def find_unavailabilities(
        self,
        instructor_id: int,
        overlapping: TimeInterval,
        exclude_id: int | None = None,
    ) -> list[StoredInterval]:
        query = self.db.query(
            InstructorUnavailability.id,
            InstructorUnavailability.start_date_time,
            InstructorUnavailability.end_date_time,
        ).filter(
            InstructorUnavailability.instructor_id == instructor_id,
            InstructorUnavailability.start_date_time < overlapping.end,
            InstructorUnavailability.end_date_time > overlapping.start,
            InstructorUnavailability.end_date_time > InstructorUnavailability.start_date_time,
        )
        if exclude_id is not None:
            query = query.filter(InstructorUnavailability.id != exclude_id)

        return _to_stored_intervals(query.all())

    def find_confirmed_appointments(
        self,
        instructor_id: int,
        overlapping: TimeInterval,
        exclude_id: int | None = None,
    ) -> list[StoredInterval]:
        query = self.db.query(
            Appointment.id,
            Appointment.start_time,
            Appointment.end_time,
        ).filter(
            Appointment.instructor_id == instructor_id,
            Appointment.is_accepted.is_(True),
            Appointment.is_valid.is_(True),
            Appointment.start_time < overlapping.end,
            Appointment.end_time > overlapping.start,
            Appointment.end_time > Appointment.start_time,
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)

        return _to_stored_intervals(query.all())


def _to_stored_intervals(rows) -> list[StoredInterval]:
    return [StoredInterval(id=row_id, interval=TimeInterval(start, end)) for row_id, start, end in rows]
