"""Meeting points offered by instructors as lesson pick-up locations."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from drivebook.models.meeting_point import MeetingPoint
from drivebook.scheduling.intervals import Clock, utc_now
from drivebook.services.common import get_instructor_or_raise, get_meeting_point_or_raise

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'longitude', 'latitude')


class MeetingPointService:
    def __init__(self, db: Session, clock: Clock = utc_now):
        self.db = db
        self.clock = clock

    def list_meeting_points(self) -> list[MeetingPoint]:
        return self.db.query(MeetingPoint).order_by(MeetingPoint.id.asc()).all()

    def list_for_instructor(self, instructor_id: int) -> list[MeetingPoint]:
        get_instructor_or_raise(self.db, instructor_id)

        return self.db.query(MeetingPoint).filter(
            MeetingPoint.instructor_id == instructor_id,
        ).order_by(MeetingPoint.id.asc()).all()

    def create_meeting_point(
        self,
        instructor_id: int,
        name: str,
        longitude: float,
        latitude: float,
    ) -> MeetingPoint:
        get_instructor_or_raise(self.db, instructor_id)

        now = self.clock()
        meeting_point = MeetingPoint(
            instructor_id=instructor_id,
            name=name,
            longitude=longitude,
            latitude=latitude,
            created_at=now,
            modified_at=now,
        )
        self.db.add(meeting_point)
        self.db.commit()
        self.db.refresh(meeting_point)

        logger.info('Created meeting point %s for instructor %s', meeting_point.id, instructor_id)
        return meeting_point

    def modify_meeting_point(self, meeting_point_id: int, changes: dict[str, Any]) -> MeetingPoint:
        """Update name and coordinates; ownership of a meeting point never moves."""
        meeting_point = get_meeting_point_or_raise(self.db, meeting_point_id)

        for field in EDITABLE_FIELDS:
            if changes.get(field) is not None:
                setattr(meeting_point, field, changes[field])
        meeting_point.modified_at = self.clock()

        self.db.commit()
        self.db.refresh(meeting_point)
        logger.info('Modified meeting point %s', meeting_point_id)
        return meeting_point

    def delete_meeting_point(self, meeting_point_id: int) -> None:
        meeting_point = get_meeting_point_or_raise(self.db, meeting_point_id)

        self.db.delete(meeting_point)
        self.db.commit()
        logger.info('Deleted meeting point %s', meeting_point_id)
