import logging
from contextlib import contextmanager, nullcontext
from threading import Lock

from sqlalchemy.orm import Session

from drivebook.core import config
from drivebook.models.instructor import Instructor
from drivebook.models.meeting_point import MeetingPoint
from drivebook.scheduling.errors import EntityNotFound, InstructorNotFound, MeetingPointNotFound, OwnershipMismatch

logger = logging.getLogger(__name__)

_instructor_locks: dict[int, Lock] = {}
_instructor_locks_guard = Lock()


def get_instructor_or_raise(db: Session, instructor_id: int) -> Instructor:
    instructor = db.query(Instructor).filter(Instructor.id == instructor_id).first()
    if instructor is None:
        raise InstructorNotFound(instructor_id)
    return instructor


def get_meeting_point_or_raise(db: Session, meeting_point_id: int) -> MeetingPoint:
    meeting_point = db.query(MeetingPoint).filter(MeetingPoint.id == meeting_point_id).first()
    if meeting_point is None:
        raise MeetingPointNotFound(meeting_point_id)
    return meeting_point


def get_owned_or_raise(db: Session, model, entity_id: int, instructor_id: int, label: str):
    entity = db.query(model).filter(model.id == entity_id).first()
    if entity is None:
        raise EntityNotFound(label, entity_id)
    if entity.instructor_id != instructor_id:
        raise OwnershipMismatch(label, entity_id, instructor_id)
    return entity


def _lock_for(instructor_id: int) -> Lock:
    with _instructor_locks_guard:
        return _instructor_locks.setdefault(instructor_id, Lock())


@contextmanager
def _serialized(instructor_id: int):
    lock = _lock_for(instructor_id)
    with lock:
        logger.debug('Acquired schedule write lock for instructor %s', instructor_id)
        yield


def instructor_write_lock(instructor_id: int, enabled: bool | None = None):
    """Scope for a check-then-write sequence on one instructor's calendar.

    Without SERIALIZE_INSTRUCTOR_WRITES this is a no-op and two concurrent
    requests may both pass the conflict scan. The lock is per process.
    """
    if enabled is None:
        enabled = config.SERIALIZE_INSTRUCTOR_WRITES
    if not enabled:
        return nullcontext()
    return _serialized(instructor_id)
