from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drivebook.routes.common import database_unavailable, ensure_database_ready, get_db, to_http_exception
from drivebook.routes.meeting_point_routes import MeetingPointResponse
from drivebook.scheduling.errors import ScheduleError
from drivebook.services.instructor_service import InstructorService
from drivebook.services.meeting_point_service import MeetingPointService

router = APIRouter(tags=['instructors'])


class InstructorResponse(BaseModel):
    id: int
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    siret: str | None = None

    class Config:
        from_attributes = True


@router.get('', response_model=list[InstructorResponse])
def list_instructors(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return InstructorService(db).list_instructors()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{instructor_id}', response_model=InstructorResponse)
def get_instructor(instructor_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return InstructorService(db).get_instructor(instructor_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{instructor_id}/meeting-points', response_model=list[MeetingPointResponse])
def list_instructor_meeting_points(instructor_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return MeetingPointService(db).list_for_instructor(instructor_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
