from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drivebook.routes.common import database_unavailable, ensure_database_ready, get_db, to_http_exception
from drivebook.scheduling.errors import ScheduleError
from drivebook.services.meeting_point_service import MeetingPointService

router = APIRouter(tags=['meeting-points'])

MAX_NAME_LENGTH = 120


def _normalize_name(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError('A name is required.')
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValueError(f'Names must be {MAX_NAME_LENGTH} characters or fewer.')
    return normalized


class CreateMeetingPointRequest(BaseModel):
    instructor_id: int
    name: str
    longitude: float = Field(ge=-180, le=180)
    latitude: float = Field(ge=-90, le=90)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _normalize_name(value)


class UpdateMeetingPointRequest(BaseModel):
    name: str | None = None
    longitude: float | None = Field(default=None, ge=-180, le=180)
    latitude: float | None = Field(default=None, ge=-90, le=90)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _normalize_name(value)


class MeetingPointResponse(BaseModel):
    id: int
    instructor_id: int
    name: str | None = None
    longitude: float | None = None
    latitude: float | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None

    class Config:
        from_attributes = True


@router.get('', response_model=list[MeetingPointResponse])
def list_meeting_points(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return MeetingPointService(db).list_meeting_points()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=MeetingPointResponse, status_code=status.HTTP_201_CREATED)
def create_meeting_point(data: CreateMeetingPointRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return MeetingPointService(db).create_meeting_point(
            data.instructor_id,
            name=data.name,
            longitude=data.longitude,
            latitude=data.latitude,
        )
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.put('/{meeting_point_id}', response_model=MeetingPointResponse)
def modify_meeting_point(meeting_point_id: int, data: UpdateMeetingPointRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return MeetingPointService(db).modify_meeting_point(meeting_point_id, data.model_dump(exclude_unset=True))
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{meeting_point_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_meeting_point(meeting_point_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        MeetingPointService(db).delete_meeting_point(meeting_point_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
