from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drivebook.routes.common import database_unavailable, ensure_database_ready, get_db, to_http_exception
from drivebook.scheduling.errors import ScheduleError
from drivebook.scheduling.recurrence import RecurrenceRule
from drivebook.services.availability_service import AvailabilityService

router = APIRouter(tags=['availabilities'])

MAX_NOTE_LENGTH = 500


def _normalize_rule(value):
    if isinstance(value, str):
        normalized = value.strip().upper()
        return normalized or None
    return value


def _normalize_note(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > MAX_NOTE_LENGTH:
        raise ValueError(f'Notes must be {MAX_NOTE_LENGTH} characters or fewer.')

    return normalized


class CreateAvailabilityRequest(BaseModel):
    start_date_time: datetime
    end_date_time: datetime
    is_recurring: bool = False
    recurrence_rule: RecurrenceRule | None = None
    expiry_date: datetime | None = None
    note: str | None = None

    @field_validator('recurrence_rule', mode='before')
    @classmethod
    def validate_recurrence_rule(cls, value):
        return _normalize_rule(value)

    @field_validator('note')
    @classmethod
    def validate_note(cls, value: str | None) -> str | None:
        return _normalize_note(value)


class UpdateAvailabilityRequest(BaseModel):
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    is_recurring: bool | None = None
    recurrence_rule: RecurrenceRule | None = None
    expiry_date: datetime | None = None
    note: str | None = None

    @field_validator('recurrence_rule', mode='before')
    @classmethod
    def validate_recurrence_rule(cls, value):
        return _normalize_rule(value)

    @field_validator('note')
    @classmethod
    def validate_note(cls, value: str | None) -> str | None:
        return _normalize_note(value)

    def to_changes(self) -> dict:
        provided = self.model_dump(exclude_unset=True)
        changes = {
            'start': provided.pop('start_date_time', None),
            'end': provided.pop('end_date_time', None),
        }
        if provided.get('is_recurring') is None:
            provided.pop('is_recurring', None)
        changes.update(provided)
        return changes


class AvailabilityResponse(BaseModel):
    id: int
    instructor_id: int
    start_date_time: datetime
    end_date_time: datetime
    is_recurring: bool
    recurrence_rule: RecurrenceRule | None = None
    expiry_date: datetime | None = None
    note: str | None = None

    class Config:
        from_attributes = True


@router.get('/{instructor_id}/availabilities', response_model=list[AvailabilityResponse])
def list_availabilities(instructor_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AvailabilityService(db).list_availabilities(instructor_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post(
    '/{instructor_id}/availabilities',
    response_model=AvailabilityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_availability(instructor_id: int, data: CreateAvailabilityRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AvailabilityService(db).create_availability(
            instructor_id,
            start=data.start_date_time,
            end=data.end_date_time,
            is_recurring=data.is_recurring,
            recurrence_rule=data.recurrence_rule,
            expiry_date=data.expiry_date,
            note=data.note,
        )
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.put('/{instructor_id}/availabilities/{availability_id}', response_model=AvailabilityResponse)
def modify_availability(
    instructor_id: int,
    availability_id: int,
    data: UpdateAvailabilityRequest,
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AvailabilityService(db).modify_availability(instructor_id, availability_id, data.to_changes())
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{instructor_id}/availabilities/{availability_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_availability(instructor_id: int, availability_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        AvailabilityService(db).delete_availability(instructor_id, availability_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
