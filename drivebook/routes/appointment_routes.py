from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drivebook.models.appointment import AppointmentStatus
from drivebook.routes.common import database_unavailable, ensure_database_ready, get_db, to_http_exception
from drivebook.scheduling.errors import ScheduleError
from drivebook.services.appointment_service import AppointmentService, UserKind, UserRef

router = APIRouter(tags=['appointments'])

MAX_DESCRIPTION_LENGTH = 600


def _normalize_description(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if len(normalized) > MAX_DESCRIPTION_LENGTH:
        raise ValueError(f'Description must be {MAX_DESCRIPTION_LENGTH} characters or fewer.')

    return normalized or None


class CreateAppointmentRequest(BaseModel):
    instructor_id: int
    student_id: int
    meeting_point_id: int
    start_time: datetime
    end_time: datetime
    description: str | None = None

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str | None) -> str | None:
        return _normalize_description(value)


class UpdateAppointmentRequest(BaseModel):
    meeting_point_id: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: AppointmentStatus | None = None
    is_accepted: bool | None = None
    description: str | None = None

    @field_validator('status', mode='before')
    @classmethod
    def validate_status(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str | None) -> str | None:
        return _normalize_description(value)


class AppointmentResponse(BaseModel):
    id: int
    instructor_id: int
    student_id: int
    meeting_point_id: int
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    is_accepted: bool
    is_valid: bool
    description: str | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None

    class Config:
        from_attributes = True


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(data: CreateAppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AppointmentService(db).create_appointment(
            instructor_id=data.instructor_id,
            student_id=data.student_id,
            meeting_point_id=data.meeting_point_id,
            start_time=data.start_time,
            end_time=data.end_time,
            description=data.description,
        )
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.get('/instructors/{instructor_id}', response_model=list[AppointmentResponse])
def list_instructor_appointments(instructor_id: int, db: Session = Depends(get_db)):
    return _list_for_user(UserRef(UserKind.INSTRUCTOR, instructor_id), db)


@router.get('/students/{student_id}', response_model=list[AppointmentResponse])
def list_student_appointments(student_id: int, db: Session = Depends(get_db)):
    return _list_for_user(UserRef(UserKind.STUDENT, student_id), db)


def _list_for_user(user: UserRef, db: Session):
    ensure_database_ready()

    try:
        return AppointmentService(db).list_appointments_for_user(user)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AppointmentService(db).get_appointment(appointment_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.put('/{appointment_id}', response_model=AppointmentResponse)
def modify_appointment(appointment_id: int, data: UpdateAppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AppointmentService(db).modify_appointment(appointment_id, data.model_dump(exclude_unset=True))
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{appointment_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(appointment_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        AppointmentService(db).delete_appointment(appointment_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
