from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drivebook.routes.common import database_unavailable, ensure_database_ready, get_db, to_http_exception
from drivebook.scheduling.errors import ScheduleError
from drivebook.services.unavailability_service import UnavailabilityService

router = APIRouter(tags=['unavailabilities'])


class CreateUnavailabilityRequest(BaseModel):
    start_date_time: datetime
    end_date_time: datetime
    reason: str

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('A reason is required.')
        return normalized


class UpdateUnavailabilityRequest(BaseModel):
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    reason: str | None = None

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            raise ValueError('A reason is required.')
        return normalized

    def to_changes(self) -> dict:
        changes = {'start': self.start_date_time, 'end': self.end_date_time}
        if self.reason is not None:
            changes['reason'] = self.reason
        return changes


class UnavailabilityResponse(BaseModel):
    id: int
    instructor_id: int
    start_date_time: datetime
    end_date_time: datetime
    reason: str | None = None

    class Config:
        from_attributes = True


@router.get('/{instructor_id}/unavailabilities', response_model=list[UnavailabilityResponse])
def list_unavailabilities(instructor_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return UnavailabilityService(db).list_unavailabilities(instructor_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post(
    '/{instructor_id}/unavailabilities',
    response_model=UnavailabilityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_unavailability(instructor_id: int, data: CreateUnavailabilityRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return UnavailabilityService(db).create_unavailability(
            instructor_id,
            start=data.start_date_time,
            end=data.end_date_time,
            reason=data.reason,
        )
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.put('/{instructor_id}/unavailabilities/{unavailability_id}', response_model=UnavailabilityResponse)
def modify_unavailability(
    instructor_id: int,
    unavailability_id: int,
    data: UpdateUnavailabilityRequest,
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return UnavailabilityService(db).modify_unavailability(instructor_id, unavailability_id, data.to_changes())
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{instructor_id}/unavailabilities/{unavailability_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_unavailability(instructor_id: int, unavailability_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        UnavailabilityService(db).delete_unavailability(instructor_id, unavailability_id)
    except ScheduleError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
