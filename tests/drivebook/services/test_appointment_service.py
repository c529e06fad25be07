from datetime import datetime, timezone

import pytest

from drivebook.models.appointment import Appointment, AppointmentStatus
from drivebook.models.availability import AvailabilitySchedule
from drivebook.scheduling.errors import (
    AppointmentConflict,
    AvailabilityConflict,
    EntityNotFound,
    InstructorNotFound,
    InvalidRangeError,
    InvalidTimestampError,
    MeetingPointNotFound,
    StudentNotFound,
)
from drivebook.scheduling.intervals import ensure_utc
from drivebook.services.appointment_service import AppointmentService, UserKind, UserRef


def at(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 6, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def service(seeded_db, fixed_clock) -> AppointmentService:
    return AppointmentService(seeded_db, clock=fixed_clock)


def book(service: AppointmentService, start: datetime, end: datetime, **kwargs) -> Appointment:
    return service.create_appointment(
        instructor_id=kwargs.pop('instructor_id', 1),
        student_id=1,
        meeting_point_id=1,
        start_time=start,
        end_time=end,
        **kwargs,
    )


def confirm(db, appointment: Appointment) -> None:
    appointment.is_accepted = True
    db.commit()


def test_create_appointment_starts_pending(service: AppointmentService, fixed_clock) -> None:
    appointment = book(service, at(10, 10), at(10, 11), description='Créneau autoroute')

    assert appointment.status == AppointmentStatus.PENDING.value
    assert appointment.is_accepted is False
    assert appointment.is_valid is True
    assert appointment.description == 'Créneau autoroute'
    assert ensure_utc(appointment.created_at) == fixed_clock()
    assert ensure_utc(appointment.modified_at) == fixed_clock()


def test_create_appointment_accepts_iso_strings(service: AppointmentService) -> None:
    appointment = book(service, '2025-06-10T10:00:00.000Z', '2025-06-10T11:00:00.000Z')

    assert ensure_utc(appointment.start_time) == at(10, 10)


def test_create_appointment_stores_empty_description_as_null(service: AppointmentService) -> None:
    appointment = book(service, at(10, 10), at(10, 11), description='')

    assert appointment.description is None


def test_create_appointment_rejects_unparseable_dates(service: AppointmentService, seeded_db) -> None:
    with pytest.raises(InvalidTimestampError):
        book(service, 'invalid-date', '2025-06-10T11:00:00.000Z')

    assert seeded_db.query(Appointment).count() == 0


def test_create_appointment_rejects_reversed_range(service: AppointmentService) -> None:
    with pytest.raises(InvalidRangeError):
        book(service, at(10, 11), at(10, 10))


@pytest.mark.parametrize(
    ('overrides', 'error'),
    [
        ({'instructor_id': 99}, InstructorNotFound),
        ({'student_id': 99}, StudentNotFound),
        ({'meeting_point_id': 99}, MeetingPointNotFound),
    ],
)
def test_create_appointment_checks_references(service: AppointmentService, seeded_db, overrides, error) -> None:
    arguments = {
        'instructor_id': 1,
        'student_id': 1,
        'meeting_point_id': 1,
        'start_time': at(10, 10),
        'end_time': at(10, 11),
    }
    arguments.update(overrides)

    with pytest.raises(error):
        service.create_appointment(**arguments)

    assert seeded_db.query(Appointment).count() == 0


def test_create_appointment_inside_availability_is_rejected(service: AppointmentService, seeded_db) -> None:
    seeded_db.add(AvailabilitySchedule(id=5, instructor_id=1, start_date_time=at(10, 10), end_date_time=at(10, 12)))
    seeded_db.commit()

    with pytest.raises(AvailabilityConflict) as exception_info:
        book(service, at(10, 11), at(10, 13))

    assert exception_info.value.conflicts == ['2025-06-10T10:00:00.000Z - 2025-06-10T12:00:00.000Z']


def test_unconfirmed_appointments_do_not_block_each_other(service: AppointmentService, seeded_db) -> None:
    book(service, at(10, 10), at(10, 11))
    book(service, at(10, 10), at(10, 11))

    assert seeded_db.query(Appointment).count() == 2


def test_confirmed_appointment_blocks_new_booking(service: AppointmentService, seeded_db) -> None:
    confirm(seeded_db, book(service, at(10, 10), at(10, 11)))

    with pytest.raises(AppointmentConflict):
        book(service, at(10, 10, 30), at(10, 11, 30))


def test_status_only_update_skips_conflict_scan(service: AppointmentService, seeded_db) -> None:
    appointment = book(service, at(10, 10), at(10, 11))
    seeded_db.add(AvailabilitySchedule(instructor_id=1, start_date_time=at(10, 9), end_date_time=at(10, 12)))
    seeded_db.commit()

    modified = service.modify_appointment(appointment.id, {'status': 'CONFIRMED', 'description': 'Validé'})

    assert modified.status == 'CONFIRMED'
    assert modified.description == 'Validé'


def test_reschedule_excludes_the_appointment_itself(service: AppointmentService, seeded_db) -> None:
    appointment = book(service, at(10, 10), at(10, 11))
    confirm(seeded_db, appointment)

    modified = service.modify_appointment(appointment.id, {'start_time': at(10, 10, 30), 'end_time': at(10, 11, 30)})

    assert ensure_utc(modified.start_time) == at(10, 10, 30)


def test_reschedule_onto_confirmed_appointment_is_rejected(service: AppointmentService, seeded_db) -> None:
    confirm(seeded_db, book(service, at(10, 14), at(10, 15)))
    appointment = book(service, at(10, 10), at(10, 11))

    with pytest.raises(AppointmentConflict):
        service.modify_appointment(appointment.id, {'start_time': at(10, 14), 'end_time': at(10, 15)})

    assert ensure_utc(service.get_appointment(appointment.id).start_time) == at(10, 10)


def test_reschedule_with_only_new_end_keeps_start(service: AppointmentService) -> None:
    appointment = book(service, at(10, 10), at(10, 11))

    modified = service.modify_appointment(appointment.id, {'end_time': at(10, 12)})

    assert ensure_utc(modified.start_time) == at(10, 10)
    assert ensure_utc(modified.end_time) == at(10, 12)


def test_modify_appointment_checks_meeting_point(service: AppointmentService) -> None:
    appointment = book(service, at(10, 10), at(10, 11))

    with pytest.raises(MeetingPointNotFound):
        service.modify_appointment(appointment.id, {'meeting_point_id': 99})


def test_modify_appointment_refreshes_modified_at(service: AppointmentService) -> None:
    appointment = book(service, at(10, 10), at(10, 11))
    service.clock = lambda: at(2, 9)

    modified = service.modify_appointment(appointment.id, {'is_accepted': True})

    assert modified.is_accepted is True
    assert ensure_utc(modified.modified_at) == at(2, 9)


def test_get_appointment_reports_missing(service: AppointmentService) -> None:
    with pytest.raises(EntityNotFound):
        service.get_appointment(404)


def test_delete_appointment_removes_it(service: AppointmentService, seeded_db) -> None:
    appointment = book(service, at(10, 10), at(10, 11))

    service.delete_appointment(appointment.id)

    assert seeded_db.query(Appointment).count() == 0


def test_list_appointments_for_user_uses_the_user_kind(service: AppointmentService) -> None:
    later = book(service, at(12, 10), at(12, 11))
    earlier = book(service, at(11, 10), at(11, 11))

    for_instructor = service.list_appointments_for_user(UserRef(UserKind.INSTRUCTOR, 1))
    for_student = service.list_appointments_for_user(UserRef(UserKind.STUDENT, 1))

    assert [item.id for item in for_instructor] == [earlier.id, later.id]
    assert [item.id for item in for_student] == [earlier.id, later.id]
    assert service.list_appointments_for_user(UserRef(UserKind.INSTRUCTOR, 2)) == []


def test_list_appointments_for_unknown_student(service: AppointmentService) -> None:
    with pytest.raises(StudentNotFound):
        service.list_appointments_for_user(UserRef(UserKind.STUDENT, 99))
