import os
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from drivebook.database import Base  # noqa: E402
from drivebook.models.appointment import Appointment  # noqa: E402, F401
from drivebook.models.availability import AvailabilitySchedule  # noqa: E402, F401
from drivebook.models.instructor import Instructor  # noqa: E402
from drivebook.models.meeting_point import MeetingPoint  # noqa: E402
from drivebook.models.student import Student  # noqa: E402
from drivebook.models.unavailability import InstructorUnavailability  # noqa: E402, F401

FIXED_NOW = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def schedule_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(schedule_db):
    schedule_db.add_all([
        Instructor(id=1, first_name='Camille', last_name='Durand', email='camille@example.fr', siret='12345678900011'),
        Instructor(id=2, first_name='Sacha', last_name='Martin', email='sacha@example.fr', siret='98765432100022'),
        Student(id=1, first_name='Lou', last_name='Bernard', email='lou@example.fr', neph='123456789012'),
        MeetingPoint(id=1, instructor_id=1, name='Gare Saint-Jean', longitude=-0.556, latitude=44.826),
    ])
    schedule_db.commit()
    return schedule_db
