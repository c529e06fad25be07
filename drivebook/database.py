from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from drivebook.core import config


connect_args = {'check_same_thread': False} if config.DATABASE_URL.startswith('sqlite') else {}

engine = create_engine(config.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_schedule_indexes_checked = False

SCHEDULE_INDEXES = [
    (
        'availability_schedules',
        'CREATE INDEX IF NOT EXISTS idx_availability_instructor_range '
        'ON availability_schedules(instructor_id, start_date_time, end_date_time)',
    ),
    (
        'instructor_unavailabilities',
        'CREATE INDEX IF NOT EXISTS idx_unavailability_instructor_range '
        'ON instructor_unavailabilities(instructor_id, start_date_time, end_date_time)',
    ),
    (
        'appointments',
        'CREATE INDEX IF NOT EXISTS idx_appointments_instructor_range '
        'ON appointments(instructor_id, start_time, end_time)',
    ),
]


def ensure_schedule_indexes(bind=None) -> None:
    global _schedule_indexes_checked

    if _schedule_indexes_checked:
        return

    bind = bind or engine

    with _schema_lock:
        if _schedule_indexes_checked:
            return

        existing_tables = set(inspect(bind).get_table_names())

        with bind.begin() as connection:
            for table_name, statement in SCHEDULE_INDEXES:
                if table_name in existing_tables:
                    connection.execute(text(statement))

        _schedule_indexes_checked = True
