import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from drivebook.core import config
from drivebook.database import Base, engine, ensure_schedule_indexes
from drivebook.models import appointment, availability, instructor, meeting_point, student, unavailability  # noqa: F401
from drivebook.routes import (
    appointment_routes,
    availability_routes,
    instructor_routes,
    meeting_point_routes,
    unavailability_routes,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

config.validate_runtime_config()

app = FastAPI(title='Drivebook Scheduling API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_schedule_indexes()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Drivebook Scheduling API Running'}


app.include_router(instructor_routes.router, prefix='/instructors')
app.include_router(availability_routes.router, prefix='/instructors')
app.include_router(unavailability_routes.router, prefix='/instructors')
app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(meeting_point_routes.router, prefix='/meeting-points')
