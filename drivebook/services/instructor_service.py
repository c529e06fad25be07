from sqlalchemy.orm import Session

from drivebook.models.instructor import Instructor
from drivebook.services.common import get_instructor_or_raise


class InstructorService:
    def __init__(self, db: Session):
        self.db = db

    def get_instructor(self, instructor_id: int) -> Instructor:
        return get_instructor_or_raise(self.db, instructor_id)

    def list_instructors(self) -> list[Instructor]:
        return self.db.query(Instructor).order_by(Instructor.last_name.asc(), Instructor.id.asc()).all()
