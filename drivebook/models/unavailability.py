"""Unavailability model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from drivebook.database import Base


class InstructorUnavailability(Base):
    """Represents a blocked period in an instructor's calendar."""
    __tablename__ = "instructor_unavailabilities"

    id = Column(Integer, primary_key=True)
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=False, index=True)
    start_date_time = Column(DateTime(timezone=True), nullable=False)
    end_date_time = Column(DateTime(timezone=True), nullable=False)
    reason = Column(String)
