"""Appointment model definitions."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from drivebook.database import Base


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    NOTATION = "NOTATION"
    COMPLETED = "COMPLETED"


class Appointment(Base):
    """Represents a driving lesson booked by a student.

    Only accepted and valid appointments block the instructor's calendar.
    """
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    meeting_point_id = Column(Integer, ForeignKey("meeting_points.id"), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    status = Column(String, default=AppointmentStatus.PENDING.value, nullable=False)
    is_accepted = Column(Boolean, default=False, nullable=False)
    is_valid = Column(Boolean, default=True, nullable=False)
    description = Column(String)
    created_at = Column(DateTime(timezone=True))
    modified_at = Column(DateTime(timezone=True))
