"""Availability model definitions."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from drivebook.database import Base


class AvailabilitySchedule(Base):
    """Represents a window during which an instructor takes lessons."""
    __tablename__ = "availability_schedules"

    id = Column(Integer, primary_key=True)
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=False, index=True)
    start_date_time = Column(DateTime(timezone=True), nullable=False)
    end_date_time = Column(DateTime(timezone=True), nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurrence_rule = Column(String)  # DAILY/WEEKLY/MONTHLY/YEARLY
    expiry_date = Column(DateTime(timezone=True))
    note = Column(String)
