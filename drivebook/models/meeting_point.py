"""Meeting point model definitions."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from drivebook.database import Base


class MeetingPoint(Base):
    """Represents a pick-up location offered by an instructor."""
    __tablename__ = "meeting_points"

    id = Column(Integer, primary_key=True)
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=False, index=True)
    name = Column(String)
    longitude = Column(Float)
    latitude = Column(Float)
    created_at = Column(DateTime(timezone=True))
    modified_at = Column(DateTime(timezone=True))
