"""Instructor model definitions."""

from sqlalchemy import Column, Integer, String
from drivebook.database import Base


class Instructor(Base):
    """Represents a driving instructor who owns schedule entries."""
    __tablename__ = "instructors"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String)
    last_name = Column(String)
    email = Column(String, unique=True, index=True)
    siret = Column(String)
