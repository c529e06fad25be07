"""Student model definitions."""

from sqlalchemy import Column, Integer, String
from drivebook.database import Base


class Student(Base):
    """Represents a learner driver."""
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String)
    last_name = Column(String)
    email = Column(String, unique=True, index=True)
    neph = Column(String)  # national learner-driver file number
