"""
Student model - one registrant in the SQL storage backend.

Mirrors the JSON record layout. The unique index on ``email`` is what makes
insert-if-absent atomic for this backend.
"""

from sqlalchemy import Column, Integer, Text, String
from app.database import Base


class Student(Base):
    """SQLAlchemy model for the students table."""
    __tablename__ = "students"

    # Insertion order for load(); ``id`` itself is a random string
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False,
                doc="Server-generated identifier, immutable once assigned")
    full_name = Column(Text, nullable=False)
    dob = Column(Text, nullable=True)
    gender = Column(Text, nullable=True)
    blood_group = Column(Text, nullable=True)
    nationality = Column(Text, nullable=True)
    email = Column(String(320), unique=True, nullable=False,
                   doc="Exact, case-sensitive address as submitted")
    phone = Column(Text, nullable=True)
    alt_phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    pin_code = Column(Text, nullable=True)
    course = Column(Text, nullable=True)
    branch = Column(Text, nullable=True)
    year = Column(Text, nullable=True)
    college = Column(Text, nullable=True)
    roll_number = Column(Text, nullable=True)
    password_hash = Column(Text, nullable=False,
                           doc="bcrypt hash; never returned to clients")
    created_at = Column(Text, nullable=False,
                        doc="ISO 8601 UTC creation timestamp")

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.full_name}', email='{self.email}')>"
