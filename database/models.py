"""
Database models for the School Directory.
Defines the SQLAlchemy models for principals, classes and enrollments.
"""
from enum import Enum as PyEnum

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Enum, ForeignKey,
    UniqueConstraint
)
from sqlalchemy.orm import relationship, declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Role(str, PyEnum):
    """Principal roles enum."""
    STUDENT = "student"
    TEACHER = "teacher"


class Principal(Base):
    """
    Principals table - stores teachers and students.

    Attributes:
        id: Unique identifier
        username: Login name, unique across the directory
        role: Either 'student' or 'teacher', fixed at creation
        name: Display name
        email: Contact address (students only)
        grade: Grade/level label (students only)
    """
    __tablename__ = "principals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    role = Column(Enum("student", "teacher", name="principal_role"), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    grade = Column(String(50), nullable=True)

    # Relationships
    owned_classes = relationship("SchoolClass", back_populates="owner", passive_deletes="all")
    enrollments = relationship(
        "Enrollment", back_populates="student", cascade="all, delete", passive_deletes=True
    )

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    def __repr__(self):
        return f"<Principal(id={self.id}, username='{self.username}', role='{self.role}')>"

    def to_dict(self):
        """Convert principal to a profile dictionary."""
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "email": self.email,
            "grade": self.grade,
        }


class SchoolClass(Base):
    """
    Classes table.

    Attributes:
        id: Unique identifier
        name: Class name (e.g., "Math 101")
        description: Free text description
        owner_id: The teacher who created the class
    """
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(Integer, ForeignKey("principals.id"), nullable=False)

    # Relationships
    owner = relationship("Principal", back_populates="owned_classes")
    enrollments = relationship(
        "Enrollment", back_populates="school_class", cascade="all, delete", passive_deletes=True
    )

    def __repr__(self):
        return f"<SchoolClass(id={self.id}, name='{self.name}', owner_id={self.owner_id})>"

    def to_dict(self):
        """Convert class to dictionary for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "owner_id": self.owner_id,
            "teacher_name": self.owner.name if self.owner else None,
        }


class Enrollment(Base):
    """
    Links a student to a class.
    At most one row exists per (student, class) pair.

    Attributes:
        id: Unique identifier
        student_id: Foreign key to principals table
        class_id: Foreign key to classes table
        created_at: When the student joined
    """
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("principals.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=func.now())

    __table_args__ = (
        UniqueConstraint("student_id", "class_id", name="uq_enrollments_student_class"),
    )

    # Relationships
    student = relationship("Principal", back_populates="enrollments")
    school_class = relationship("SchoolClass", back_populates="enrollments")

    def __repr__(self):
        return f"<Enrollment(student_id={self.student_id}, class_id={self.class_id})>"
