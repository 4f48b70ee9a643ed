"""
Pydantic schemas for API requests and responses.
"""
from typing import Optional

from pydantic import BaseModel, Field


# Request schemas
class ClassCreateRequest(BaseModel):
    """Request to create a class (teacher only)."""
    name: Optional[str] = Field(None, description="Class name, must not be blank")
    description: Optional[str] = Field(None, description="Free text description")


class ClassUpdateRequest(BaseModel):
    """
    Partial update of a class.
    Only fields present in the body are applied.
    """
    name: Optional[str] = Field(None, description="New class name")
    description: Optional[str] = Field(None, description="New description, null clears it")


class StudentCreateRequest(BaseModel):
    """Request to create a student (teacher only)."""
    username: Optional[str] = Field(None, description="Unique login name")
    name: Optional[str] = Field(None, description="Display name, defaults to username")
    email: Optional[str] = Field(None, description="Contact email")
    grade: Optional[str] = Field(None, description="Grade or level")


class StudentUpdateRequest(BaseModel):
    """
    Partial update of a student profile.
    Only fields present in the body are applied.
    """
    name: Optional[str] = Field(None, description="New display name")
    email: Optional[str] = Field(None, description="New email, null clears it")
    grade: Optional[str] = Field(None, description="New grade, null clears it")


class PrincipalCreateRequest(BaseModel):
    """Request to register a teacher or a student (teacher only)."""
    username: Optional[str] = Field(None, description="Unique login name")
    role: Optional[str] = Field("student", description="'student' or 'teacher'")
    name: Optional[str] = Field(None, description="Display name, defaults to username")
    email: Optional[str] = Field(None, description="Contact email")
    grade: Optional[str] = Field(None, description="Grade or level")


# Response schemas
class ClassResponse(BaseModel):
    """A class as seen by the requester."""
    id: int
    name: str
    description: Optional[str] = None
    owner_id: int
    teacher_name: Optional[str] = None
    enrollment_count: Optional[int] = Field(None, description="Teachers only")
    enrolled: Optional[bool] = Field(None, description="Students only")


class StudentResponse(BaseModel):
    """A student profile."""
    id: int
    username: str
    name: str
    email: Optional[str] = None
    grade: Optional[str] = None


class PrincipalResponse(StudentResponse):
    """A newly registered principal."""
    role: str


class EnrollmentResponse(BaseModel):
    """Result of an enroll call."""
    student_id: int
    class_id: int


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
    type: Optional[str] = None
