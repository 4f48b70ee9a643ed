"""API module for the School Directory."""
from .routes import classes_router, students_router, teachers_router, principals_router
from .schemas import (
    ClassCreateRequest,
    ClassUpdateRequest,
    StudentCreateRequest,
    StudentUpdateRequest,
    PrincipalCreateRequest,
    ClassResponse,
    StudentResponse,
    PrincipalResponse,
    EnrollmentResponse,
    ErrorResponse,
)

__all__ = [
    "classes_router",
    "students_router",
    "teachers_router",
    "principals_router",
    "ClassCreateRequest",
    "ClassUpdateRequest",
    "StudentCreateRequest",
    "StudentUpdateRequest",
    "PrincipalCreateRequest",
    "ClassResponse",
    "StudentResponse",
    "PrincipalResponse",
    "EnrollmentResponse",
    "ErrorResponse",
]
