"""
Directory module for the School Directory.

Authorization, enrollment consistency and role-based visibility for
teachers, students, classes and enrollments.
"""
from .exceptions import (
    StoreError,
    StoreUnavailable,
    ConflictError,
    UnknownPrincipalError,
)

from .outcome import Outcome, OutcomeStatus

from .payloads import (
    UNSET,
    NewClass,
    ClassUpdate,
    NewStudent,
    NewPrincipal,
    StudentUpdate,
)

from .authorization import Action, POLICY, is_allowed

from .enrollment import EnrollmentManager

from .visibility import VisibilityProjector

from .service import DirectoryService, get_directory_service

__all__ = [
    # Exceptions
    "StoreError",
    "StoreUnavailable",
    "ConflictError",
    "UnknownPrincipalError",
    # Outcome
    "Outcome",
    "OutcomeStatus",
    # Payloads
    "UNSET",
    "NewClass",
    "ClassUpdate",
    "NewStudent",
    "NewPrincipal",
    "StudentUpdate",
    # Authorization
    "Action",
    "POLICY",
    "is_allowed",
    # Enrollment
    "EnrollmentManager",
    # Visibility
    "VisibilityProjector",
    # Service
    "DirectoryService",
    "get_directory_service",
]
