"""
Input payloads for directory operations.

Update payloads follow patch semantics: every field is either UNSET (leave
the stored value alone) or carries the new value, which may be None for
optional fields.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


class _Unset:
    """Marker for a field that was not part of an update."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSET"


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


@dataclass
class NewClass:
    """Fields for creating a class."""
    name: Optional[str]
    description: Optional[str] = None


@dataclass
class ClassUpdate:
    """Partial update of a class."""
    name: Any = UNSET
    description: Any = UNSET

    @classmethod
    def from_fields(cls, fields: Dict[str, Any]) -> "ClassUpdate":
        """Build an update from only the keys present in `fields`."""
        return cls(**{k: v for k, v in fields.items() if k in ("name", "description")})


@dataclass
class NewStudent:
    """Fields for creating a student principal."""
    username: Optional[str]
    name: Optional[str] = None
    email: Optional[str] = None
    grade: Optional[str] = None


@dataclass
class NewPrincipal:
    """Fields for registering a principal of either role."""
    username: Optional[str]
    role: Optional[str] = "student"
    name: Optional[str] = None
    email: Optional[str] = None
    grade: Optional[str] = None


@dataclass
class StudentUpdate:
    """Partial update of a student profile."""
    name: Any = UNSET
    email: Any = UNSET
    grade: Any = UNSET

    @classmethod
    def from_fields(cls, fields: Dict[str, Any]) -> "StudentUpdate":
        """Build an update from only the keys present in `fields`."""
        return cls(**{k: v for k, v in fields.items() if k in ("name", "email", "grade")})
