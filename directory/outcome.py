"""
Outcome type returned by every directory operation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class OutcomeStatus(str, Enum):
    """Possible results of a directory operation."""
    SUCCESS = "success"
    DENIED = "denied"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class Outcome:
    """
    Result of a directory operation.

    Attributes:
        status: What happened
        data: Payload for successful operations (projected dicts)
        reason: Human readable explanation for failures
    """
    status: OutcomeStatus
    data: Any = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @classmethod
    def success(cls, data: Any = None) -> "Outcome":
        return cls(OutcomeStatus.SUCCESS, data=data)

    @classmethod
    def denied(cls, reason: str = "Access denied") -> "Outcome":
        return cls(OutcomeStatus.DENIED, reason=reason)

    @classmethod
    def not_found(cls, reason: str = "Not found") -> "Outcome":
        return cls(OutcomeStatus.NOT_FOUND, reason=reason)

    @classmethod
    def invalid(cls, reason: str) -> "Outcome":
        return cls(OutcomeStatus.INVALID, reason=reason)

    @classmethod
    def conflict(cls, reason: str) -> "Outcome":
        return cls(OutcomeStatus.CONFLICT, reason=reason)
