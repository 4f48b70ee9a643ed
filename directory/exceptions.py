"""
Custom exceptions for the School Directory.

Denied / not found / invalid results are reported as outcomes, not raised.
Only infrastructure failures and unresolved conflicts travel as exceptions.
"""
from database.exceptions import StoreError, StoreUnavailable, ConflictError


class UnknownPrincipalError(Exception):
    """Raised when a requester id does not resolve to a principal."""

    def __init__(self, principal_id: int):
        self.principal_id = principal_id
        super().__init__(f"Principal with id {principal_id} not found")


__all__ = [
    "StoreError",
    "StoreUnavailable",
    "ConflictError",
    "UnknownPrincipalError",
]
