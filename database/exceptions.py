"""
Exceptions raised by the directory store.
"""


class StoreError(Exception):
    """Base exception for store operations."""

    def __init__(self, message: str, operation: str = None):
        self.message = message
        self.operation = operation
        super().__init__(self.message)


class StoreUnavailable(StoreError):
    """Raised when the database cannot complete an operation."""


class ConflictError(StoreError):
    """Raised when a write violates a uniqueness or integrity constraint."""
