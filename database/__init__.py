"""Database module."""
from .models import Base, Principal, SchoolClass, Enrollment, Role
from .connection import (
    engine, SessionLocal, create_directory_engine, get_db, get_db_context, init_db
)
from .exceptions import StoreError, StoreUnavailable, ConflictError
from .store import DirectoryStore, get_directory_store

__all__ = [
    "Base",
    "Principal",
    "SchoolClass",
    "Enrollment",
    "Role",
    "engine",
    "SessionLocal",
    "create_directory_engine",
    "get_db",
    "get_db_context",
    "init_db",
    "StoreError",
    "StoreUnavailable",
    "ConflictError",
    "DirectoryStore",
    "get_directory_store",
]
