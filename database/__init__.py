from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.repositories import RoundStatsRepositoryDB
from database.selection import SelectionPolicy
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    InvalidRecordError,
    NotFoundError,
    StoreUnavailableError,
)

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "RoundStatsRepositoryDB",
    "SelectionPolicy",
    "DatabaseError",
    "NotFoundError",
    "InvalidRecordError",
    "DuplicateError",
    "IntegrityError",
    "StoreUnavailableError",
]
