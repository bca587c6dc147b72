"""SQLite database layer: connection management and repository implementations."""

from shared.db.car_repository import SqliteCarRepository
from shared.db.connection import Database
from shared.db.user_repository import SqliteUserRepository

__all__ = [
    "Database",
    "SqliteCarRepository",
    "SqliteUserRepository",
]
