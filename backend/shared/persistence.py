"""Pick the persistence backend once at startup.

The SQLite database is tried first. If it cannot be opened the service keeps
running on in-memory repositories ("demo mode") and never retries the
database for the lifetime of the process.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from shared.db import Database, SqliteCarRepository, SqliteUserRepository
from shared.memory import InMemoryCarRepository, InMemoryStore, InMemoryUserRepository

if TYPE_CHECKING:
    from pathlib import Path

    from shared.dal import CarRepository, UserRepository

logger = structlog.get_logger()


class PersistenceMode(StrEnum):
    CONNECTED = "connected"
    DEMO = "demo mode"


class BackendUnavailableError(Exception):
    """The durable database could not be opened."""


@dataclass
class PersistenceBackend:
    mode: PersistenceMode
    user_repo: UserRepository
    car_repo: CarRepository
    database: Database | None = None
    memory: InMemoryStore | None = field(default=None, repr=False)

    @classmethod
    def in_memory(cls, store: InMemoryStore | None = None) -> PersistenceBackend:
        store = store if store is not None else InMemoryStore()
        return cls(
            mode=PersistenceMode.DEMO,
            user_repo=InMemoryUserRepository(store),
            car_repo=InMemoryCarRepository(store),
            memory=store,
        )

    @classmethod
    def sqlite(cls, database: Database) -> PersistenceBackend:
        return cls(
            mode=PersistenceMode.CONNECTED,
            user_repo=SqliteUserRepository(database),
            car_repo=SqliteCarRepository(database),
            database=database,
        )

    def close(self) -> None:
        if self.database is not None:
            self.database.close()


def connect_database(database_path: str | Path) -> Database:
    """Open the database, wrapping connection failures in BackendUnavailableError."""
    database = Database(database_path)
    try:
        database.connect()
    except (sqlite3.Error, OSError) as exc:
        raise BackendUnavailableError(f"Cannot open database at {database_path}: {exc}") from exc
    return database


def select_backend(database_path: str | Path, *, force_demo: bool = False) -> PersistenceBackend:
    """Return the SQLite backend, or the in-memory fallback if the database is unreachable."""
    if force_demo:
        logger.info("demo mode forced by configuration, using in-memory store")
        return PersistenceBackend.in_memory()

    try:
        database = connect_database(database_path)
    except BackendUnavailableError as exc:
        logger.warning("database unavailable, falling back to in-memory demo store", error=str(exc))
        return PersistenceBackend.in_memory()

    logger.info("connected to database", path=str(database_path))
    return PersistenceBackend.sqlite(database)
