"""SQLite connection holder for the tracker's tables.

Rows keep their full record as JSON in ``data``; the other columns exist only
for lookups (unique username, cars by owner).
"""

import os
import sqlite3
from pathlib import Path

import structlog

logger = structlog.get_logger()

OWNER_ONLY = 0o600

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA busy_timeout=5000",
)

# BINARY collation on username: "Alice" and "alice" are different accounts.
_SCHEMA = """\
CREATE TABLE IF NOT EXISTS users (
    id       TEXT PRIMARY KEY,
    username TEXT NOT NULL,
    data     TEXT NOT NULL
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_users_username ON users (username);

CREATE TABLE IF NOT EXISTS cars (
    id      TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    data    TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_cars_user_id ON cars (user_id);
"""

# SQLite's write-ahead log and shared-memory files sit beside the main file.
_SIDECAR_SUFFIXES = ("", "-wal", "-shm")


def _open(path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(path, check_same_thread=False)
    try:
        for pragma in _PRAGMAS:
            conn.execute(pragma)
        conn.executescript(_SCHEMA)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


class Database:
    """Owns one SQLite connection shared by the repositories."""

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError(f"Database {self._path} is not connected")
        return self._conn

    def connect(self) -> None:
        """Open the file (creating parent directories) and ensure the schema.

        ``OSError`` means the directory could not be made; ``sqlite3.Error``
        means SQLite could not open or initialise the file.
        """
        Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = _open(self._path)
        if os.name == "posix":
            self._restrict_to_owner()

    def close(self) -> None:
        conn, self._conn = self._conn, None
        if conn is not None:
            conn.close()

    def _restrict_to_owner(self) -> None:
        # Password hashes live here.
        for suffix in _SIDECAR_SUFFIXES:
            target = Path(self._path + suffix)
            if not target.exists():
                continue
            try:
                target.chmod(OWNER_ONLY)
            except OSError as exc:
                logger.warning("could not restrict database file permissions", path=str(target), error=str(exc))
