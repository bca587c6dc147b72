"""SQLite-backed car repository."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from shared.dal.car_repository import CarRepository
from shared.dal.models import CarRecord

if TYPE_CHECKING:
    from shared.dal.models import CarUpdate, NewCar
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteCarRepository(CarRepository):
    """SQLite implementation of CarRepository.

    Each car is stored as a JSON snapshot with an indexed user_id column.
    Listing orders by rowid, which follows insertion order.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def list_for_user(self, user_id: str) -> list[CarRecord]:
        rows = self._db.connection.execute(
            "SELECT data FROM cars WHERE user_id = ? ORDER BY rowid",
            (user_id,),
        ).fetchall()
        return [CarRecord.model_validate_json(row[0]) for row in rows]

    async def add(self, car: NewCar, user_id: str, username: str) -> str:
        record = CarRecord(
            car_id=uuid4().hex,
            user_id=user_id,
            username=username,
            **car.model_dump(),
        )
        async with self._lock:
            self._db.connection.execute(
                "INSERT INTO cars (id, user_id, data) VALUES (?, ?, ?)",
                (record.car_id, record.user_id, record.model_dump_json()),
            )
            self._db.connection.commit()
        return record.car_id

    async def get(self, car_id: str) -> CarRecord | None:
        row = self._db.connection.execute(
            "SELECT data FROM cars WHERE id = ?",
            (car_id,),
        ).fetchone()
        if row is None:
            return None
        return CarRecord.model_validate_json(row[0])

    async def update(self, car_id: str, updates: CarUpdate) -> bool:
        # Read-modify-write under the lock; the single UPDATE is atomic in SQLite.
        async with self._lock:
            existing = await self.get(car_id)
            if existing is None:
                logger.info("update had no effect (car not found)", car_id=car_id)
                return False
            updated = existing.with_changes(updates)
            self._db.connection.execute(
                "UPDATE cars SET data = ? WHERE id = ?",
                (updated.model_dump_json(), car_id),
            )
            self._db.connection.commit()
        return True

    async def delete(self, car_id: str) -> bool:
        async with self._lock:
            cursor = self._db.connection.execute("DELETE FROM cars WHERE id = ?", (car_id,))
            self._db.connection.commit()
        if cursor.rowcount == 0:
            logger.info("delete had no effect (car not found)", car_id=car_id)
            return False
        return True
