"""Non-durable in-process repositories used when the database is unreachable.

Both repositories share one ``InMemoryStore`` handed to them at construction,
so tests can build a fresh store (or ``reset()`` an existing one) between runs.
Writes are not coordinated: concurrent requests see last-write-wins behavior.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

from shared.dal.car_repository import CarRepository
from shared.dal.models import CarRecord
from shared.dal.user_repository import DuplicateUsernameError, UserRepository

if TYPE_CHECKING:
    from shared.auth.models import User
    from shared.dal.models import CarUpdate, NewCar


@dataclass
class InMemoryStore:
    """Plain lists standing in for the users and cars tables."""

    users: list[User] = field(default_factory=list)
    cars: list[CarRecord] = field(default_factory=list)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.cars.clear()


class InMemoryUserRepository(UserRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def create_user(self, user: User) -> None:
        if any(u.username == user.username for u in self._store.users):
            raise DuplicateUsernameError(user.username)
        self._store.users.append(user)

    async def get_by_username(self, username: str) -> User | None:
        return next((u for u in self._store.users if u.username == username), None)


class InMemoryCarRepository(CarRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def _index_of(self, car_id: str) -> int | None:
        return next((i for i, c in enumerate(self._store.cars) if c.car_id == car_id), None)

    async def list_for_user(self, user_id: str) -> list[CarRecord]:
        return [c for c in self._store.cars if c.user_id == user_id]

    async def add(self, car: NewCar, user_id: str, username: str) -> str:
        record = CarRecord(
            car_id=uuid4().hex,
            user_id=user_id,
            username=username,
            **car.model_dump(),
        )
        self._store.cars.append(record)
        return record.car_id

    async def get(self, car_id: str) -> CarRecord | None:
        index = self._index_of(car_id)
        return None if index is None else self._store.cars[index]

    async def update(self, car_id: str, updates: CarUpdate) -> bool:
        index = self._index_of(car_id)
        if index is None:
            return False
        self._store.cars[index] = self._store.cars[index].with_changes(updates)
        return True

    async def delete(self, car_id: str) -> bool:
        index = self._index_of(car_id)
        if index is None:
            return False
        del self._store.cars[index]
        return True
