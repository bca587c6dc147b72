"""Abstract interface for car record persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import CarRecord, CarUpdate, NewCar


class CarRepository(ABC):
    """Abstract interface for car persistence.

    Ownership is not checked here: update and delete act on any car id.
    Callers decide whether the requesting user may touch the record.
    """

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[CarRecord]:
        """Return the user's cars in insertion order."""

    @abstractmethod
    async def add(self, car: NewCar, user_id: str, username: str) -> str:
        """Store a new car and return its id."""

    @abstractmethod
    async def get(self, car_id: str) -> CarRecord | None: ...

    @abstractmethod
    async def update(self, car_id: str, updates: CarUpdate) -> bool:
        """Apply a partial update. Return False when no car has this id."""

    @abstractmethod
    async def delete(self, car_id: str) -> bool:
        """Remove a car. Return False when no car has this id."""
