"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.car_repository import CarRepository
from shared.dal.models import CarRecord, CarUpdate, FuelType, NewCar
from shared.dal.user_repository import DuplicateUsernameError, UserRepository

__all__ = [
    "CarRecord",
    "CarRepository",
    "CarUpdate",
    "DuplicateUsernameError",
    "FuelType",
    "NewCar",
    "UserRepository",
]
