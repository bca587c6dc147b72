"""Persistence models for car records."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field


class FuelType(StrEnum):
    GASOLINE = "gasoline"
    DIESEL = "diesel"
    ELECTRIC = "electric"
    HYBRID = "hybrid"


def _default_fuel_type(value: object) -> object:
    # An empty select box posts "" and older clients post null.
    if value is None or value == "":
        return FuelType.GASOLINE
    return value


def _none_to_empty(value: object) -> object:
    return [] if value is None else value


def _unique_in_order(features: list[str]) -> list[str]:
    return list(dict.fromkeys(features))


FuelTypeField = Annotated[FuelType, BeforeValidator(_default_fuel_type)]
Features = Annotated[list[str], BeforeValidator(_none_to_empty), AfterValidator(_unique_in_order)]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class NewCar(BaseModel, frozen=True):
    """Validated payload for adding a car. Accepts the camelCase ``fuelType`` key."""

    model_config = ConfigDict(populate_by_name=True)

    model: str = Field(min_length=1)
    year: int
    mpg: int
    fuel_type: FuelTypeField = Field(default=FuelType.GASOLINE, alias="fuelType")
    features: Features = Field(default_factory=list)


class CarUpdate(BaseModel, frozen=True):
    """Partial update: only fields that were supplied (and not null) are applied."""

    model_config = ConfigDict(populate_by_name=True)

    model: str | None = Field(default=None, min_length=1)
    year: int | None = None
    mpg: int | None = None
    fuel_type: FuelTypeField | None = Field(default=None, alias="fuelType")
    features: Features | None = None

    def changes(self) -> dict[str, object]:
        """Return the supplied fields keyed by CarRecord attribute name."""
        return self.model_dump(exclude_none=True)


class CarRecord(BaseModel, frozen=True):
    """A car owned by exactly one user."""

    car_id: str
    user_id: str
    username: str  # owner's username at creation time
    model: str
    year: int
    mpg: int
    fuel_type: FuelType = FuelType.GASOLINE
    features: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def age(self, current_year: int) -> int:
        """Derived, never persisted."""
        return current_year - self.year

    def with_changes(self, updates: CarUpdate) -> CarRecord:
        """Return a copy with the supplied fields replaced and updated_at refreshed."""
        return self.model_copy(update={**updates.changes(), "updated_at": _utcnow()})
