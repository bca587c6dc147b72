"""Car record endpoints. Each user sees and adds only their own cars."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError
from starlette.responses import JSONResponse

from shared.dal.models import CarRecord, CarUpdate, NewCar
from tracker.views.payload import read_payload

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.dal import CarRepository

logger = structlog.get_logger()


def current_year() -> int:
    return date.today().year


def car_to_json(car: CarRecord, year: int) -> dict:
    return {
        "id": car.car_id,
        "userId": car.user_id,
        "username": car.username,
        "model": car.model,
        "year": car.year,
        "mpg": car.mpg,
        "fuelType": car.fuel_type.value,
        "features": car.features,
        "createdAt": car.created_at.isoformat(),
        "updatedAt": car.updated_at.isoformat(),
        "age": car.age(year),
    }


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"]) or "body"
        parts.append(f"{field}: {error['msg']}")
    return "; ".join(parts)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"success": False, "message": message}, status_code=400)


def _car_repo(request: Request) -> CarRepository:
    return request.app.state.backend.car_repo


async def list_cars(request: Request) -> JSONResponse:
    """GET /api/cars - the session user's cars, each with its derived age."""
    cars = await _car_repo(request).list_for_user(request.user.user_id)
    year = current_year()
    return JSONResponse([car_to_json(car, year) for car in cars])


async def create_car(request: Request) -> JSONResponse:
    """POST /api/cars - add a car owned by the session user."""
    body = await read_payload(request)
    if body is None:
        return _bad_request("Invalid JSON body")
    try:
        car = NewCar.model_validate(body)
    except ValidationError as e:
        return _bad_request(_validation_message(e))

    user = request.user
    car_id = await _car_repo(request).add(car, user_id=user.user_id, username=user.username)
    logger.info("car added", car_id=car_id, username=user.username)
    return JSONResponse({"success": True, "carId": car_id})


async def update_car(request: Request) -> JSONResponse:
    """PUT /api/cars/{car_id} - apply the supplied fields to the car."""
    car_id = request.path_params["car_id"]
    body = await read_payload(request)
    if body is None:
        return _bad_request("Invalid JSON body")
    try:
        updates = CarUpdate.model_validate(body)
    except ValidationError as e:
        return _bad_request(_validation_message(e))

    # No ownership check: any authenticated user may edit any car id.
    if await _car_repo(request).update(car_id, updates):
        logger.info("car updated", car_id=car_id, username=request.user.username)
    return JSONResponse({"success": True})


async def delete_car(request: Request) -> JSONResponse:
    """DELETE /api/cars/{car_id} - remove the car; reports success even if it was already gone."""
    car_id = request.path_params["car_id"]
    if await _car_repo(request).delete(car_id):
        logger.info("car deleted", car_id=car_id, username=request.user.username)
    return JSONResponse({"success": True})
