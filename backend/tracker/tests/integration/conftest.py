"""Shared helpers for tracker integration tests, exposed as fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx
    from starlette.testclient import TestClient


def _login(client: TestClient, username: str, password: str = "pw1") -> httpx.Response:
    """Log in (or create the account) through the JSON endpoint."""
    return client.post("/api/login", json={"username": username, "password": password})


def _add_car(client: TestClient, **fields) -> str:
    body = {"model": "Civic", "year": 2020, "mpg": 35, **fields}
    response = client.post("/api/cars", json=body)
    assert response.status_code == 200, response.text
    return response.json()["carId"]


@pytest.fixture
def login() -> Callable[..., httpx.Response]:
    return _login


@pytest.fixture
def add_car() -> Callable[..., str]:
    return _add_car
