"""Tracker server configuration via environment variables."""

import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode


class TrackerServerSettings(BaseSettings):
    model_config = {"env_prefix": "TRACKER_"}

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    log_dir: str | None = "backend/logs/tracker"

    # SQLite file; if it cannot be opened the server runs in demo mode.
    database_path: str = "backend/storage.db"
    demo_mode: bool = False

    # NoDecode: keep the raw env string so the validator can accept CSV as well as JSON.
    cors_origins: Annotated[list[str], NoDecode] = []

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, list):
            return v
        stripped = v.strip()
        if not stripped.startswith("["):
            return [origin.strip() for origin in stripped.split(",") if origin.strip()]
        parsed = json.loads(stripped)
        if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
            raise ValueError("JSON value must be an array of strings")
        return parsed
