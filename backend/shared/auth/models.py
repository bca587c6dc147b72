"""User account and session models for authentication."""

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator


class User(BaseModel, frozen=True):
    """User account stored in the user repository."""

    user_id: str
    username: str  # case-sensitive
    password_hash: str  # bcrypt hash ("simple$..." under tests)
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    @field_validator("username", "password_hash")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value


@dataclass
class AuthSession:
    """Server-side session for an authenticated user."""

    session_id: str  # random token, signed into the cookie
    user_id: str
    username: str
    created_at: float  # time.time()
    expires_at: float  # created_at + TTL
