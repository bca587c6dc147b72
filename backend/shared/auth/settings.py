"""Auth settings: session signing, cookie flags, and password hashing."""

from pydantic import Field
from pydantic_settings import BaseSettings

from shared.auth.password import HasherName
from shared.auth.session_store import DEFAULT_SESSION_TTL_SECONDS


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # Signs the session cookie. Override AUTH_SESSION_SECRET outside local runs.
    session_secret: str = Field(default="secretkey", min_length=1)

    # Set when served over HTTPS.
    cookie_secure: bool = False

    password_hasher: HasherName = "bcrypt"

    session_ttl_seconds: int = Field(default=DEFAULT_SESSION_TTL_SECONDS, gt=0)
