"""Authentication: credential store, login flow, sessions, and password hashing."""

from shared.auth.credentials import CredentialStore
from shared.auth.models import AuthSession, User
from shared.auth.password import BcryptHasher, PasswordHasher, SimpleHasher, get_hasher
from shared.auth.service import AuthError, AuthService, LoginResult, LoginValidationError
from shared.auth.session_store import AuthSessionStore
from shared.auth.session_token import sign_session_id, unsign_session_id
from shared.auth.settings import AuthSettings

__all__ = [
    "AuthError",
    "AuthService",
    "AuthSession",
    "AuthSessionStore",
    "AuthSettings",
    "BcryptHasher",
    "CredentialStore",
    "LoginResult",
    "LoginValidationError",
    "PasswordHasher",
    "SimpleHasher",
    "User",
    "get_hasher",
    "sign_session_id",
    "unsign_session_id",
]
