"""Password hashers.

``BcryptHasher`` is what the tracker runs with. bcrypt is deliberately slow,
so hashing and checking happen on a worker thread (``anyio.to_thread``) and a
burst of logins does not stall the event loop.

``SimpleHasher`` is a salt-free SHA-256 stand-in that makes the test suite
fast. ``AUTH_PASSWORD_HASHER`` picks one by name.
"""

from __future__ import annotations

import hashlib
from typing import Literal, Protocol, runtime_checkable

import bcrypt
from anyio import to_thread

HasherName = Literal["bcrypt", "simple"]

DEFAULT_BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes and, since 5.0, refuses longer input.
PASSWORD_MAX_BYTES = 72


@runtime_checkable
class PasswordHasher(Protocol):
    async def hash(self, plain: str) -> str: ...

    async def verify(self, plain: str, hashed: str) -> bool: ...


class BcryptHasher:
    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    def _hash_sync(self, plain: bytes) -> str:
        return bcrypt.hashpw(plain, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    async def hash(self, plain: str) -> str:
        return await to_thread.run_sync(self._hash_sync, plain.encode("utf-8"))

    async def verify(self, plain: str, hashed: str) -> bool:
        """False for a wrong password and for a stored value that is not a bcrypt hash."""
        try:
            return await to_thread.run_sync(bcrypt.checkpw, plain.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False


class SimpleHasher:
    """Unsalted SHA-256, tagged with a ``simple$`` prefix. Never use outside tests."""

    PREFIX = "simple$"

    async def hash(self, plain: str) -> str:
        return self.PREFIX + hashlib.sha256(plain.encode("utf-8")).hexdigest()

    async def verify(self, plain: str, hashed: str) -> bool:
        return hashed.startswith(self.PREFIX) and hashed == await self.hash(plain)


_HASHERS: dict[str, type[BcryptHasher] | type[SimpleHasher]] = {
    "bcrypt": BcryptHasher,
    "simple": SimpleHasher,
}


def get_hasher(name: HasherName | str = "bcrypt") -> PasswordHasher:
    try:
        hasher_cls = _HASHERS[name]
    except KeyError:
        raise ValueError(f"Unknown password hasher: {name!r}") from None
    return hasher_cls()
