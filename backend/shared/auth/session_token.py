"""HMAC-SHA256 signed session cookies.

The session id handed to the browser is signed with the configured session
secret so that a forged or truncated cookie is rejected before the session
store is consulted.

Token format: <session_id>.<base64url(hmac_sha256(session_id))>
"""

import base64
import binascii
import hashlib
import hmac

import structlog

logger = structlog.get_logger()

_SEPARATOR = "."


def _signature(session_id: str, secret: str) -> bytes:
    return hmac.new(secret.encode(), session_id.encode(), hashlib.sha256).digest()


def sign_session_id(session_id: str, secret: str) -> str:
    """Append a base64url HMAC signature to the session id."""
    sig_b64 = base64.urlsafe_b64encode(_signature(session_id, secret)).decode().rstrip("=")
    return f"{session_id}{_SEPARATOR}{sig_b64}"


def unsign_session_id(token: str, secret: str) -> str | None:
    """Verify the signature and return the bare session id, or None on any failure."""
    session_id, sep, sig_b64 = token.rpartition(_SEPARATOR)
    if not sep or not session_id or not sig_b64:
        return None

    padding = "=" * (-len(sig_b64) % 4)
    try:
        provided_sig = base64.urlsafe_b64decode(sig_b64 + padding)
    except (ValueError, binascii.Error):
        return None

    if not hmac.compare_digest(provided_sig, _signature(session_id, secret)):
        logger.debug("session cookie signature mismatch")
        return None
    return session_id
