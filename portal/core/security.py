"""Password hashing and session token creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from portal.core.config import Settings, get_settings

# Bcrypt cost (rounds) for internal users; overridable via BCRYPT_ROUNDS.
BCRYPT_ROUNDS = 10
# bcrypt only considers the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72

# Min/max lengths for email and password validation.
EMAIL_MAX_LEN = 320
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


class MalformedHashError(ValueError):
    """Raised when a stored hash is not a valid bcrypt string."""


def _encode(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Output is a self-describing $2b$ string."""
    return bcrypt.hashpw(_encode(plain_password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash (constant-time compare inside bcrypt).
    Returns False on mismatch; raises MalformedHashError if the hash cannot be parsed.
    """
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError) as e:
        raise MalformedHashError("Stored password hash is malformed") from e


def create_session_token(sub: str | int, role: str, settings: Settings | None = None) -> str:
    """Create a signed session token with sub (user id), role, iat and exp."""
    settings = settings or get_settings()
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_session_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Decode and validate a session token; return payload (sub, role, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    settings = settings or get_settings()
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
    )
