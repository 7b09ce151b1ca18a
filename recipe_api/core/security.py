"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from recipe_api.core.config import settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
EMAIL_MAX_LEN = 255

# bcrypt only looks at the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    claims: dict[str, Any],
    *,
    secret: str | None = None,
    algorithm: str | None = None,
    expire_minutes: int | None = None,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """
    Create a signed JWT carrying the given claims plus iat and exp.

    Returns (token, expires_at). `now` is injectable so tests can mint already-expired tokens.
    """
    issued_at = now or datetime.now(UTC)
    expire = issued_at + timedelta(minutes=expire_minutes or settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        **claims,
        "exp": expire,
        "iat": issued_at,
    }
    token = jwt.encode(
        payload,
        secret or settings.JWT_SECRET.get_secret_value(),
        algorithm=algorithm or settings.JWT_ALGORITHM,
    )
    return token, expire


def decode_access_token(
    token: str,
    *,
    secret: str | None = None,
    algorithm: str | None = None,
) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload.
    Raises jwt.PyJWTError on malformed, badly signed, or expired tokens.
    """
    return jwt.decode(
        token,
        secret or settings.JWT_SECRET.get_secret_value(),
        algorithms=[algorithm or settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub"]},
    )
