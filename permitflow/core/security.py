"""Password hashing and signed session tokens (JWT) for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from permitflow.core.config import settings

# Bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72

USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password with a fresh per-hash salt. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash; malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_session_token(user_id: int, username: str, role: str) -> tuple[str, datetime]:
    """
    Create a signed session token carrying user id, username, role and expiry.

    Returns (token, expires_at).
    """
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    token = jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)
    return token, expire


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session token; return payload (sub, username, role, exp, iat).
    Raises jwt.PyJWTError on invalid signature, malformed token or expiry.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp", "role", "username"]},
    )
