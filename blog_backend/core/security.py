"""Security utilities for password hashing and JWT tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from bcrypt import checkpw, gensalt, hashpw
from jose import JWTError, jwt

from blog_backend.config import settings

# bcrypt rejects passwords longer than 72 bytes
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password as a string

    Example:
        ```python
        from blog_backend.core.security import hash_password

        hashed = hash_password("my_password")
        ```
    """
    return hashpw(password.encode("utf-8"), gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    if password_too_long(plain_password):
        return False
    return checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def token_ttl_seconds() -> int:
    """Lifetime of a freshly issued access token, in seconds."""
    return settings.access_token_expire_minutes * 60


def create_access_token(
    data: dict[str, Any], expires_delta: timedelta | None = None
) -> str:
    """Create a JWT access token.

    Every token carries a unique ``jti`` claim so it can be revoked
    individually at logout.

    Args:
        data: Dictionary containing token payload (typically includes 'sub' for subject/user_id)
        expires_delta: Optional custom expiration time. If not provided, uses default from settings

    Returns:
        Encoded JWT token string

    Example:
        ```python
        from blog_backend.core.security import create_access_token

        token = create_access_token(data={"sub": "user_id"})
        ```
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.setdefault("jti", uuid4().hex)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode, settings.secret_key, algorithm=settings.algorithm
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and verify a JWT access token.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload as dictionary, or None if token is invalid or expired

    Example:
        ```python
        from blog_backend.core.security import decode_access_token

        payload = decode_access_token(token)
        if payload:
            user_id = payload.get("sub")
        ```
    """
    try:
        payload = jwt.decode(
            token, settings.secret_key, algorithms=[settings.algorithm]
        )
        return payload
    except JWTError:
        return None
