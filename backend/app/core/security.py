"""
Security utilities for authentication.

Provides password hashing (bcrypt) and JWT session token management. The
signing key, algorithm and token lifetime are taken from the ``Settings``
passed in by the caller.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from app.core.config import Settings, settings as default_settings

# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=default_settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: The data to encode in the token (typically {"sub": user_id})
        settings: Supplies the signing key, algorithm and default lifetime
        expires_delta: Optional custom expiration time
        now: Issue time, defaults to the current UTC time

    Returns:
        The encoded JWT token string
    """
    to_encode = data.copy()
    issued_at = now or datetime.now(timezone.utc)

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"iat": issued_at, "exp": issued_at + expires_delta})

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings) -> Optional[dict]:
    """
    Decode and validate a JWT access token.

    Returns the decoded payload, or None if the token is malformed, expired
    or signed with a different key.
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except InvalidTokenError:
        return None


def get_token_subject(token: str, settings: Settings) -> Optional[str]:
    """Extract the subject (user id) from a JWT token."""
    payload = decode_access_token(token, settings)
    if payload is None:
        return None
    return payload.get("sub")
