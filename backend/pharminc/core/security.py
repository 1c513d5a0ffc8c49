"""
Security utilities for authentication and authorization.

Provides password hashing (bcrypt) and JWT token management.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from pharminc.core.config import settings

# Password hashing context using bcrypt, cost factor 10
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: The plain text password to hash

    Returns:
        The hashed password string
    """
    return pwd_context.hash(password)


def create_access_token(
    auth_id: str,
    role: str,
    issued_at: Optional[datetime] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token for an auth record.

    Args:
        auth_id: Id shared by the auth record and its profile
        role: Auth role (USER or INSTITUTE)
        issued_at: Issue time, defaults to now
        expires_delta: Optional custom lifetime

    Returns:
        The encoded JWT carrying {id, role, iat, exp}
    """
    issued = issued_at or datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "id": auth_id,
        "role": role,
        "iat": int(issued.timestamp()),
        "exp": int((issued + lifetime).timestamp()),
    }

    return jwt.encode(
        payload,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> Optional[dict]:
    """
    Decode and validate a JWT access token.

    Args:
        token: The JWT token string to decode

    Returns:
        The decoded token payload, or None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except InvalidTokenError:
        return None

    if not payload.get("id") or not payload.get("role"):
        return None
    return payload
