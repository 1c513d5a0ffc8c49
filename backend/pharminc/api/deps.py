"""
Shared request dependencies: caller identity and pagination.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pharminc.core.errors import AuthError
from pharminc.core.security import decode_access_token
from pharminc.schemas.auth import Identity

# auto_error=False: a missing header means "anonymous", not an immediate 401
bearer_scheme = HTTPBearer(auto_error=False)


def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """
    Decode the bearer token if one is present.

    Absent, malformed, badly signed and expired tokens all yield None.
    """
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None
    return Identity(id=str(payload["id"]), role=str(payload["role"]))


def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    """Dependency for protected routes: 401 unless a valid token was sent."""
    if identity is None:
        raise AuthError()
    return identity


@dataclass
class Pagination:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def get_pagination(
    page: int = Query(1, ge=1, description="Page number (default: 1)"),
    page_size: int = Query(
        20, ge=1, le=100, alias="pageSize", description="Items per page (default: 20)"
    ),
) -> Pagination:
    return Pagination(page=page, page_size=page_size)


def split_csv(value: Optional[str]) -> list[str]:
    """'Cardiology, Neurology' -> ['cardiology', 'neurology']"""
    if not value:
        return []
    return [part.strip().lower() for part in value.split(",") if part.strip()]


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Query-string boolean: 'true'/'false', anything else is ignored."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None
