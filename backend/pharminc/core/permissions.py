"""Ownership gate shared by every resource router."""

from typing import Optional

from pharminc.core.errors import ForbiddenError
from pharminc.schemas.auth import Identity


def can_mutate(
    identity: Optional[Identity],
    owner_id: Optional[str],
    required_role: Optional[str] = None,
) -> bool:
    """True when the caller is the recorded owner (and holds required_role, if given)."""
    if identity is None or owner_id is None:
        return False
    if required_role is not None and identity.role != required_role:
        return False
    return identity.id == owner_id


def ensure_can_mutate(
    identity: Optional[Identity],
    owner_id: Optional[str],
    required_role: Optional[str] = None,
    detail: Optional[str] = None,
) -> None:
    if not can_mutate(identity, owner_id, required_role):
        raise ForbiddenError(detail)


def ensure_role(identity: Identity, role: str, detail: Optional[str] = None) -> None:
    if identity.role != role:
        raise ForbiddenError(detail)
