from __future__ import annotations

import pytest

from pharminc.core.errors import ForbiddenError
from pharminc.core.permissions import can_mutate, ensure_can_mutate
from pharminc.schemas.auth import Identity

USER = Identity(id="u-1", role="USER")
INSTITUTE = Identity(id="i-1", role="INSTITUTE")


@pytest.mark.parametrize(
    ("identity", "owner_id", "required_role", "expected"),
    [
        (USER, "u-1", None, True),
        (USER, "u-1", "USER", True),
        (USER, "u-2", None, False),
        (USER, "u-1", "INSTITUTE", False),
        (INSTITUTE, "i-1", "INSTITUTE", True),
        (INSTITUTE, "u-1", None, False),
        (None, "u-1", None, False),
        (USER, None, None, False),
    ],
)
def test_can_mutate(identity, owner_id, required_role, expected) -> None:
    assert can_mutate(identity, owner_id, required_role) is expected


def test_ensure_can_mutate_raises_forbidden_with_detail() -> None:
    with pytest.raises(ForbiddenError) as excinfo:
        ensure_can_mutate(USER, "u-2", detail="Forbidden: cannot update another user")

    assert excinfo.value.status_code == 403
    assert excinfo.value.detail == "Forbidden: cannot update another user"


def test_ensure_can_mutate_passes_for_owner() -> None:
    ensure_can_mutate(INSTITUTE, "i-1", "INSTITUTE")
