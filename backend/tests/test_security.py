from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from pharminc.core.config import settings
from pharminc.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_verifies_only_the_original_password() -> None:
    hashed = get_password_hash("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_password_hash_uses_cost_factor_ten() -> None:
    hashed = get_password_hash("secret123")

    assert hashed.split("$")[2] == "10"


def test_token_round_trips_id_and_role() -> None:
    token = create_access_token("auth-1", "INSTITUTE")
    payload = decode_access_token(token)

    assert payload is not None
    assert payload["id"] == "auth-1"
    assert payload["role"] == "INSTITUTE"
    assert payload["exp"] - payload["iat"] == 60 * 60


def test_token_is_accepted_just_before_expiry() -> None:
    issued_at = datetime.now(timezone.utc) - timedelta(minutes=59)
    token = create_access_token("auth-1", "USER", issued_at=issued_at)

    assert decode_access_token(token) is not None


def test_token_is_rejected_at_and_after_expiry() -> None:
    exactly_one_hour = datetime.now(timezone.utc) - timedelta(hours=1)
    long_ago = datetime.now(timezone.utc) - timedelta(hours=5)

    assert decode_access_token(create_access_token("auth-1", "USER", issued_at=exactly_one_hour)) is None
    assert decode_access_token(create_access_token("auth-1", "USER", issued_at=long_ago)) is None


def test_token_signed_with_another_secret_is_rejected() -> None:
    now = int(datetime.now(timezone.utc).timestamp())
    forged = jwt.encode(
        {"id": "auth-1", "role": "USER", "iat": now, "exp": now + 3600},
        "not-the-secret",
        algorithm=settings.JWT_ALGORITHM,
    )

    assert decode_access_token(forged) is None
    assert decode_access_token("not-a-token") is None


def test_token_without_identity_claims_is_rejected() -> None:
    now = int(datetime.now(timezone.utc).timestamp())
    token = jwt.encode(
        {"sub": "auth-1", "iat": now, "exp": now + 3600},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )

    assert decode_access_token(token) is None
