from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from app.core.config import Settings
from app.core.security import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_random_token,
    hash_password,
    verify_password,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def config() -> Settings:
    return Settings(JWT_ACCESS_SECRET="access-test", JWT_REFRESH_SECRET="refresh-test")


def test_hash_and_verify_password() -> None:
    hashed = hash_password("Password1!", rounds=4)

    assert hashed != "Password1!"
    assert verify_password("Password1!", hashed)
    assert not verify_password("Password2!", hashed)


def test_hash_uses_fresh_salt_each_call() -> None:
    assert hash_password("Password1!", rounds=4) != hash_password("Password1!", rounds=4)


def test_verify_password_returns_false_for_unrecognised_hash() -> None:
    assert verify_password("Password1!", "not-a-bcrypt-hash") is False


def test_generate_random_token_is_hex_of_requested_size() -> None:
    token = generate_random_token(16)

    assert len(token) == 32
    int(token, 16)
    assert generate_random_token() != generate_random_token()


def test_access_token_round_trip_carries_identity_claims(config: Settings) -> None:
    token = create_access_token(7, "COMPANY", "hr@acme.com", config)
    payload = decode_token(token, ACCESS_TOKEN, config)

    assert payload is not None
    assert payload["sub"] == "7"
    assert payload["role"] == "COMPANY"
    assert payload["email"] == "hr@acme.com"


def test_refresh_token_has_no_role(config: Settings) -> None:
    payload = decode_token(create_refresh_token(7, "hr@acme.com", config), REFRESH_TOKEN, config)

    assert payload is not None
    assert "role" not in payload


def test_tokens_issued_in_same_second_differ(config: Settings) -> None:
    assert create_access_token(1, "JOBSEEKER", "a@b.co", config) != create_access_token(
        1, "JOBSEEKER", "a@b.co", config
    )


def test_decode_rejects_token_of_the_other_type(config: Settings) -> None:
    access = create_access_token(1, "JOBSEEKER", "a@b.co", config)
    refresh = create_refresh_token(1, "a@b.co", config)

    assert decode_token(access, REFRESH_TOKEN, config) is None
    assert decode_token(refresh, ACCESS_TOKEN, config) is None


def test_decode_rejects_expired_token(config: Settings) -> None:
    token = create_access_token(
        1, "JOBSEEKER", "a@b.co", config, expires_delta=timedelta(seconds=-1)
    )

    assert decode_token(token, ACCESS_TOKEN, config) is None


def test_decode_rejects_foreign_signature(config: Settings) -> None:
    forged = jwt.encode(
        {"sub": "1", "role": "ADMIN", "type": ACCESS_TOKEN, "exp": 4102444800},
        "someone-else",
        algorithm="HS256",
    )

    assert decode_token(forged, ACCESS_TOKEN, config) is None
    assert decode_token("garbage", ACCESS_TOKEN, config) is None
