"""Password hashing, token handling and the auth gate."""

import pytest
from jose import jwt

from cleanconnect_api.app.core.config import _parse_duration_minutes, settings
from cleanconnect_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from support import API, auth, register_client, register_provider


def test_password_hash_is_salted_and_verifiable() -> None:
    first = hash_password("secret1")
    second = hash_password("secret1")
    assert first != second
    assert "secret1" not in first
    assert verify_password("secret1", first)
    assert not verify_password("secret2", first)


def test_verify_password_rejects_missing_or_malformed_hash() -> None:
    assert not verify_password("secret1", None)
    assert not verify_password("secret1", "not-a-bcrypt-hash")


def test_token_round_trip_binds_id_and_role() -> None:
    token = create_access_token(7, "provider")
    claims = decode_access_token(token)
    assert claims["id"] == 7
    assert claims["role"] == "provider"
    assert "exp" in claims


def test_token_with_unknown_role_is_refused() -> None:
    with pytest.raises(ValueError):
        create_access_token(1, "admin")


def test_expired_and_tampered_tokens_do_not_decode() -> None:
    expired = create_access_token(1, "client", expires_delta=-60)
    assert decode_access_token(expired) is None

    forged = jwt.encode({"id": 1, "role": "client"}, "another-secret", algorithm=settings.algorithm)
    assert decode_access_token(forged) is None
    assert decode_access_token("garbage") is None


def test_missing_token_is_unauthenticated(client) -> None:
    response = client.get(f"{API}/auth/me")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Not authorized to access this route"}


def test_invalid_token_is_unauthenticated(client) -> None:
    response = client.get(f"{API}/auth/me", headers=auth("not.a.token"))
    assert response.status_code == 401


def test_token_for_missing_identity_is_unauthenticated(client) -> None:
    token = create_access_token(999, "client")
    response = client.get(f"{API}/auth/me", headers=auth(token))
    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


def test_token_role_selects_the_identity_store(client) -> None:
    # Both stores start at id 1; the role claim decides which record loads.
    register_client(client, "noa@example.com")
    register_provider(client, "dana@example.com")
    as_client = client.get(f"{API}/auth/me", headers=auth(create_access_token(1, "client"))).json()
    as_provider = client.get(f"{API}/auth/me", headers=auth(create_access_token(1, "provider"))).json()
    assert as_client["data"]["email"] == "noa@example.com"
    assert as_provider["data"]["email"] == "dana@example.com"


def test_role_gate_rejects_other_role(client) -> None:
    provider = register_provider(client)
    response = client.get(f"{API}/users/profile", headers=auth(provider["token"]))
    assert response.status_code == 403
    assert response.json()["success"] is False

    customer = register_client(client)
    response = client.get(f"{API}/providers/jobs", headers=auth(customer["token"]))
    assert response.status_code == 403


@pytest.mark.parametrize(
    "value, expected",
    [("30d", 43200), ("12h", 720), ("45m", 45), ("7200", 120), ("90s", 1), ("", 99), ("soon", 99)],
)
def test_token_lifetime_parsing(value, expected) -> None:
    assert _parse_duration_minutes(value, 99) == expected
