"""Client profile and address book."""

import pytest

from support import API, auth, register_client, register_provider


@pytest.fixture
def headers(client):
    return auth(register_client(client)["token"])


def address(street: str, **extra):
    return {"street": street, "city": "Tel Aviv", "zipCode": "6100000", **extra}


def defaults(addresses):
    return [a["street"] for a in addresses if a["isDefault"]]


def test_get_profile(client, headers) -> None:
    response = client.get(f"{API}/users/profile", headers=headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "noa@example.com"
    assert data["addresses"] == []
    assert "password" not in data


def test_update_profile_ignores_unknown_fields(client, headers) -> None:
    response = client.put(
        f"{API}/users/profile",
        json={"firstName": "Noam", "language": "en", "email": "hijack@example.com"},
        headers=headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["firstName"] == "Noam"
    assert data["language"] == "en"
    assert data["email"] == "noa@example.com"


def test_update_profile_validates_language(client, headers) -> None:
    response = client.put(f"{API}/users/profile", json={"language": "de"}, headers=headers)
    assert response.status_code == 400


def test_first_address_becomes_default(client, headers) -> None:
    response = client.post(f"{API}/users/addresses", json=address("1 Allenby St"), headers=headers)
    assert response.status_code == 201
    addresses = response.json()["data"]
    assert len(addresses) == 1
    assert addresses[0]["id"]
    assert addresses[0]["country"] == "Israel"
    assert defaults(addresses) == ["1 Allenby St"]


def test_single_default_address(client, headers) -> None:
    client.post(f"{API}/users/addresses", json=address("1 Allenby St"), headers=headers)
    response = client.post(f"{API}/users/addresses", json=address("2 Rothschild Blvd", isDefault=True), headers=headers)
    addresses = response.json()["data"]
    assert defaults(addresses) == ["2 Rothschild Blvd"]

    first_id = addresses[0]["id"]
    response = client.put(f"{API}/users/addresses/{first_id}", json={"isDefault": True}, headers=headers)
    assert defaults(response.json()["data"]) == ["1 Allenby St"]

    response = client.delete(f"{API}/users/addresses/{first_id}", headers=headers)
    remaining = response.json()["data"]
    assert [a["street"] for a in remaining] == ["2 Rothschild Blvd"]
    assert defaults(remaining) == ["2 Rothschild Blvd"]


def test_update_address_fields(client, headers) -> None:
    added = client.post(f"{API}/users/addresses", json=address("1 Allenby St"), headers=headers).json()["data"]
    response = client.put(
        f"{API}/users/addresses/{added[0]['id']}",
        json={"city": "Jaffa", "zipCode": "6800000"},
        headers=headers,
    )
    assert response.status_code == 200
    updated = response.json()["data"][0]
    assert updated["city"] == "Jaffa"
    assert updated["zipCode"] == "6800000"
    assert updated["street"] == "1 Allenby St"

    profile = client.get(f"{API}/users/profile", headers=headers).json()["data"]
    assert profile["addresses"][0]["city"] == "Jaffa"


def test_registration_addresses_get_ids(client) -> None:
    token = register_client(
        client,
        "multi@example.com",
        addresses=[address("1 Allenby St"), address("2 Rothschild Blvd")],
    )["token"]
    addresses = client.get(f"{API}/users/profile", headers=auth(token)).json()["data"]["addresses"]
    assert all(a["id"] for a in addresses)
    assert defaults(addresses) == ["1 Allenby St"]


def test_unknown_address_is_not_found(client, headers) -> None:
    assert client.put(f"{API}/users/addresses/nope", json={"city": "Haifa"}, headers=headers).status_code == 404
    response = client.delete(f"{API}/users/addresses/nope", headers=headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Address not found"}


def test_address_routes_are_client_only(client) -> None:
    token = register_provider(client)["token"]
    response = client.post(f"{API}/users/addresses", json=address("1 Allenby St"), headers=auth(token))
    assert response.status_code == 403
