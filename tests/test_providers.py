"""Provider listing, profile and availability."""

import pytest

from cleanconnect_api.app.services.provider_service import average_hourly_rate
from support import API, auth, create_job, register_client, register_provider

DETAILS = [
    {"type": "home", "hourlyRate": 10},
    {"type": "office", "hourlyRate": 20},
    {"type": "building", "hourlyRate": 25},
]


@pytest.fixture
def provider(client):
    body = register_provider(client, serviceDetails=DETAILS)
    return {"id": body["provider"]["id"], "headers": auth(body["token"])}


def profile(client, headers):
    response = client.get(f"{API}/providers/profile", headers=headers)
    assert response.status_code == 200
    return response.json()["data"]


def test_average_hourly_rate() -> None:
    assert average_hourly_rate(DETAILS, 99) == 18.33
    assert average_hourly_rate([{"hourly_rate": 30}, {"hourly_rate": 45}], 0) == 37.5
    assert average_hourly_rate([], 99) == 99


def test_hourly_rate_is_derived_at_registration(client, provider) -> None:
    assert profile(client, provider["headers"])["hourlyRate"] == 18.33


def test_hourly_rate_follows_service_details_on_every_save(client, provider) -> None:
    headers = provider["headers"]
    response = client.put(
        f"{API}/providers/profile",
        json={"serviceDetails": [{"type": "home", "hourlyRate": 50}, {"type": "office", "hourlyRate": 61}]},
        headers=headers,
    )
    assert response.json()["data"]["hourlyRate"] == 55.5

    # A direct rate is overridden while service details exist.
    response = client.put(f"{API}/providers/profile", json={"hourlyRate": 200}, headers=headers)
    assert response.json()["data"]["hourlyRate"] == 55.5

    # Saving another field keeps the derived value.
    response = client.put(f"{API}/providers/profile", json={"bio": "Ten years of experience"}, headers=headers)
    assert response.json()["data"]["hourlyRate"] == 55.5


def test_hourly_rate_is_authoritative_without_details(client) -> None:
    headers = auth(register_provider(client)["token"])
    response = client.put(f"{API}/providers/profile", json={"hourlyRate": 95}, headers=headers)
    assert response.json()["data"]["hourlyRate"] == 95


def test_profile_update_is_whitelisted(client, provider) -> None:
    response = client.put(
        f"{API}/providers/profile",
        json={
            "bio": "Eco products only",
            "experience": 7,
            "certifications": ["Green Clean"],
            "serviceAreas": ["Haifa"],
            "rating": 5,
            "email": "hijack@example.com",
        },
        headers=provider["headers"],
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["bio"] == "Eco products only"
    assert data["experience"] == 7
    assert data["certifications"] == ["Green Clean"]
    assert data["serviceAreas"] == ["Haifa"]
    assert data["rating"] == 0
    assert data["email"] == "dana@example.com"


def test_profile_update_dedupes_service_types(client, provider) -> None:
    response = client.put(
        f"{API}/providers/profile",
        json={"serviceTypes": ["home", "office", "home", "office"]},
        headers=provider["headers"],
    )
    assert response.status_code == 200
    assert response.json()["data"]["serviceTypes"] == ["home", "office"]

    profile = client.get(f"{API}/providers/profile", headers=provider["headers"]).json()["data"]
    assert profile["serviceTypes"] == ["home", "office"]


def test_profile_lists_requests_and_reviews(client, provider) -> None:
    customer = register_client(client)
    job = create_job(customer["user"]["id"], provider["id"])
    client.post(
        f"{API}/public/providers/{provider['id']}/reviews",
        json={"rating": 5, "comment": "Great"},
        headers=auth(customer["token"]),
    )

    data = profile(client, provider["headers"])
    assert "password" not in data
    assert data["requests"] == [
        {
            "id": job.id,
            "status": "pending",
            "serviceType": "home",
            "date": data["requests"][0]["date"],
            "clientName": "Noa Levi",
        }
    ]
    assert data["reviews"][0]["rating"] == 5
    assert data["reviews"][0]["clientName"] == "Noa Levi"


def test_update_availability(client, provider) -> None:
    slots = [
        {"day": 0, "startTime": "08:00", "endTime": "12:00"},
        {"day": 3, "startTime": "14:30", "endTime": "18:00"},
    ]
    response = client.put(f"{API}/providers/availability", json={"availability": slots}, headers=provider["headers"])
    assert response.status_code == 200
    assert response.json()["data"] == slots
    assert profile(client, provider["headers"])["availability"] == slots


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"availability": [{"day": 7, "startTime": "08:00", "endTime": "12:00"}]},
        {"availability": [{"day": 1, "startTime": "8am", "endTime": "12:00"}]},
        {"availability": [{"day": 1, "startTime": "12:00", "endTime": "08:00"}]},
    ],
)
def test_invalid_availability_is_rejected(client, provider, body) -> None:
    response = client.put(f"{API}/providers/availability", json=body, headers=provider["headers"])
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_public_list_sorted_by_rating_with_service_cities(client) -> None:
    older = register_provider(client, "older@example.com", serviceAreas=["Haifa"])["provider"]["id"]
    newer = register_provider(client, "newer@example.com")["provider"]["id"]
    rated = register_provider(client, "rated@example.com")["provider"]["id"]
    client.post(
        f"{API}/public/providers/{rated}/reviews",
        json={"rating": 3},
        headers=auth(register_client(client)["token"]),
    )

    response = client.get(f"{API}/providers")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert [p["id"] for p in body["data"]] == [rated, newer, older]
    assert body["data"][2]["serviceCities"] == ["Haifa"]
    assert all("password" not in p for p in body["data"])
