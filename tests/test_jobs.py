"""Provider job inbox and status transitions."""

import asyncio

import pytest

from cleanconnect_api.app.core.config import settings
from cleanconnect_api.app.core.errors import NotFound
from cleanconnect_api.app.schemas.job import JobCreate
from cleanconnect_api.app.services.job_service import JobService, can_transition
from support import API, auth, create_job, register_client, register_provider


@pytest.fixture
def parties(client):
    customer = register_client(
        client,
        addresses=[{"street": "12 Herzl St", "city": "Tel Aviv", "zipCode": "6100000"}],
    )
    provider = register_provider(client, serviceDetails=[{"type": "home", "hourlyRate": 90}])
    rival = register_provider(client, "rival@example.com")
    return {
        "client_id": customer["user"]["id"],
        "provider_id": provider["provider"]["id"],
        "provider": auth(provider["token"]),
        "rival_id": rival["provider"]["id"],
        "rival": auth(rival["token"]),
    }


def test_list_jobs_newest_first_with_client_contact(client, parties) -> None:
    first = create_job(parties["client_id"], parties["provider_id"])
    second = create_job(parties["client_id"], parties["provider_id"], days=1)
    create_job(parties["client_id"], parties["rival_id"])

    response = client.get(f"{API}/providers/jobs", headers=parties["provider"])
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [job["id"] for job in body["data"]] == [second.id, first.id]
    assert body["data"][0]["client"]["email"] == "noa@example.com"
    assert body["data"][0]["client"]["phone"] == "0501234567"
    assert body["data"][0]["status"] == "pending"


def test_get_job_includes_client_addresses(client, parties) -> None:
    job = create_job(parties["client_id"], parties["provider_id"])
    response = client.get(f"{API}/providers/jobs/{job.id}", headers=parties["provider"])
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == job.id
    assert data["client"]["addresses"][0]["city"] == "Tel Aviv"


def test_job_of_another_provider_is_not_found(client, parties) -> None:
    job = create_job(parties["client_id"], parties["provider_id"])
    foreign = client.get(f"{API}/providers/jobs/{job.id}", headers=parties["rival"])
    missing = client.get(f"{API}/providers/jobs/9999", headers=parties["rival"])
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {"success": False, "message": "Job not found or not authorized"}
    assert "data" not in foreign.json()


def test_another_provider_cannot_move_the_job(client, parties) -> None:
    job = create_job(parties["client_id"], parties["provider_id"])
    response = client.put(f"{API}/providers/jobs/{job.id}/accept", headers=parties["rival"])
    assert response.status_code == 404
    unchanged = client.get(f"{API}/providers/jobs/{job.id}", headers=parties["provider"]).json()["data"]
    assert unchanged["status"] == "pending"


def test_accept_decline_and_complete(client, parties) -> None:
    job = create_job(parties["client_id"], parties["provider_id"])
    base = f"{API}/providers/jobs/{job.id}"

    accepted = client.put(f"{base}/accept", headers=parties["provider"]).json()
    assert accepted["data"]["status"] == "accepted"

    completed = client.put(f"{base}/complete", json={"notes": "All rooms done"}, headers=parties["provider"])
    data = completed.json()["data"]
    assert data["status"] == "completed"
    assert data["completionNotes"] == "All rooms done"
    assert data["completedAt"] is not None


def test_decline_reason_defaults(client, parties) -> None:
    job = create_job(parties["client_id"], parties["provider_id"])
    response = client.put(f"{API}/providers/jobs/{job.id}/decline", headers=parties["provider"])
    assert response.status_code == 200
    assert response.json()["data"]["declineReason"] == "Not specified"

    other = create_job(parties["client_id"], parties["provider_id"])
    response = client.put(
        f"{API}/providers/jobs/{other.id}/decline",
        json={"reason": "Fully booked"},
        headers=parties["provider"],
    )
    assert response.json()["data"]["declineReason"] == "Fully booked"


def test_transitions_are_unguarded_by_default(client, parties) -> None:
    job = create_job(parties["client_id"], parties["provider_id"])
    base = f"{API}/providers/jobs/{job.id}"
    assert client.put(f"{base}/complete", headers=parties["provider"]).json()["data"]["status"] == "completed"
    assert client.put(f"{base}/decline", headers=parties["provider"]).json()["data"]["status"] == "declined"
    assert client.put(f"{base}/accept", headers=parties["provider"]).json()["data"]["status"] == "accepted"


def test_strict_mode_enforces_the_transition_table(client, parties, monkeypatch) -> None:
    monkeypatch.setattr(settings, "strict_job_transitions", True)
    job = create_job(parties["client_id"], parties["provider_id"])
    base = f"{API}/providers/jobs/{job.id}"

    response = client.put(f"{base}/complete", headers=parties["provider"])
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot move a job from pending to completed"

    assert client.put(f"{base}/accept", headers=parties["provider"]).status_code == 200
    assert client.put(f"{base}/complete", headers=parties["provider"]).status_code == 200
    assert client.put(f"{base}/decline", headers=parties["provider"]).status_code == 400

    # Ownership is still checked first.
    assert client.put(f"{base}/accept", headers=parties["rival"]).status_code == 404


def test_transition_table() -> None:
    assert can_transition("pending", "accepted")
    assert can_transition("pending", "cancelled")
    assert can_transition("accepted", "completed")
    assert not can_transition("pending", "completed")
    assert not can_transition("completed", "accepted")
    assert not can_transition("declined", "accepted")
    assert not can_transition("unknown", "accepted")


def test_create_job_prices_from_hours(parties) -> None:
    job = create_job(parties["client_id"], parties["provider_id"], hours=3)
    assert job.price == 270
    assert job.status == "pending"

    # No detail for "office": falls back to the provider's hourly rate.
    office = create_job(parties["client_id"], parties["rival_id"], service_type="office", hours=2)
    assert office.price == 160

    explicit = create_job(parties["client_id"], parties["provider_id"], price=100, hours=3)
    assert explicit.price == 100


def test_create_job_requires_existing_parties(parties) -> None:
    data = JobCreate(
        service_type="home",
        property_type="house",
        scheduled_date="2026-05-04T09:00:00",
        address="1 Dizengoff St",
    )
    with pytest.raises(NotFound):
        asyncio.run(JobService.create_job(9999, parties["provider_id"], data))
    with pytest.raises(NotFound):
        asyncio.run(JobService.create_job(parties["client_id"], 9999, data))


def test_out_of_range_job_ids_are_validation_errors(client, parties) -> None:
    huge = 2**70
    for method, path in (
        ("get", f"{API}/providers/jobs/{huge}"),
        ("put", f"{API}/providers/jobs/{huge}/accept"),
        ("put", f"{API}/providers/jobs/{huge}/decline"),
        ("put", f"{API}/providers/jobs/{huge}/complete"),
        ("get", f"{API}/providers/jobs/0"),
    ):
        response = getattr(client, method)(path, headers=parties["provider"])
        assert response.status_code == 400, path
        assert response.json()["success"] is False

    largest = 2**63 - 1
    response = client.get(f"{API}/providers/jobs/{largest}", headers=parties["provider"])
    assert response.status_code == 404
