# Shared helpers for API tests.
# They register identities over HTTP and record jobs through the service
# layer, since the job ledger has no public create route.

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Any, Dict

from fastapi.testclient import TestClient

from cleanconnect_api.app.schemas.job import JobCreate, JobRead
from cleanconnect_api.app.services.job_service import JobService

API = "/api/v1"


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def client_payload(email: str = "noa@example.com", **overrides: Any) -> Dict[str, Any]:
    payload = {
        "firstName": "Noa",
        "lastName": "Levi",
        "email": email,
        "phone": "0501234567",
        "password": "secret1",
    }
    payload.update(overrides)
    return payload


def provider_payload(email: str = "dana@example.com", **overrides: Any) -> Dict[str, Any]:
    payload = {
        "firstName": "Dana",
        "lastName": "Cohen",
        "email": email,
        "phone": "0527654321",
        "password": "secret1",
        "serviceTypes": ["home"],
        "serviceAreas": ["Tel Aviv"],
        "hourlyRate": 80,
    }
    payload.update(overrides)
    return payload


def register_client(test_client: TestClient, email: str = "noa@example.com", **overrides: Any) -> Dict[str, Any]:
    response = test_client.post(f"{API}/auth/register/client", json=client_payload(email, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


def register_provider(test_client: TestClient, email: str = "dana@example.com", **overrides: Any) -> Dict[str, Any]:
    response = test_client.post(f"{API}/auth/register/provider", json=provider_payload(email, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


def create_job(client_id: int, provider_id: int, days: int = 0, **overrides: Any) -> JobRead:
    """Record a pending job directly through the service layer."""
    data = {
        "service_type": "home",
        "property_type": "apartment",
        "scheduled_date": datetime(2026, 5, 4, 9, 0) + timedelta(days=days),
        "address": "12 Herzl St, Tel Aviv",
        "description": "Weekly clean",
    }
    data.update(overrides)
    return asyncio.run(JobService.create_job(client_id, provider_id, JobCreate(**data)))
