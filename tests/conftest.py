"""
Shared test configuration.

Every test runs against its own temporary SQLite file: the ``db``
fixture points ``settings.database_url`` at it and applies the
migrations.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cleanconnect_api.app.core.config import settings
from cleanconnect_api.app.core.db import init_db
from cleanconnect_api.app.main import app


@pytest.fixture(autouse=True)
def db(tmp_path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the application at a fresh database for each test."""
    path = str(tmp_path / "cleanconnect-test.db")
    monkeypatch.setattr(settings, "database_url", path)
    monkeypatch.setattr(settings, "strict_job_transitions", False)
    init_db()
    return path


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client
