"""Shared fixtures.

Environment is configured before the application is imported so the
module-level settings pick it up.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-crime-records-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DB_CONNECT_RETRIES", "1")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import update  # noqa: E402

from crime_records.config.settings import settings  # noqa: E402
from crime_records.infrastructure.database.client import db_client  # noqa: E402
from crime_records.infrastructure.database.models import UserDB  # noqa: E402
from crime_records.main import app  # noqa: E402

DEFAULT_PASSWORD = "correct-horse"


@pytest.fixture
def client(tmp_path, monkeypatch):
    """TestClient bound to a fresh SQLite database file"""
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'crime_records.db'}")
    with TestClient(app) as test_client:
        yield test_client


def signup(client, badge_id, name=None, password=DEFAULT_PASSWORD):
    response = client.post(
        "/api/users",
        json={"badgeId": badge_id, "name": name or f"Officer {badge_id}", "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def login(client, badge_id, password=DEFAULT_PASSWORD):
    response = client.post("/api/auth/login", json={"badgeId": badge_id, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def promote_to_admin(client, badge_id):
    """Set the admin flag directly; the API never exposes it"""
    async def _promote():
        async with db_client.get_session() as db:
            await db.execute(update(UserDB).where(UserDB.badge_id == badge_id).values(is_admin=True))
            await db.commit()

    client.portal.call(_promote)


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def officer(client):
    """Signed-up non-admin user with a live token"""
    user = signup(client, "OFFICER123", "R. Rao")
    return {"user": user, "headers": auth_headers(login(client, "OFFICER123"))}


@pytest.fixture
def other_officer(client):
    user = signup(client, "OFFICER456", "K. Devi")
    return {"user": user, "headers": auth_headers(login(client, "OFFICER456"))}


@pytest.fixture
def admin(client):
    user = signup(client, "ADMIN001", "Station Admin")
    promote_to_admin(client, "ADMIN001")
    return {"user": user, "headers": auth_headers(login(client, "ADMIN001"))}


def incident_payload(**overrides):
    payload = {
        "occurredAt": "2025-04-19T21:30:00Z",
        "location": "RTC Bus Stand Complex, Guntur",
        "crimeType": "Pickpocketing (Bus Stand)",
        "description": "Wallet taken from passenger boarding the 9:40 bus",
    }
    payload.update(overrides)
    return payload


def create_incident(client, headers, **overrides):
    response = client.post("/api/incidents", json=incident_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
