import os
import tempfile
from pathlib import Path
from uuid import uuid4

import pytest

DEFAULT_TEST_DB_URL = f"sqlite:///{Path(tempfile.gettempdir()) / 'civictrack_test.db'}"
TEST_DB_URL = os.getenv("TEST_DB_URL", DEFAULT_TEST_DB_URL)
os.environ["DATABASE_URL"] = TEST_DB_URL

from fastapi.testclient import TestClient
from sqlmodel import Session

from app.core.config import settings
from app.db.init_db import init_db
from app.db.session import engine
from app.main import app
from app.models.enums import UserRole
from app.services.auth_service import create_user

settings.DATABASE_URL = TEST_DB_URL

PASSWORD = "secret123"


@pytest.fixture()
def client():
    init_db(drop_all=True)
    with TestClient(app) as test_client:
        yield test_client


def _login(client: TestClient, email: str) -> dict:
    login = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    assert login.status_code == 200, login.text
    return {"Authorization": f"Bearer {login.json()['access_token']}"}


@pytest.fixture()
def make_user(client):
    """Register a user and return ``(user_id, auth_headers)``."""

    def _make(role: UserRole = UserRole.CITIZEN, username: str = None):
        username = username or f"user-{uuid4().hex[:8]}"
        email = f"{username}@example.com"
        if role == UserRole.CITIZEN:
            response = client.post(
                "/api/v1/auth/register",
                json={"username": username, "email": email, "password": PASSWORD},
            )
            assert response.status_code == 201, response.text
            user_id = response.json()["id"]
        else:
            with Session(engine) as session:
                user_id = create_user(session, username, email, PASSWORD, role=role).id
        return user_id, _login(client, email)

    return _make


@pytest.fixture()
def admin_headers(make_user):
    _, headers = make_user(role=UserRole.ADMIN)
    return headers


def issue_payload(lat: float = 40.0, lng: float = -74.0, **overrides) -> dict:
    payload = {
        "title": "Pothole on Main St",
        "description": "Deep pothole near the crosswalk",
        "category": "Roads",
        "location": {"type": "Point", "coordinates": [lng, lat]},
    }
    payload.update(overrides)
    return payload
