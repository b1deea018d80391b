import itertools

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import build_engine, build_session_factory, create_schema
from app.main import create_app
from app.services.connections import ConnectionRegistry
from app.storage import MemoryStorage, SqlStorage


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    if request.param == "memory":
        yield MemoryStorage()
        return

    engine = build_engine("sqlite://")
    create_schema(engine)
    db = build_session_factory(engine)()
    try:
        yield SqlStorage(db)
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def make_user(storage):
    counter = itertools.count(1)

    def _make(role="worker", **fields):
        n = next(counter)
        data = {
            "username": f"{role}{n}",
            "email": f"{role}{n}@example.com",
            "password_hash": "not-a-real-hash",
            "full_name": f"{role.title()} {n}",
            "phone_number": "5550001111",
            "role": role,
        }
        data.update(fields)
        return storage.create_user(data)

    return _make


@pytest.fixture
def make_job(storage):
    def _make(employer_id, skills=(), status="open", **fields):
        data = {
            "employer_id": employer_id,
            "title": "Warehouse shift",
            "description": "Sort and pack parcels",
            "location": "Austin, TX",
            "skills": list(skills),
            "hourly_rate": 20,
            "job_type": "temporary",
            "status": status,
        }
        data.update(fields)
        return storage.create_job(data)

    return _make


class RecordingChannel:
    """In-memory channel that keeps every payload it accepts."""

    def __init__(self, accept=True):
        self.closed = False
        self.accept = accept
        self.payloads = []

    def offer(self, payload):
        if not self.accept:
            return False
        self.payloads.append(payload)
        return True


@pytest.fixture
def channel_factory():
    return RecordingChannel


@pytest.fixture
def app_settings():
    return Settings(storage_backend="memory", environment="test", auth_secret="test-secret")


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    counter = itertools.count(1)

    def _register(role="worker", **fields):
        n = next(counter)
        payload = {
            "username": f"{role}{n}",
            "password": "secret-pass",
            "email": f"{role}{n}@example.com",
            "full_name": f"{role.title()} {n}",
            "phone_number": "5550001111",
            "role": role,
        }
        payload.update(fields)
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        body["headers"] = {"Authorization": f"Bearer {body['access_token']}"}
        return body

    return _register
