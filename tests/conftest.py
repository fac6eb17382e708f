from datetime import datetime, timedelta, timezone

import mongomock
import pytest

from taskboard.app import create_app
from taskboard.models.task_model import TaskPayload


TEST_CONFIG = {
    "TESTING": True,
    "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
    "MONGO_DB_NAME": "taskboard_test",
    # Cheap hashes keep the suite fast; production uses scrypt
    "PASSWORD_HASH_METHOD": "pbkdf2:sha256:1000",
    "ENV": "development",
}


class StepClock:
    """Clock that advances one second per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        value = self.now
        self.now = self.now + timedelta(seconds=1)
        return value


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def app(mongo_client):
    return create_app(dict(TEST_CONFIG), mongo_client=mongo_client)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(mongo_client):
    return mongo_client[TEST_CONFIG["MONGO_DB_NAME"]]


@pytest.fixture
def step_clock(monkeypatch):
    clock = StepClock()
    monkeypatch.setattr("taskboard.repositories.task_repository.utc_now", clock)
    return clock


def make_payload(**overrides):
    fields = {
        "title": "Plan sprint",
        "description": "draft v1",
        "status": "todo",
        "priority": "medium",
    }
    fields.update(overrides)
    return TaskPayload(**fields)


def signup(client, username="alice", email="alice@example.com", password="correct-horse"):
    return client.post(
        "/api/auth/signup",
        json={"username": username, "email": email, "password": password},
    )


@pytest.fixture
def auth_client(client):
    """Test client holding a session cookie for a freshly signed-up user."""
    resp = signup(client)
    assert resp.status_code == 201
    client.user = resp.get_json()["user"]
    return client


@pytest.fixture
def other_client(app):
    other = app.test_client()
    resp = signup(other, username="mallory", email="mallory@example.com")
    assert resp.status_code == 201
    other.user = resp.get_json()["user"]
    return other
