"""
Shared fixtures for the test suite
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from event_registration_api.app.core import security
from event_registration_api.app.core.config import Settings
from event_registration_api.app.core.security import Identity
from event_registration_api.app.core.store import EventStore, UserStore
from event_registration_api.app.main import create_app
from event_registration_api.app.models import Role
from event_registration_api.app.schemas.event import EventCreate
from event_registration_api.app.services.event_service import EventService
from event_registration_api.app.services.notification_service import NotificationDispatcher
from event_registration_api.app.services.registration_service import RegistrationService
from event_registration_api.app.services.user_service import UserService


class FakeClock:
    """Clock that moves forward one second every time it is read."""

    def __init__(self, start=datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)):
        self._now = start
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self._now += timedelta(seconds=1)
            return self._now


class RecordingNotifier:
    """Notifier double that records calls and can be told to fail."""

    def __init__(self, mode="ok"):
        self.mode = mode
        self.calls = []

    def send_registration_email(self, email, name, event_title):
        self.calls.append((email, name, event_title))
        if self.mode == "raise":
            raise RuntimeError("SMTP server unavailable")
        return self.mode == "ok"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Keep PBKDF2 cheap so tests creating many users stay fast."""
    monkeypatch.setattr(security, "PBKDF2_ITERATIONS", 1_000)


@pytest.fixture
def settings():
    return Settings(secret_key="test_secret", email_host="", notification_workers=2)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_notifier():
    return RecordingNotifier


@pytest.fixture
def user_store():
    return UserStore()


@pytest.fixture
def event_store():
    return EventStore()


@pytest.fixture
def dispatcher():
    dispatcher = NotificationDispatcher(max_workers=2)
    yield dispatcher
    dispatcher.shutdown(wait=True)


@pytest.fixture
def user_service(user_store, clock):
    return UserService(user_store, password_min_length=6, clock=clock)


@pytest.fixture
def event_service(event_store, clock):
    return EventService(event_store, clock=clock)


@pytest.fixture
def registration_service(event_store, notifier, dispatcher, clock):
    return RegistrationService(event_store, notifier, dispatcher, clock=clock)


@pytest.fixture
def organizer():
    return Identity(id="org-1", name="Organizer", email="organizer@example.com", role=Role.ORGANIZER)


@pytest.fixture
def other_organizer():
    return Identity(id="org-2", name="Other Organizer", email="other-org@example.com", role=Role.ORGANIZER)


@pytest.fixture
def attendee():
    return Identity(id="att-1", name="Attendee", email="attendee@example.com", role=Role.ATTENDEE)


@pytest.fixture
def make_event_data():
    """Factory for valid ``EventCreate`` payloads."""

    def _make(**overrides):
        data = {
            "title": "Test Event",
            "description": "A test event description",
            "date": "2026-03-15",
            "time": "10:00",
            "location": "Virtual Room 1",
        }
        data.update(overrides)
        return EventCreate(**data)

    return _make


# -------- HTTP fixtures --------

@pytest.fixture
def app(settings, notifier, clock):
    return create_app(settings=settings, notifier=notifier, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user over HTTP and return the response."""

    def _register(**overrides):
        payload = {
            "name": "Test User",
            "email": "test@example.com",
            "password": "password123",
            "role": "attendee",
        }
        payload.update(overrides)
        return client.post("/api/v1/register", json=payload)

    return _register


@pytest.fixture
def organizer_token(register):
    response = register(name="Organizer", email="organizer@example.com", role="organizer")
    return response.json()["token"]


@pytest.fixture
def attendee_token(register):
    response = register(name="Attendee", email="attendee@example.com")
    return response.json()["token"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def create_event(client):
    """Create an event over HTTP and return the response."""

    def _create(token, **overrides):
        payload = {
            "title": "Test Event",
            "description": "A test event description",
            "date": "2026-03-15",
            "time": "10:00",
            "location": "Virtual Room 1",
        }
        payload.update(overrides)
        return client.post("/api/v1/events", json=payload, headers=auth(token))

    return _create
