"""
Tests for token handling, password hashing and access control
"""

from datetime import datetime, timezone
from unittest import mock

import pytest

from event_registration_api.app.core.errors import ForbiddenError, UnauthenticatedError
from event_registration_api.app.core.security import (
    Identity,
    authenticate,
    authorize,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from event_registration_api.app.core.store import UserStore
from event_registration_api.app.models import Role, User

SECRET = "test_secret"


@pytest.fixture
def users():
    store = UserStore()
    store.add(
        User(
            id="u1",
            name="Jane",
            email="jane@example.com",
            password_hash=hash_password("password123"),
            role=Role.ORGANIZER,
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
    )
    return store


def test_token_round_trip():
    token = create_access_token({"sub": "u1", "role": "organizer"}, expires_delta=60, secret_key=SECRET)
    payload = decode_access_token(token, SECRET)
    assert payload["sub"] == "u1"
    assert payload["role"] == "organizer"
    assert payload["exp"] - payload["iat"] == 60


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "u1"}, expires_delta=-10, secret_key=SECRET)
    assert decode_access_token(token, SECRET) is None


def test_token_rejected_at_expiry_second():
    """A token whose ``exp`` equals the current second is already expired."""
    with mock.patch("event_registration_api.app.core.security.time.time", return_value=1_800_000_000.5):
        token = create_access_token({"sub": "u1"}, expires_delta=0, secret_key=SECRET)
        assert decode_access_token(token, SECRET) is None

        live = create_access_token({"sub": "u1"}, expires_delta=1, secret_key=SECRET)
        assert decode_access_token(live, SECRET)["sub"] == "u1"


def test_token_signed_with_other_secret_is_rejected():
    token = create_access_token({"sub": "u1"}, expires_delta=60, secret_key="another_secret")
    assert decode_access_token(token, SECRET) is None


def test_tampered_payload_is_rejected():
    token = create_access_token({"sub": "u1"}, expires_delta=60, secret_key=SECRET)
    forged = create_access_token({"sub": "u2"}, expires_delta=60, secret_key=SECRET)
    header, _, signature = token.split(".")
    _, forged_payload, _ = forged.split(".")
    assert decode_access_token(f"{header}.{forged_payload}.{signature}", SECRET) is None


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c", "not.base64!.at-all"])
def test_malformed_tokens_are_rejected(token):
    assert decode_access_token(token, SECRET) is None


def test_authenticate_resolves_identity(users):
    token = create_access_token({"sub": "u1"}, expires_delta=60, secret_key=SECRET)
    identity = authenticate(token, users, SECRET)
    assert identity == Identity(id="u1", name="Jane", email="jane@example.com", role=Role.ORGANIZER)


def test_authenticate_without_token(users):
    with pytest.raises(UnauthenticatedError, match="No token provided"):
        authenticate(None, users, SECRET)


def test_authenticate_with_invalid_token(users):
    with pytest.raises(UnauthenticatedError, match="Invalid or expired token"):
        authenticate("garbage", users, SECRET)


def test_authenticate_unknown_subject(users):
    """A valid token for a user that no longer exists is refused."""
    token = create_access_token({"sub": "ghost"}, expires_delta=60, secret_key=SECRET)
    with pytest.raises(UnauthenticatedError, match="User not found"):
        authenticate(token, users, SECRET)


def test_authorize_checks_role():
    attendee = Identity(id="u2", name="Sam", email="sam@example.com", role=Role.ATTENDEE)
    organizer = Identity(id="u1", name="Jane", email="jane@example.com", role=Role.ORGANIZER)

    authorize(organizer, [Role.ORGANIZER])
    authorize(attendee, [Role.ORGANIZER, Role.ATTENDEE])
    with pytest.raises(ForbiddenError):
        authorize(attendee, [Role.ORGANIZER])


def test_password_hashing():
    hashed = hash_password("password123")
    assert "password123" not in hashed
    assert hashed != hash_password("password123")
    assert verify_password("password123", hashed)
    assert not verify_password("wrong-password", hashed)
    assert not verify_password("password123", "not-a-hash")
