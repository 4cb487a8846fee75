"""
Security helpers for password hashing and bearer-token authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC-SHA256 signatures and base64url encoding.  Tokens embed the
user's identifier, email and role together with ``iat`` and ``exp``
timestamps, and are verified against the ``SECRET_KEY`` setting.
Passwords are hashed with PBKDF2-HMAC-SHA256 and a random salt.

On top of these primitives sit the two access-control operations used
by the API layer:

* :func:`authenticate` turns a bearer credential into an
  :class:`Identity`, resolving the token subject to a live user.
* :func:`authorize` checks that an identity holds one of the required
  roles.  Ownership of individual events is checked by the event
  service, not here.

``get_current_user`` and ``require_roles`` wrap them as FastAPI
dependencies.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .errors import ForbiddenError, UnauthenticatedError
from .store import UserStore
from ..models import Role

PBKDF2_ITERATIONS = 100_000


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as seen by the services."""

    id: str
    name: str
    email: str
    role: Role


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[int] = None,
    secret_key: Optional[str] = None,
) -> str:
    """Create a signed token carrying ``data`` as its claims.

    The payload is extended with ``iat`` and ``exp`` (UNIX timestamps).
    The token has the form ``header.payload.signature`` where each part
    is base64url encoded, and is sent by clients as
    ``Authorization: Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed, e.g. ``{"sub": user_id, "email": ..., "role": ...}``.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.
    secret_key : Optional[str]
        Signing secret.  Defaults to ``settings.secret_key``.
    """
    now = int(time.time())
    to_encode = dict(data)
    lifetime = expires_delta if expires_delta is not None else settings.access_token_expire_minutes * 60
    to_encode["iat"] = now
    to_encode["exp"] = now + lifetime
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature = _sign(signing_input, secret_key or settings.secret_key)
    return f"{header_b64}.{payload_b64}.{_b64_url_encode(signature)}"


def decode_access_token(token: str, secret_key: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Verify a token and return its payload.

    Returns ``None`` when the token is malformed, was signed with a
    different secret or algorithm, or has expired.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        header = json.loads(_b64_url_decode(header_b64))
        actual_sig = _b64_url_decode(signature_b64)
        expected_sig = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), secret_key or settings.secret_key)
        # Constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            return None
        data = json.loads(_b64_url_decode(payload_b64))
        if not isinstance(data, dict) or data.get("exp") is None:
            return None
        if int(data["exp"]) <= int(time.time()):
            return None
    except (ValueError, TypeError):
        return None
    return data


def authenticate(token: Optional[str], users: UserStore, secret_key: Optional[str] = None) -> Identity:
    """Resolve a bearer credential to the identity of a live user.

    Raises
    ------
    UnauthenticatedError
        If the credential is missing, fails verification or refers to a
        user that no longer exists.
    """
    if not token:
        raise UnauthenticatedError("Access denied. No token provided.")
    payload = decode_access_token(token, secret_key)
    if not payload:
        raise UnauthenticatedError("Invalid or expired token.")
    subject = payload.get("sub")
    user = users.get(subject) if isinstance(subject, str) else None
    if user is None:
        raise UnauthenticatedError("Invalid token. User not found.")
    return Identity(id=user.id, name=user.name, email=user.email, role=user.role)


def authorize(identity: Identity, required_roles: Iterable[Role]) -> None:
    """Raise ``ForbiddenError`` unless ``identity`` holds one of ``required_roles``."""
    if identity.role not in set(required_roles):
        raise ForbiddenError("Access denied. Insufficient permissions.")


security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """Dependency that authenticates the request's bearer token.

    A missing or invalid token results in HTTP 401 through the
    ``ServiceError`` handler installed by ``create_app``.
    """
    token = credentials.credentials if credentials else None
    return authenticate(
        token,
        request.app.state.services.user_store,
        request.app.state.settings.secret_key,
    )


def require_roles(*roles: Role) -> Callable[..., Identity]:
    """Dependency factory that only admits callers holding one of ``roles``.

    Use in endpoints as ``Depends(require_roles(Role.ORGANIZER))``.
    """

    def _role_dependency(current_user: Identity = Depends(get_current_user)) -> Identity:
        authorize(current_user, roles)
        return current_user

    return _role_dependency


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    Returns the 16-byte random salt and the derived key, both in hex,
    separated by ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored ``salt$hash`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
