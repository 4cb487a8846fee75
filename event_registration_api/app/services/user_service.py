"""
Business logic for users.

``UserService`` creates accounts and checks login credentials against
the injected ``UserStore``.  Emails are trimmed and lower-cased before
they are stored or looked up, and only a PBKDF2 hash of the password is
kept.
"""

import logging
import uuid
from typing import Optional

from ..core.clock import Clock, utcnow
from ..core.errors import UnauthenticatedError, ValidationError
from ..core.security import hash_password, verify_password
from ..core.store import UserStore
from ..models import Role, User
from ..schemas.user import UserCreate, UserRead
from .validation import normalize_email, validate_registration

logger = logging.getLogger(__name__)


class UserService:
    """Service for creating and authenticating users."""

    def __init__(self, users: UserStore, password_min_length: int = 6, clock: Clock = utcnow) -> None:
        self._users = users
        self._password_min_length = password_min_length
        self._clock = clock

    def create_user(self, data: UserCreate) -> UserRead:
        """Register a new user.

        Input is validated before anything is written.  The role defaults
        to ``attendee`` when omitted.

        Raises
        ------
        ValidationError
            If the name, email, password or role are malformed.
        ConflictError
            If another user already uses the (normalised) email.
        """
        errors = validate_registration(
            data.name,
            data.email,
            data.password,
            data.role,
            password_min_length=self._password_min_length,
        )
        if errors:
            raise ValidationError(errors)

        user = User(
            id=str(uuid.uuid4()),
            name=data.name.strip(),
            email=normalize_email(data.email),
            password_hash=hash_password(data.password),
            role=Role(data.role) if data.role else Role.ATTENDEE,
            created_at=self._clock(),
        )
        self._users.add(user)
        logger.info("Registered %s %s", user.role.value, user.email)
        return UserRead.model_validate(user)

    def authenticate(self, email: Optional[str], password: Optional[str]) -> UserRead:
        """Check login credentials and return the matching user.

        Unknown emails and wrong passwords produce the same error so the
        response does not reveal which accounts exist.
        """
        if not email or not password:
            raise ValidationError(["Email and password are required"])
        user = self._users.get_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise UnauthenticatedError("Invalid email or password")
        return UserRead.model_validate(user)
