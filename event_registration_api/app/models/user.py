"""
User model
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..core.clock import utcnow


class Role(str, Enum):
    ORGANIZER = "organizer"
    ATTENDEE = "attendee"

    @classmethod
    def values(cls) -> list:
        return [role.value for role in cls]


@dataclass
class User:
    id: str
    name: str
    email: str
    # PBKDF2 ``salt$hash`` string, never the plain password.
    password_hash: str
    role: Role = Role.ATTENDEE
    created_at: datetime = field(default_factory=utcnow)
