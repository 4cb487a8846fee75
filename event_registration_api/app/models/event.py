"""
Event and participant models
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional

from ..core.clock import utcnow


@dataclass(frozen=True)
class Participant:
    """Snapshot of a user's identity taken when they registered.

    The name and email are copied, not looked up, so the record keeps
    what the user looked like at registration time.
    """

    user_id: str
    name: str
    email: str
    registered_at: datetime


@dataclass
class Event:
    id: str
    title: str
    description: str
    date: str
    time: str
    location: str
    organizer_id: str
    # ``None`` means the event accepts any number of participants.
    capacity: Optional[int] = None
    participants: List[Participant] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def has_participant(self, user_id: str) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def is_full(self) -> bool:
        return self.capacity is not None and len(self.participants) >= self.capacity

    def copy(self) -> "Event":
        # Participants are frozen, so copying the list is enough.
        return replace(self, participants=list(self.participants))
