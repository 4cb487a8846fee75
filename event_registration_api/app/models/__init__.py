"""
Domain records held by the in-memory stores.

These are plain dataclasses rather than Pydantic schemas: they are the
internal representation, while ``schemas`` defines what the API
exposes.
"""

from .event import Event, Participant
from .user import Role, User

__all__ = ["Event", "Participant", "Role", "User"]
