"""
Pydantic models for event data.

``EventCreate`` and ``EventUpdate`` describe request bodies,
``EventRead`` the full event including its participants, and
``EventSummary`` the reduced view returned after a registration.  Date
and time are opaque strings and are not parsed.

``EventUpdate`` distinguishes between a field that was omitted and one
sent as ``null``: only fields present in the request are applied, and
``capacity: null`` is the explicit way to make an event unlimited.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class EventBase(BaseModel):
    title: Optional[str] = Field(None, examples=["Python Meetup"])
    description: Optional[str] = Field(None, examples=["Monthly community meetup"])
    date: Optional[str] = Field(None, examples=["2026-03-15"])
    time: Optional[str] = Field(None, examples=["10:00"])
    location: Optional[str] = Field(None, examples=["Virtual Room 1"])
    capacity: Optional[int] = Field(
        None,
        strict=True,
        examples=[50],
        description="Maximum number of participants; omit for unlimited",
    )


class EventCreate(EventBase):
    """Schema for creating an event."""
    pass


class EventUpdate(EventBase):
    """Schema for updating an event.

    All fields are optional; only provided fields will be updated.
    """
    pass


class ParticipantRead(BaseModel):
    user_id: str
    name: str
    email: str
    registered_at: datetime

    model_config = {
        "from_attributes": True,
    }


class EventRead(BaseModel):
    """Schema for reading an event from the API."""

    id: str
    title: str
    description: str
    date: str
    time: str
    location: str
    capacity: Optional[int] = None
    organizer_id: str
    participants: List[ParticipantRead] = []
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class EventSummary(BaseModel):
    """Confirmation view of the event a user just registered for."""

    id: str
    title: str
    date: str
    time: str

    model_config = {
        "from_attributes": True,
    }


class EventListResponse(BaseModel):
    events: List[EventRead]


class EventDetailResponse(BaseModel):
    event: EventRead


class EventMessageResponse(BaseModel):
    message: str
    event: EventRead


class RegistrationResponse(BaseModel):
    message: str
    event: EventSummary


class MessageResponse(BaseModel):
    message: str
