"""
Event endpoints for API v1.

Any authenticated user may list and read events and register for them.
Creating, updating and deleting require the ``organizer`` role, and
updates and deletes are further restricted to the organizer who created
the event (checked by ``EventService``).
"""

from fastapi import APIRouter, Depends, Path, status

from event_registration_api.app.api.deps import get_services
from event_registration_api.app.core.security import Identity, get_current_user, require_roles
from event_registration_api.app.models import Role
from event_registration_api.app.schemas.event import (
    EventCreate,
    EventDetailResponse,
    EventListResponse,
    EventMessageResponse,
    EventUpdate,
    MessageResponse,
    RegistrationResponse,
)
from event_registration_api.app.services.container import ServiceContainer

router = APIRouter()


@router.get("", response_model=EventListResponse)
async def list_events(
    current_user: Identity = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
) -> EventListResponse:
    return EventListResponse(events=services.events.list_events())


@router.post("", response_model=EventMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: EventCreate,
    current_user: Identity = Depends(require_roles(Role.ORGANIZER)),
    services: ServiceContainer = Depends(get_services),
) -> EventMessageResponse:
    """Create a new event owned by the calling organizer.

    ``capacity`` is optional; without it the event accepts any number
    of participants.
    """
    created = services.events.create_event(event, current_user)
    return EventMessageResponse(message="Event created successfully", event=created)


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: str = Path(..., description="ID of the event"),
    current_user: Identity = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
) -> EventDetailResponse:
    return EventDetailResponse(event=services.events.get_event(event_id))


@router.put("/{event_id}", response_model=EventMessageResponse)
async def update_event(
    updates: EventUpdate,
    event_id: str = Path(..., description="ID of the event"),
    current_user: Identity = Depends(require_roles(Role.ORGANIZER)),
    services: ServiceContainer = Depends(get_services),
) -> EventMessageResponse:
    """Update an event.

    Partial updates are supported; unspecified fields remain unchanged.
    Send ``"capacity": null`` to remove the participant limit.
    """
    updated = services.events.update_event(event_id, current_user, updates)
    return EventMessageResponse(message="Event updated successfully", event=updated)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str = Path(..., description="ID of the event"),
    current_user: Identity = Depends(require_roles(Role.ORGANIZER)),
    services: ServiceContainer = Depends(get_services),
) -> MessageResponse:
    """Delete an event together with its participant list."""
    services.events.delete_event(event_id, current_user)
    return MessageResponse(message="Event deleted successfully")


@router.post("/{event_id}/register", response_model=RegistrationResponse)
async def register_for_event(
    event_id: str = Path(..., description="ID of the event"),
    current_user: Identity = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
) -> RegistrationResponse:
    """Register the caller as a participant.

    Returns 404 for an unknown event, 409 if the caller is already
    registered and 400 if the event is full.  The confirmation email is
    sent in the background and does not affect the response.
    """
    summary = services.registrations.register(event_id, current_user)
    return RegistrationResponse(message="Successfully registered for the event", event=summary)
