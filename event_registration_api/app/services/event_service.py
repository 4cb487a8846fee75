"""
Business logic for events.

``EventService`` implements event CRUD against an injected
``EventStore``.  Only organizers reach these methods for writes (the
role gate lives in the API layer), and only the organizer who created
an event may update or delete it; that ownership rule is enforced
here.  Updates and deletes run under the event's lock so they are
serialised with concurrent registrations for the same event.
"""

import logging
import uuid
from typing import List

from ..core.clock import Clock, utcnow
from ..core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..core.security import Identity
from ..core.store import EventStore
from ..models import Event
from ..schemas.event import EventCreate, EventRead, EventUpdate
from .validation import validate_event, validate_event_patch

logger = logging.getLogger(__name__)

# Text fields whose values are stored trimmed.
_TRIMMED_FIELDS = ("title", "description", "location")


def _ensure_owner(event: Event, caller: Identity, action: str) -> None:
    if event.organizer_id != caller.id:
        raise ForbiddenError(f"Access denied. Only the event organizer can {action} this event.")


class EventService:
    """Service for managing events."""

    def __init__(self, events: EventStore, clock: Clock = utcnow) -> None:
        self._events = events
        self._clock = clock

    def create_event(self, data: EventCreate, current_user: Identity) -> EventRead:
        """Create an event owned by ``current_user``."""
        fields = data.model_dump()
        errors = validate_event(fields)
        if errors:
            raise ValidationError(errors)
        now = self._clock()
        event = Event(
            id=str(uuid.uuid4()),
            title=data.title.strip(),
            description=data.description.strip(),
            date=data.date,
            time=data.time,
            location=data.location.strip(),
            capacity=data.capacity,
            organizer_id=current_user.id,
            created_at=now,
            updated_at=now,
        )
        self._events.put(event.id, event)
        logger.info("User %s created event %s ('%s')", current_user.id, event.id, event.title)
        return EventRead.model_validate(event)

    def list_events(self) -> List[EventRead]:
        """Return all events in creation order."""
        return [EventRead.model_validate(event) for event in self._events.list()]

    def get_event(self, event_id: str) -> EventRead:
        event = self._events.get(event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return EventRead.model_validate(event)

    def update_event(self, event_id: str, current_user: Identity, updates: EventUpdate) -> EventRead:
        """Apply a partial update to an event owned by ``current_user``.

        Only fields present in the request are changed.  ``capacity``
        sent as ``None`` removes the limit; a capacity below the current
        number of participants is rejected.  ``updated_at`` is always
        refreshed.
        """
        patch = updates.model_dump(exclude_unset=True)
        with self._events.locked(event_id):
            event = self._events.get(event_id)
            if event is None:
                raise NotFoundError("Event not found")
            _ensure_owner(event, current_user, "update")
            errors = validate_event_patch(patch)
            if errors:
                raise ValidationError(errors)

            for field in ("title", "description", "date", "time", "location"):
                value = patch.get(field)
                if value is not None:
                    setattr(event, field, value.strip() if field in _TRIMMED_FIELDS else value)
            if "capacity" in patch:
                capacity = patch["capacity"]
                if capacity is not None and capacity < len(event.participants):
                    raise ConflictError("Capacity cannot be lower than the number of registered participants")
                event.capacity = capacity
            event.updated_at = self._clock()
            self._events.put(event.id, event)

        logger.info("User %s updated event %s (%s)", current_user.id, event_id, ", ".join(sorted(patch)) or "no fields")
        return EventRead.model_validate(event)

    def delete_event(self, event_id: str, current_user: Identity) -> None:
        """Delete an event owned by ``current_user`` along with its participants."""
        with self._events.locked(event_id):
            event = self._events.get(event_id)
            if event is None:
                raise NotFoundError("Event not found")
            _ensure_owner(event, current_user, "delete")
            self._events.delete(event_id)
        logger.info("User %s deleted event %s", current_user.id, event_id)
