"""
Business logic for event registrations.

``RegistrationService.register`` is where the capacity and uniqueness
rules are enforced.  The sequence "event exists, caller not yet
registered, capacity not reached, append participant" runs as one unit
under the event's lock from ``EventStore.locked``, so concurrent
registrations for the same event can never push it past its capacity.
Registrations for different events do not contend with each other.

Once the participant is stored and the lock released, a confirmation
email is handed to the ``NotificationDispatcher``.  Its outcome is
never reported back to the caller and never undoes the registration.
"""

import logging

from ..core.clock import Clock, utcnow
from ..core.errors import CapacityExceededError, ConflictError, NotFoundError
from ..core.security import Identity
from ..core.store import EventStore
from ..models import Participant
from ..schemas.event import EventSummary
from .notification_service import NotificationDispatcher, Notifier

logger = logging.getLogger(__name__)


class RegistrationService:
    """Service for registering users as event participants."""

    def __init__(
        self,
        events: EventStore,
        notifier: Notifier,
        dispatcher: NotificationDispatcher,
        clock: Clock = utcnow,
    ) -> None:
        self._events = events
        self._notifier = notifier
        self._dispatcher = dispatcher
        self._clock = clock

    def register(self, event_id: str, current_user: Identity) -> EventSummary:
        """Add ``current_user`` to the participants of an event.

        Any authenticated user may register, organizers included (even
        for their own events).

        Returns
        -------
        EventSummary
            The id, title, date and time of the event.

        Raises
        ------
        NotFoundError
            If the event does not exist.
        ConflictError
            If the user is already a participant.
        CapacityExceededError
            If the event is full.
        """
        with self._events.locked(event_id):
            event = self._events.get(event_id)
            if event is None:
                raise NotFoundError("Event not found")
            if event.has_participant(current_user.id):
                raise ConflictError("You are already registered for this event")
            if event.is_full():
                raise CapacityExceededError("Event has reached maximum number of participants")

            event.participants.append(
                Participant(
                    user_id=current_user.id,
                    name=current_user.name,
                    email=current_user.email,
                    registered_at=self._clock(),
                )
            )
            self._events.put(event.id, event)

        logger.info(
            "User %s registered for event %s (%d/%s)",
            current_user.id,
            event.id,
            len(event.participants),
            event.capacity if event.capacity is not None else "unlimited",
        )
        self._dispatcher.dispatch(
            self._notifier.send_registration_email,
            current_user.email,
            current_user.name,
            event.title,
        )
        return EventSummary.model_validate(event)
