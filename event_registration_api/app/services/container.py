"""
Wiring of stores and services.

``build_services`` creates one instance of every store and service for
an application.  ``create_app`` stores the container on
``app.state.services``; endpoints reach it through the dependencies in
``api.deps``.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.clock import Clock, utcnow
from ..core.config import Settings
from ..core.store import EventStore, UserStore
from .event_service import EventService
from .notification_service import EmailNotifier, NotificationDispatcher, Notifier
from .registration_service import RegistrationService
from .user_service import UserService


@dataclass
class ServiceContainer:
    user_store: UserStore
    event_store: EventStore
    dispatcher: NotificationDispatcher
    users: UserService
    events: EventService
    registrations: RegistrationService


def build_services(settings: Settings, notifier: Optional[Notifier] = None, clock: Clock = utcnow) -> ServiceContainer:
    """Create stores and services for one application instance.

    ``notifier`` defaults to an ``EmailNotifier`` configured from
    ``settings``; tests pass a fake.
    """
    user_store = UserStore()
    event_store = EventStore()
    dispatcher = NotificationDispatcher(max_workers=settings.notification_workers)
    return ServiceContainer(
        user_store=user_store,
        event_store=event_store,
        dispatcher=dispatcher,
        users=UserService(user_store, password_min_length=settings.password_min_length, clock=clock),
        events=EventService(event_store, clock=clock),
        registrations=RegistrationService(
            event_store,
            notifier or EmailNotifier(settings),
            dispatcher,
            clock=clock,
        ),
    )
