"""
Tests for event registration: capacity, uniqueness and confirmations
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from event_registration_api.app.core.errors import CapacityExceededError, ConflictError, NotFoundError
from event_registration_api.app.core.security import Identity
from event_registration_api.app.models import Role
from event_registration_api.app.services.notification_service import NotificationDispatcher
from event_registration_api.app.services.registration_service import RegistrationService


def make_attendees(count):
    return [
        Identity(id=f"user-{i}", name=f"User {i}", email=f"user{i}@example.com", role=Role.ATTENDEE)
        for i in range(count)
    ]


def test_register_returns_summary(registration_service, event_service, organizer, attendee, make_event_data):
    event = event_service.create_event(make_event_data(title="Meetup", capacity=3), organizer)

    summary = registration_service.register(event.id, attendee)

    assert summary.model_dump() == {"id": event.id, "title": "Meetup", "date": "2026-03-15", "time": "10:00"}
    participants = event_service.get_event(event.id).participants
    assert [(p.user_id, p.name, p.email) for p in participants] == [(attendee.id, attendee.name, attendee.email)]


def test_capacity_one_scenario(registration_service, event_service, organizer, make_event_data):
    """Second attendee is turned away and the first stays registered."""
    first, second = make_attendees(2)
    event = event_service.create_event(make_event_data(capacity=1), organizer)

    registration_service.register(event.id, first)
    with pytest.raises(CapacityExceededError, match="maximum number of participants"):
        registration_service.register(event.id, second)

    participants = event_service.get_event(event.id).participants
    assert [p.user_id for p in participants] == [first.id]


def test_duplicate_registration_is_rejected(registration_service, event_service, organizer, attendee, make_event_data):
    event = event_service.create_event(make_event_data(), organizer)
    registration_service.register(event.id, attendee)

    with pytest.raises(ConflictError, match="already registered"):
        registration_service.register(event.id, attendee)
    assert len(event_service.get_event(event.id).participants) == 1


def test_duplicate_checked_before_capacity(registration_service, event_service, organizer, attendee, make_event_data):
    event = event_service.create_event(make_event_data(capacity=1), organizer)
    registration_service.register(event.id, attendee)

    with pytest.raises(ConflictError) as exc_info:
        registration_service.register(event.id, attendee)
    assert not isinstance(exc_info.value, CapacityExceededError)


def test_register_unknown_event(registration_service, attendee):
    with pytest.raises(NotFoundError, match="Event not found"):
        registration_service.register("missing", attendee)


def test_organizer_may_register_for_own_event(registration_service, event_service, organizer, make_event_data):
    event = event_service.create_event(make_event_data(), organizer)
    registration_service.register(event.id, organizer)
    assert event_service.get_event(event.id).participants[0].user_id == organizer.id


def test_unlimited_event_accepts_everyone(registration_service, event_service, organizer, make_event_data):
    event = event_service.create_event(make_event_data(), organizer)
    for identity in make_attendees(25):
        registration_service.register(event.id, identity)
    assert len(event_service.get_event(event.id).participants) == 25


def test_concurrent_registrations_never_exceed_capacity(
    registration_service, event_service, organizer, make_event_data
):
    """Many simultaneous registrations fill the event exactly to capacity."""
    capacity = 5
    attendees = make_attendees(40)
    event = event_service.create_event(make_event_data(capacity=capacity), organizer)
    barrier = threading.Barrier(len(attendees))

    def attempt(identity):
        barrier.wait()
        try:
            registration_service.register(event.id, identity)
        except CapacityExceededError:
            return "full"
        return "registered"

    with ThreadPoolExecutor(max_workers=len(attendees)) as pool:
        results = list(pool.map(attempt, attendees))

    assert results.count("registered") == capacity
    assert results.count("full") == len(attendees) - capacity
    participants = event_service.get_event(event.id).participants
    assert len(participants) == capacity
    assert len({p.user_id for p in participants}) == capacity


def test_concurrent_duplicate_registrations(registration_service, event_service, organizer, attendee, make_event_data):
    """The same user racing with themselves is registered exactly once."""
    event = event_service.create_event(make_event_data(), organizer)
    attempts = 20
    barrier = threading.Barrier(attempts)

    def attempt(_):
        barrier.wait()
        try:
            registration_service.register(event.id, attendee)
        except ConflictError:
            return "duplicate"
        return "registered"

    with ThreadPoolExecutor(max_workers=attempts) as pool:
        results = list(pool.map(attempt, range(attempts)))

    assert results.count("registered") == 1
    assert len(event_service.get_event(event.id).participants) == 1


def test_registrations_across_events_are_independent(registration_service, event_service, organizer, make_event_data):
    events = [event_service.create_event(make_event_data(title=f"Event {i}", capacity=3), organizer) for i in range(4)]
    attendees = make_attendees(3)
    jobs = [(event.id, identity) for event in events for identity in attendees]

    with ThreadPoolExecutor(max_workers=12) as pool:
        list(pool.map(lambda job: registration_service.register(*job), jobs))

    for event in events:
        assert len(event_service.get_event(event.id).participants) == 3


def test_confirmation_is_sent(registration_service, event_service, dispatcher, notifier, organizer, attendee, make_event_data):
    event = event_service.create_event(make_event_data(title="Meetup"), organizer)
    registration_service.register(event.id, attendee)

    dispatcher.shutdown(wait=True)
    assert notifier.calls == [(attendee.email, attendee.name, "Meetup")]


@pytest.mark.parametrize("mode", ["raise", "fail"])
def test_notification_failure_does_not_affect_registration(
    event_store, event_service, clock, make_notifier, organizer, attendee, make_event_data, mode
):
    """A notifier that raises or reports failure leaves the registration in place."""
    notifier = make_notifier(mode=mode)
    dispatcher = NotificationDispatcher(max_workers=1)
    service = RegistrationService(event_store, notifier, dispatcher, clock=clock)
    event = event_service.create_event(make_event_data(), organizer)

    summary = service.register(event.id, attendee)
    dispatcher.shutdown(wait=True)

    assert summary.id == event.id
    assert len(notifier.calls) == 1
    assert [p.user_id for p in event_service.get_event(event.id).participants] == [attendee.id]


class BlockingNotifier:
    """Notifier whose sends wait until ``release`` is set."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = []

    def send_registration_email(self, email, name, event_title):
        self.calls.append(email)
        self.started.set()
        self.release.wait(timeout=10)
        return True


def test_slow_confirmation_does_not_block_registrations(event_store, event_service, clock, organizer, make_event_data):
    """A send still in progress never holds up the next registration for the same event."""
    first, second = make_attendees(2)
    notifier = BlockingNotifier()
    dispatcher = NotificationDispatcher(max_workers=1)
    service = RegistrationService(event_store, notifier, dispatcher, clock=clock)
    event = event_service.create_event(make_event_data(capacity=5), organizer)

    try:
        with ThreadPoolExecutor(max_workers=2) as pool:
            first_result = pool.submit(service.register, event.id, first)
            assert notifier.started.wait(timeout=5)
            assert first_result.result(timeout=2).id == event.id

            second_result = pool.submit(service.register, event.id, second)
            assert second_result.result(timeout=2).id == event.id

            assert not notifier.release.is_set()
            participants = event_service.get_event(event.id).participants
            assert [p.user_id for p in participants] == [first.id, second.id]
    finally:
        notifier.release.set()
        dispatcher.shutdown(wait=True)

    assert notifier.calls == [first.email, second.email]
