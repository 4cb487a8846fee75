"""
In-memory storage layer.

``Store`` is the key/value contract (get/put/update/delete by key, plus
listing) that both stores implement.  Services take ``UserStore`` and
``EventStore`` directly because they also need the email index and the
per-event locks, which the contract does not cover.  The in-memory stores keep
records in insertion order and guard them with a re-entrant collection
lock.

Records are copied on the way in and on the way out.  A caller can
therefore never observe, or accidentally mutate, a half-applied write:
changes become visible only when the complete record is ``put`` back.

``EventStore`` additionally hands out one lock per event.  Operations
that read an event, check a rule and write it back (registration,
update, delete) hold that lock for the whole sequence.
"""

import copy
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from .errors import ConflictError
from ..models import Event, User

V = TypeVar("V")


class Store(ABC, Generic[V]):
    """Key/value store contract used by the services."""

    @abstractmethod
    def get(self, key: str) -> Optional[V]:
        """Return a copy of the record stored under ``key`` or ``None``."""

    @abstractmethod
    def put(self, key: str, value: V) -> V:
        """Insert or replace the record stored under ``key``."""

    @abstractmethod
    def update(self, key: str, func: Callable[[V], V]) -> Optional[V]:
        """Atomically replace a record with ``func(record)``.

        Returns the new record, or ``None`` if ``key`` is unknown.
        """

    @abstractmethod
    def delete(self, key: str) -> Optional[V]:
        """Remove and return the record stored under ``key``."""

    @abstractmethod
    def list(self) -> List[V]:
        """Return copies of all records in insertion order."""


class InMemoryStore(Store[V]):
    """Dictionary-backed store guarded by a single ``RLock``."""

    def __init__(self, copier: Callable[[V], V] = copy.deepcopy) -> None:
        self._items: Dict[str, V] = {}
        self._lock = threading.RLock()
        self._copy = copier

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            item = self._items.get(key)
            return self._copy(item) if item is not None else None

    def put(self, key: str, value: V) -> V:
        with self._lock:
            self._items[key] = self._copy(value)
        return value

    def update(self, key: str, func: Callable[[V], V]) -> Optional[V]:
        with self._lock:
            current = self.get(key)
            if current is None:
                return None
            return self.put(key, func(current))

    def delete(self, key: str) -> Optional[V]:
        with self._lock:
            return self._items.pop(key, None)

    def list(self) -> List[V]:
        with self._lock:
            return [self._copy(item) for item in self._items.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class UserStore(InMemoryStore[User]):
    """User records indexed by identifier and by normalised email."""

    def __init__(self) -> None:
        super().__init__()
        self._by_email: Dict[str, str] = {}

    def get_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._by_email.get(email)
            return self.get(user_id) if user_id is not None else None

    def add(self, user: User) -> User:
        """Insert a new user, enforcing email uniqueness.

        The uniqueness check and the insert happen under the same lock,
        so two concurrent sign-ups with one email cannot both succeed.
        """
        with self._lock:
            if user.email in self._by_email:
                raise ConflictError("User with this email already exists")
            return self.put(user.id, user)

    def put(self, key: str, value: User) -> User:
        with self._lock:
            owner = self._by_email.get(value.email)
            if owner is not None and owner != key:
                raise ConflictError("User with this email already exists")
            previous = self._items.get(key)
            if previous is not None and previous.email != value.email:
                del self._by_email[previous.email]
            self._by_email[value.email] = key
            return super().put(key, value)

    def delete(self, key: str) -> Optional[User]:
        with self._lock:
            removed = super().delete(key)
            if removed is not None:
                self._by_email.pop(removed.email, None)
            return removed


class EventStore(InMemoryStore[Event]):
    """Event records plus a lock per event for check-then-act sequences."""

    def __init__(self) -> None:
        super().__init__(copier=Event.copy)
        self._event_locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, event_id: str) -> threading.Lock:
        with self._lock:
            lock = self._event_locks.get(event_id)
            if lock is None:
                lock = self._event_locks[event_id] = threading.Lock()
            return lock

    @contextmanager
    def locked(self, event_id: str) -> Iterator[None]:
        """Hold the lock of ``event_id`` for the duration of the block.

        The collection lock is only taken briefly to look up the
        per-event lock, so operations on different events never wait for
        each other.
        """
        lock = self._lock_for(event_id)
        try:
            with lock:
                yield
        finally:
            # Drop locks of unknown or deleted events.  Identifiers are
            # never reused, so a waiter still holding the old lock simply
            # finds the event gone.
            with self._lock:
                if event_id not in self._items:
                    self._event_locks.pop(event_id, None)
