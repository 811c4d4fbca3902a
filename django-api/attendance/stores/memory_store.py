"""In-memory implementation of the AttendanceStore.

Deterministic and thread-safe; used in tests and local tooling.

A single re-entrant lock is held for the whole of each unit of work, so
units of work are serialized. State is snapshotted when the outermost
``atomic()`` block opens and restored if the block raises.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from attendance.domain import (
    AdministrativeAuthority,
    AuthorityId,
    ClaimLedger,
    Credential,
    CredentialId,
    Event,
    EventId,
    EventRegistry,
    Identity,
)
from attendance.stores.interfaces import AttendanceStore


class InMemoryAttendanceStore(AttendanceStore):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0
        self._pending: list[Callable[[], None]] = []
        self._registry: EventRegistry | None = None
        self._authorities: dict[AuthorityId, AdministrativeAuthority] = {}
        self._events: dict[EventId, Event] = {}
        self._ledgers: dict[EventId, ClaimLedger] = {}
        self._credentials: dict[CredentialId, Credential] = {}

    @contextmanager
    def atomic(self) -> Iterator[None]:
        callbacks: list[Callable[[], None]] = []
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                snapshot = self._snapshot()
            self._depth += 1
            try:
                yield
            except BaseException:
                if outermost:
                    self._restore(snapshot)
                    self._pending.clear()
                raise
            finally:
                self._depth -= 1
            if outermost:
                callbacks, self._pending = self._pending, []
        for callback in callbacks:
            callback()

    def on_commit(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._depth:
                self._pending.append(callback)
                return
        callback()

    def _snapshot(self) -> tuple:
        return (
            self._registry,
            dict(self._authorities),
            dict(self._events),
            dict(self._ledgers),
            dict(self._credentials),
        )

    def _restore(self, snapshot: tuple) -> None:
        (
            self._registry,
            self._authorities,
            self._events,
            self._ledgers,
            self._credentials,
        ) = snapshot

    def get_registry(self, *, for_update: bool = False) -> EventRegistry | None:
        with self._lock:
            return self._registry

    def save_registry(self, registry: EventRegistry) -> None:
        with self._lock:
            self._registry = registry

    def get_authority(self, authority_id: AuthorityId) -> AdministrativeAuthority | None:
        with self._lock:
            return self._authorities.get(authority_id)

    def save_authority(self, authority: AdministrativeAuthority) -> None:
        with self._lock:
            self._authorities[authority.id] = authority

    def list_events(self) -> list[Event]:
        with self._lock:
            events = list(self._events.values())
        # Insertion order breaks ties between identical timestamps.
        return list(reversed(sorted(events, key=lambda e: e.created_at)))

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def add_event(self, event: Event, claim_ledger: ClaimLedger) -> None:
        with self._lock:
            if event.id in self._events:
                raise ValueError(f"Event {event.id} already exists")
            self._events[event.id] = event
            self._ledgers[event.id] = claim_ledger

    def save_event(self, event: Event) -> None:
        with self._lock:
            current = self._events.get(event.id)
            if current is None:
                raise KeyError(str(event.id))
            if event.attendee_count > event.max_attendees.value:
                raise ValueError("attendee_count cannot exceed max_attendees")
            if event.attendee_count < current.attendee_count:
                raise ValueError("attendee_count cannot decrease")
            self._events[event.id] = event

    def get_claim_ledger(
        self, event_id: EventId, *, for_update: bool = False
    ) -> ClaimLedger | None:
        with self._lock:
            return self._ledgers.get(event_id)

    def has_claimed(self, event_id: EventId, identity: Identity) -> bool:
        with self._lock:
            ledger = self._ledgers.get(event_id)
            return ledger is not None and ledger.has_claimed(identity)

    def add_claim(self, claim_ledger: ClaimLedger, identity: Identity) -> None:
        with self._lock:
            current = self._ledgers[claim_ledger.event_id]
            if current.has_claimed(identity):
                raise ValueError(f"{identity} already recorded in claim ledger")
            self._ledgers[claim_ledger.event_id] = current.with_claimant(identity)

    def add_credential(self, credential: Credential) -> None:
        with self._lock:
            for existing in self._credentials.values():
                if (
                    existing.event_id == credential.event_id
                    and existing.serial_number == credential.serial_number
                ):
                    raise ValueError("serial_number already issued for event")
            self._credentials[credential.id] = credential

    def get_credential(self, credential_id: CredentialId) -> Credential | None:
        with self._lock:
            return self._credentials.get(credential_id)

    def list_credentials(self, owner: Identity) -> list[Credential]:
        with self._lock:
            owned = [c for c in self._credentials.values() if c.owner == owner]
        return sorted(owned, key=lambda c: c.issued_at, reverse=True)
