"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable
from datetime import datetime
from functools import partial

from django.utils import timezone

from attendance.domain import (
    AdministrativeAuthority,
    ClaimLedger,
    Credential,
    CredentialId,
    Event,
    EventConfig,
    EventDetails,
    EventId,
    Identity,
)
from attendance.domain.errors import (
    CredentialNotFoundError,
    EventNotFoundError,
    InvalidCredentialIdError,
    InvalidEventConfigError,
    InvalidEventIdError,
    UnauthorizedError,
)
from attendance.notifications import event_created, notify
from attendance.services.authority_service import require_authority
from attendance.stores.interfaces import AttendanceStore

logger = logging.getLogger("attendance.events")

Clock = Callable[[], datetime]


def parse_event_id(event_id: str | EventId) -> EventId:
    if isinstance(event_id, EventId):
        return event_id
    try:
        return EventId.from_string(str(event_id))
    except ValueError as exc:
        raise InvalidEventIdError() from exc


def parse_credential_id(credential_id: str | CredentialId) -> CredentialId:
    if isinstance(credential_id, CredentialId):
        return credential_id
    try:
        return CredentialId.from_string(str(credential_id))
    except ValueError as exc:
        raise InvalidCredentialIdError() from exc


def _validate_config(config: EventConfig) -> None:
    if not config.name.strip():
        raise InvalidEventConfigError("Event name cannot be blank")
    if timezone.is_naive(config.date) or timezone.is_naive(config.expiration):
        raise InvalidEventConfigError("Event date and expiration must be timezone-aware")


class EventService:
    """Service for event administration and the read-only query surface."""

    def __init__(self, store: AttendanceStore, clock: Clock = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def create_event(
        self,
        authority: AdministrativeAuthority,
        config: EventConfig,
        secret: bytes,
    ) -> tuple[Event, ClaimLedger]:
        """Create an event together with its empty claim ledger.

        Raises:
            UnauthorizedError: If ``authority`` is not the live authority.
            InvalidEventConfigError: If the configuration is unusable.
        """
        with self._store.atomic():
            require_authority(self._store, authority)
            _validate_config(config)
            registry = self._store.get_registry(for_update=True)
            if registry is None:
                raise UnauthorizedError()

            event = Event.create(config, secret, now=self._clock())
            claim_ledger = ClaimLedger.for_event(event.id)
            self._store.add_event(event, claim_ledger)
            self._store.save_registry(registry.record_creation())
            self._store.on_commit(
                partial(
                    notify,
                    event_created,
                    sender=self.__class__,
                    event_id=event.id,
                    name=event.name,
                    date=event.date,
                    location=event.location,
                )
            )
        logger.info("Created event %s (%r)", event.id, event.name)
        return event, claim_ledger

    def update_event(
        self,
        authority: AdministrativeAuthority,
        event_id: str | EventId,
        config: EventConfig,
    ) -> Event:
        """Overwrite descriptive, capacity and expiration fields of an event.

        Attendance, claims and the secret digest are left untouched.

        Raises:
            UnauthorizedError: If ``authority`` is not the live authority.
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            InvalidEventConfigError: If the new capacity is below current attendance.
        """
        with self._store.atomic():
            require_authority(self._store, authority)
            _validate_config(config)
            event = self._get_for_update(event_id)
            if config.max_attendees.value < event.attendee_count:
                raise InvalidEventConfigError(
                    "Capacity cannot be lowered below the current attendee count"
                )
            updated = event.reconfigured(config, now=self._clock())
            self._store.save_event(updated)
        logger.info("Updated event %s", updated.id)
        return updated

    def rotate_secret(
        self,
        authority: AdministrativeAuthority,
        event_id: str | EventId,
        new_secret: bytes,
    ) -> Event:
        """Replace the secret digest of an event.

        Raises:
            UnauthorizedError: If ``authority`` is not the live authority.
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        with self._store.atomic():
            require_authority(self._store, authority)
            event = self._get_for_update(event_id)
            rotated = event.with_secret(new_secret, now=self._clock())
            self._store.save_event(rotated)
        logger.info("Rotated secret for event %s", rotated.id)
        return rotated

    def _get_for_update(self, event_id: str | EventId) -> Event:
        parsed = parse_event_id(event_id)
        event = self._store.get_event(parsed, for_update=True)
        if event is None:
            raise EventNotFoundError(str(parsed))
        return event

    def list_events(self) -> list[Event]:
        """Return all events, newest first."""
        return self._store.list_events()

    def get_event(self, event_id: str | EventId) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        parsed = parse_event_id(event_id)
        event = self._store.get_event(parsed)
        if event is None:
            raise EventNotFoundError(str(parsed))
        return event

    def event_details(self, event_id: str | EventId) -> EventDetails:
        return self.get_event(event_id).details()

    def is_active(self, event_id: str | EventId, now: datetime | None = None) -> bool:
        event = self.get_event(event_id)
        return event.is_active(now if now is not None else self._clock())

    def has_claimed(self, event_id: str | EventId, identity: Identity) -> bool:
        """Return whether ``identity`` already holds a credential for the event.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self.get_event(event_id)
        return self._store.has_claimed(event.id, identity)

    def get_credential(self, credential_id: str | CredentialId) -> Credential:
        """Return a credential by ID.

        Raises:
            InvalidCredentialIdError: If the credential_id is not a valid UUID.
            CredentialNotFoundError: If the credential does not exist.
        """
        parsed = parse_credential_id(credential_id)
        credential = self._store.get_credential(parsed)
        if credential is None:
            raise CredentialNotFoundError(str(parsed))
        return credential

    def list_credentials(self, owner: Identity) -> list[Credential]:
        return self._store.list_credentials(owner)
