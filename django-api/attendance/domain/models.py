"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in attendance/models.py (persistence layer).
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Self

from attendance.domain.value_objects import (
    AuthorityId,
    Capacity,
    CredentialId,
    EventId,
    Identity,
    SecretDigest,
)


@dataclass(frozen=True)
class AdministrativeAuthority:
    """Capability token gating privileged mutation of events.

    A token is only honoured while its ``nonce`` matches the stored authority,
    so transferring it to a new holder invalidates every earlier copy.
    """

    id: AuthorityId
    holder: Identity
    nonce: uuid.UUID = field(repr=False)

    @classmethod
    def mint(cls, holder: Identity) -> Self:
        return cls(id=AuthorityId(uuid.uuid4()), holder=holder, nonce=uuid.uuid4())

    def moved_to(self, recipient: Identity) -> Self:
        return replace(self, holder=recipient, nonce=uuid.uuid4())


@dataclass(frozen=True)
class EventRegistry:
    """Process-wide count of created events."""

    event_count: int = 0

    def record_creation(self) -> Self:
        return replace(self, event_count=self.event_count + 1)


@dataclass(frozen=True)
class EventConfig:
    """Administrative configuration bundle for creating or updating an event."""

    name: str
    description: str
    location: str
    date: datetime
    image_url: str | None
    expiration: datetime
    max_attendees: Capacity


@dataclass(frozen=True)
class EventDetails:
    """Read-only view of an event consumed by metadata renderers."""

    name: str
    description: str
    location: str
    date: datetime
    image_url: str | None
    expiration: datetime
    max_attendees: int
    attendee_count: int


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    name: str
    description: str
    location: str
    date: datetime
    image_url: str | None
    expiration: datetime
    max_attendees: Capacity
    secret_digest: SecretDigest = field(repr=False)
    attendee_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(cls, config: EventConfig, secret: bytes, now: datetime) -> Self:
        return cls(
            id=EventId(uuid.uuid4()),
            name=config.name,
            description=config.description,
            location=config.location,
            date=config.date,
            image_url=config.image_url,
            expiration=config.expiration,
            max_attendees=config.max_attendees,
            secret_digest=SecretDigest.from_secret(secret),
            created_at=now,
            updated_at=now,
        )

    def is_active(self, now: datetime) -> bool:
        return now <= self.expiration

    def is_full(self) -> bool:
        return self.attendee_count >= self.max_attendees.value

    def details(self) -> EventDetails:
        return EventDetails(
            name=self.name,
            description=self.description,
            location=self.location,
            date=self.date,
            image_url=self.image_url,
            expiration=self.expiration,
            max_attendees=self.max_attendees.value,
            attendee_count=self.attendee_count,
        )

    def reconfigured(self, config: EventConfig, now: datetime) -> Self:
        return replace(
            self,
            name=config.name,
            description=config.description,
            location=config.location,
            date=config.date,
            image_url=config.image_url,
            expiration=config.expiration,
            max_attendees=config.max_attendees,
            updated_at=now,
        )

    def with_secret(self, secret: bytes, now: datetime) -> Self:
        return replace(
            self, secret_digest=SecretDigest.from_secret(secret), updated_at=now
        )

    def with_attendee(self, now: datetime) -> Self:
        return replace(self, attendee_count=self.attendee_count + 1, updated_at=now)


@dataclass(frozen=True)
class ClaimLedger:
    """Identities that have already claimed a credential for one event."""

    id: uuid.UUID
    event_id: EventId
    claimants: frozenset[Identity] = frozenset()

    @classmethod
    def for_event(cls, event_id: EventId) -> Self:
        return cls(id=uuid.uuid4(), event_id=event_id)

    def has_claimed(self, identity: Identity) -> bool:
        return identity in self.claimants

    def with_claimant(self, identity: Identity) -> Self:
        return replace(self, claimants=self.claimants | {identity})


@dataclass(frozen=True)
class Credential:
    """Proof-of-attendance record owned by the identity it was issued to."""

    id: CredentialId
    event_id: EventId
    owner: Identity
    serial_number: int
    name: str
    description: str
    image_url: str | None
    date: datetime
    location: str
    issued_at: datetime
