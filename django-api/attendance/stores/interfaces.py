"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.

A store is the ledger the admission logic leans on: everything done inside
one ``atomic()`` block commits or rolls back as a unit, and entities read
with ``for_update=True`` stay locked against concurrent writers until the
block exits.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractContextManager

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


class AttendanceStore(ABC):
    """Interface for attendance persistence operations."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager delimiting one all-or-nothing unit of work."""
        ...

    @abstractmethod
    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the current unit of work has committed."""
        ...

    @abstractmethod
    def get_registry(self, *, for_update: bool = False) -> EventRegistry | None:
        """Return the registry, or None before initialization."""
        ...

    @abstractmethod
    def save_registry(self, registry: EventRegistry) -> None:
        ...

    @abstractmethod
    def get_authority(self, authority_id: AuthorityId) -> AdministrativeAuthority | None:
        """Return the stored authority by ID, or None if not found."""
        ...

    @abstractmethod
    def save_authority(self, authority: AdministrativeAuthority) -> None:
        """Insert or replace the stored authority."""
        ...

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def add_event(self, event: Event, claim_ledger: ClaimLedger) -> None:
        """Insert a new event together with its empty claim ledger."""
        ...

    @abstractmethod
    def save_event(self, event: Event) -> None:
        """Overwrite the mutable fields of an existing event."""
        ...

    @abstractmethod
    def get_claim_ledger(
        self, event_id: EventId, *, for_update: bool = False
    ) -> ClaimLedger | None:
        """Return the claim ledger tracking an event, or None if not found."""
        ...

    @abstractmethod
    def has_claimed(self, event_id: EventId, identity: Identity) -> bool:
        ...

    @abstractmethod
    def add_claim(self, claim_ledger: ClaimLedger, identity: Identity) -> None:
        """Record ``identity`` as a claimant in the given ledger."""
        ...

    @abstractmethod
    def add_credential(self, credential: Credential) -> None:
        ...

    @abstractmethod
    def get_credential(self, credential_id: CredentialId) -> Credential | None:
        """Return a credential by ID, or None if not found."""
        ...

    @abstractmethod
    def list_credentials(self, owner: Identity) -> list[Credential]:
        """Return credentials owned by an identity, newest first."""
        ...
