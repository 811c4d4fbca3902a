"""Django ORM implementation of the AttendanceStore.

The services always read with ``for_update=True`` from within ``atomic()``.
On PostgreSQL and MySQL that takes row locks through ``select_for_update``.
SQLite ignores ``select_for_update``; there the settings open every
transaction with ``BEGIN IMMEDIATE``, which holds the database write lock for
the whole unit of work and queues concurrent writers behind it.
"""

from collections.abc import Callable
from contextlib import AbstractContextManager

from django.db import transaction

from attendance import models as orm
from attendance.domain import (
    AdministrativeAuthority,
    AuthorityId,
    Capacity,
    ClaimLedger,
    Credential,
    CredentialId,
    Event,
    EventId,
    EventRegistry,
    Identity,
    SecretDigest,
)
from attendance.stores.interfaces import AttendanceStore


def _to_event(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        name=row.name,
        description=row.description,
        location=row.location,
        date=row.date,
        image_url=row.image_url,
        expiration=row.expiration,
        max_attendees=Capacity(row.max_attendees),
        secret_digest=SecretDigest(bytes(row.secret_digest)),
        attendee_count=row.attendee_count,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_credential(row: orm.Credential) -> Credential:
    return Credential(
        id=CredentialId(row.id),
        event_id=EventId(row.event_id),
        owner=Identity(row.owner),
        serial_number=row.serial_number,
        name=row.name,
        description=row.description,
        image_url=row.image_url,
        date=row.date,
        location=row.location,
        issued_at=row.issued_at,
    )


class DjangoAttendanceStore(AttendanceStore):
    """Relational attendance store using Django ORM."""

    def __init__(self, using: str | None = None) -> None:
        self._using = using

    def atomic(self) -> AbstractContextManager[None]:
        return transaction.atomic(using=self._using)

    def on_commit(self, callback: Callable[[], None]) -> None:
        transaction.on_commit(callback, using=self._using)

    def _manager(self, model):
        return model._default_manager.db_manager(self._using)

    def get_registry(self, *, for_update: bool = False) -> EventRegistry | None:
        qs = self._manager(orm.EventRegistry).filter(pk=orm.EventRegistry.SINGLETON_ID)
        if for_update:
            qs = qs.select_for_update()
        row = qs.first()
        if row is None:
            return None
        return EventRegistry(event_count=row.event_count)

    def save_registry(self, registry: EventRegistry) -> None:
        self._manager(orm.EventRegistry).update_or_create(
            pk=orm.EventRegistry.SINGLETON_ID,
            defaults={"event_count": registry.event_count},
        )

    def get_authority(self, authority_id: AuthorityId) -> AdministrativeAuthority | None:
        row = self._manager(orm.AdministrativeAuthority).filter(pk=authority_id.value).first()
        if row is None:
            return None
        return AdministrativeAuthority(
            id=AuthorityId(row.id), holder=Identity(row.holder), nonce=row.nonce
        )

    def save_authority(self, authority: AdministrativeAuthority) -> None:
        self._manager(orm.AdministrativeAuthority).update_or_create(
            pk=authority.id.value,
            defaults={"holder": authority.holder.value, "nonce": authority.nonce},
        )

    def list_events(self) -> list[Event]:
        return [_to_event(row) for row in self._manager(orm.Event).order_by("-created_at")]

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        qs = self._manager(orm.Event).filter(pk=event_id.value)
        if for_update:
            qs = qs.select_for_update()
        row = qs.first()
        return _to_event(row) if row is not None else None

    def add_event(self, event: Event, claim_ledger: ClaimLedger) -> None:
        with self.atomic():
            row = self._manager(orm.Event).create(
                id=event.id.value,
                name=event.name,
                description=event.description,
                location=event.location,
                date=event.date,
                image_url=event.image_url,
                expiration=event.expiration,
                max_attendees=event.max_attendees.value,
                attendee_count=event.attendee_count,
                secret_digest=event.secret_digest.value,
                created_at=event.created_at,
                updated_at=event.updated_at,
            )
            self._manager(orm.ClaimLedger).create(id=claim_ledger.id, event=row)

    def save_event(self, event: Event) -> None:
        row = self._manager(orm.Event).get(pk=event.id.value)
        row.name = event.name
        row.description = event.description
        row.location = event.location
        row.date = event.date
        row.image_url = event.image_url
        row.expiration = event.expiration
        row.max_attendees = event.max_attendees.value
        row.attendee_count = event.attendee_count
        row.secret_digest = event.secret_digest.value
        row.updated_at = event.updated_at
        # save() rather than update() so post_save receivers see the change.
        row.save(using=self._using)

    def get_claim_ledger(
        self, event_id: EventId, *, for_update: bool = False
    ) -> ClaimLedger | None:
        qs = self._manager(orm.ClaimLedger).filter(event_id=event_id.value)
        if for_update:
            qs = qs.select_for_update()
        row = qs.first()
        if row is None:
            return None
        claimants = self._manager(orm.Claim).filter(ledger=row).values_list(
            "identity", flat=True
        )
        return ClaimLedger(
            id=row.id,
            event_id=EventId(row.event_id),
            claimants=frozenset(Identity(value) for value in claimants),
        )

    def has_claimed(self, event_id: EventId, identity: Identity) -> bool:
        return self._manager(orm.Claim).filter(
            ledger__event_id=event_id.value, identity=identity.value
        ).exists()

    def add_claim(self, claim_ledger: ClaimLedger, identity: Identity) -> None:
        self._manager(orm.Claim).create(ledger_id=claim_ledger.id, identity=identity.value)

    def add_credential(self, credential: Credential) -> None:
        self._manager(orm.Credential).create(
            id=credential.id.value,
            event_id=credential.event_id.value,
            owner=credential.owner.value,
            serial_number=credential.serial_number,
            name=credential.name,
            description=credential.description,
            image_url=credential.image_url,
            date=credential.date,
            location=credential.location,
            issued_at=credential.issued_at,
        )

    def get_credential(self, credential_id: CredentialId) -> Credential | None:
        row = self._manager(orm.Credential).filter(pk=credential_id.value).first()
        return _to_credential(row) if row is not None else None

    def list_credentials(self, owner: Identity) -> list[Credential]:
        rows = self._manager(orm.Credential).filter(owner=owner.value).order_by("-issued_at")
        return [_to_credential(row) for row in rows]
