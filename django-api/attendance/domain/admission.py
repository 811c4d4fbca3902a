"""Claim admission: the gates an identity passes to receive a credential.

Gates run in a fixed order and the first failure decides the denial:

1. liveness  -> EventExpiredError
2. capacity  -> CapacityExceededError
3. secret    -> InvalidSecretError
4. duplicate -> AlreadyClaimedError

Every gate is checked before anything is written, so a denied admission
never changes the event or the ledger. The functions here are pure; the
caller is responsible for persisting the outcome atomically.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from attendance.domain.errors import (
    AlreadyClaimedError,
    CapacityExceededError,
    EventExpiredError,
    InvalidSecretError,
)
from attendance.domain.models import ClaimLedger, Credential, Event
from attendance.domain.value_objects import CredentialId, Identity


@dataclass(frozen=True)
class Admission:
    """Post-commit state of an event, its ledger and the issued credential."""

    event: Event
    claim_ledger: ClaimLedger
    credential: Credential


def check_gates(
    event: Event,
    claim_ledger: ClaimLedger,
    identity: Identity,
    secret: bytes,
    now: datetime,
) -> None:
    """Raise the first applicable ``AdmissionDenied``, or return None."""
    if not event.is_active(now):
        raise EventExpiredError()
    if event.is_full():
        raise CapacityExceededError()
    if not event.secret_digest.matches(secret):
        raise InvalidSecretError()
    if claim_ledger.has_claimed(identity):
        raise AlreadyClaimedError()


def admit(
    event: Event,
    claim_ledger: ClaimLedger,
    identity: Identity,
    secret: bytes,
    now: datetime,
) -> Admission:
    if claim_ledger.event_id != event.id:
        raise ValueError("Claim ledger does not track this event")

    check_gates(event, claim_ledger, identity, secret, now)

    admitted_event = event.with_attendee(now)
    credential = Credential(
        id=CredentialId(uuid.uuid4()),
        event_id=event.id,
        owner=identity,
        serial_number=admitted_event.attendee_count,
        name=event.name,
        description=event.description,
        image_url=event.image_url,
        date=event.date,
        location=event.location,
        issued_at=now,
    )
    return Admission(
        event=admitted_event,
        claim_ledger=claim_ledger.with_claimant(identity),
        credential=credential,
    )
