"""Admission service - runs the admission gates inside one storage transaction.

The event and its claim ledger are read with row locks, always in that
order, so two admissions for the same event are serialized by the store and
the second one sees the first one's writes. Nothing is written until every
gate has passed; a denial leaves the store exactly as it was.
"""

import logging
from datetime import datetime
from functools import partial

from django.utils import timezone

from attendance.domain import Credential, EventId, Identity
from attendance.domain import admission
from attendance.domain.errors import (
    AdmissionDenied,
    ClaimLedgerNotFoundError,
    EventNotFoundError,
)
from attendance.notifications import credential_minted, notify
from attendance.services.event_service import Clock, parse_event_id
from attendance.stores.interfaces import AttendanceStore

logger = logging.getLogger("attendance.admission")


class AdmissionService:
    """Service issuing credentials to identities that pass every gate."""

    def __init__(self, store: AttendanceStore, clock: Clock = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def admit(
        self,
        event_id: str | EventId,
        identity: Identity,
        secret: bytes,
        now: datetime | None = None,
    ) -> Credential:
        """Issue a credential for the event to ``identity``.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ClaimLedgerNotFoundError: If the event has no claim ledger.
            EventExpiredError: If ``now`` is past the event's expiration.
            CapacityExceededError: If the event is full.
            InvalidSecretError: If the secret does not match.
            AlreadyClaimedError: If ``identity`` already claimed this event.
        """
        parsed = parse_event_id(event_id)
        if now is None:
            now = self._clock()

        try:
            with self._store.atomic():
                event = self._store.get_event(parsed, for_update=True)
                if event is None:
                    raise EventNotFoundError(str(parsed))
                claim_ledger = self._store.get_claim_ledger(parsed, for_update=True)
                if claim_ledger is None:
                    raise ClaimLedgerNotFoundError(str(parsed))

                outcome = admission.admit(event, claim_ledger, identity, secret, now)
                credential = outcome.credential

                self._store.add_claim(claim_ledger, identity)
                self._store.save_event(outcome.event)
                self._store.add_credential(credential)
                self._store.on_commit(
                    partial(
                        notify,
                        credential_minted,
                        sender=self.__class__,
                        event_id=credential.event_id,
                        identity=credential.owner,
                        credential_id=credential.id,
                        serial_number=credential.serial_number,
                    )
                )
        except AdmissionDenied as exc:
            logger.info(
                "Admission denied event=%s identity=%s reason=%s",
                parsed,
                identity,
                exc.code.value,
            )
            raise

        logger.info(
            "Admission granted event=%s identity=%s serial=%d",
            parsed,
            identity,
            credential.serial_number,
        )
        return credential
