"""Integration tests for the Django ORM store.

Run with: pytest tests/test_django_store.py -v
"""

from concurrent.futures import ThreadPoolExecutor
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import IntegrityError, connection, transaction

from attendance import models as orm
from attendance.domain import Capacity, Identity
from attendance.domain.errors import AlreadyClaimedError, CapacityExceededError
from attendance.services import AdmissionService, AuthorityService, EventService
from attendance.stores.django_store import DjangoAttendanceStore
from factories import SECRET, make_config

ALICE = Identity("alice")
BOB = Identity("bob")


@pytest.fixture
def db_store() -> DjangoAttendanceStore:
    return DjangoAttendanceStore()


@pytest.fixture
def db_authority(db_store):
    return AuthorityService(db_store).initialize(Identity("deployer"))


@pytest.fixture
def db_event_service(db_store, clock) -> EventService:
    return EventService(db_store, clock=clock)


@pytest.fixture
def db_admission_service(db_store, clock) -> AdmissionService:
    return AdmissionService(db_store, clock=clock)


@pytest.mark.django_db
class TestDjangoAttendanceStore:
    def test_initialize_persists_registry_and_authority(self, db_store, db_authority):
        registry = orm.EventRegistry.objects.get()
        stored = orm.AdministrativeAuthority.objects.get(pk=db_authority.id.value)

        assert registry.event_count == 0
        assert stored.holder == "deployer"
        assert db_store.get_authority(db_authority.id) == db_authority

    def test_create_event_persists_event_and_ledger(self, db_event_service, db_authority):
        event, ledger = db_event_service.create_event(db_authority, make_config(), SECRET)

        row = orm.Event.objects.get(pk=event.id.value)
        assert row.claim_ledger.id == ledger.id
        assert bytes(row.secret_digest) == event.secret_digest.value
        assert orm.EventRegistry.objects.get().event_count == 1
        assert db_event_service.get_event(event.id) == event

    def test_admission_round_trip(self, db_event_service, db_admission_service, db_authority):
        event, _ = db_event_service.create_event(db_authority, make_config(), SECRET)

        credential = db_admission_service.admit(event.id, ALICE, SECRET)

        assert credential.serial_number == 1
        assert orm.Event.objects.get(pk=event.id.value).attendee_count == 1
        assert orm.Claim.objects.filter(identity="alice").count() == 1
        assert db_event_service.has_claimed(event.id, ALICE)
        assert db_event_service.get_credential(credential.id) == credential
        assert db_event_service.list_credentials(ALICE) == [credential]

    def test_claim_ledger_loads_claimants(self, db_store, db_event_service, db_admission_service, db_authority):
        event, _ = db_event_service.create_event(db_authority, make_config(), SECRET)
        db_admission_service.admit(event.id, ALICE, SECRET)
        db_admission_service.admit(event.id, BOB, SECRET)

        ledger = db_store.get_claim_ledger(event.id)

        assert ledger.claimants == frozenset({ALICE, BOB})

    def test_denials_leave_rows_untouched(self, db_event_service, db_admission_service, db_authority):
        event, _ = db_event_service.create_event(
            db_authority, make_config(max_attendees=Capacity(2)), SECRET
        )
        db_admission_service.admit(event.id, ALICE, SECRET)

        with pytest.raises(AlreadyClaimedError):
            db_admission_service.admit(event.id, ALICE, SECRET)
        db_admission_service.admit(event.id, BOB, SECRET)
        with pytest.raises(CapacityExceededError):
            db_admission_service.admit(event.id, Identity("carol"), SECRET)

        assert orm.Event.objects.get(pk=event.id.value).attendee_count == 2
        assert orm.Claim.objects.count() == 2
        assert orm.Credential.objects.count() == 2

    def test_full_event_reports_capacity_before_repeat_claim(
        self, db_event_service, db_admission_service, db_authority
    ):
        event, _ = db_event_service.create_event(
            db_authority, make_config(max_attendees=Capacity(1)), SECRET
        )
        db_admission_service.admit(event.id, ALICE, SECRET)

        with pytest.raises(CapacityExceededError):
            db_admission_service.admit(event.id, ALICE, SECRET)

    def test_duplicate_claim_rejected_by_database(self, db_store, db_event_service, db_authority):
        _, ledger = db_event_service.create_event(db_authority, make_config(), SECRET)
        db_store.add_claim(ledger, ALICE)

        with pytest.raises(IntegrityError), transaction.atomic():
            db_store.add_claim(ledger, ALICE)

    def test_capacity_constraint_enforced_by_database(self, db_store, db_event_service, db_authority, clock):
        event, _ = db_event_service.create_event(
            db_authority, make_config(max_attendees=Capacity(0)), SECRET
        )

        with pytest.raises(IntegrityError), transaction.atomic():
            db_store.save_event(event.with_attendee(clock()))

    def test_notifications_sent_after_commit(
        self,
        db_event_service,
        db_admission_service,
        db_authority,
        signal_log,
        django_capture_on_commit_callbacks,
    ):
        with django_capture_on_commit_callbacks(execute=True):
            event, _ = db_event_service.create_event(db_authority, make_config(), SECRET)
        with django_capture_on_commit_callbacks(execute=True):
            credential = db_admission_service.admit(event.id, ALICE, SECRET)

        assert [name for name, _ in signal_log] == ["event_created", "credential_minted"]
        assert signal_log[1][1]["credential_id"] == credential.id

    def test_rotated_secret_persists(self, db_event_service, db_admission_service, db_authority):
        event, _ = db_event_service.create_event(db_authority, make_config(), SECRET)
        db_event_service.rotate_secret(db_authority, event.id, b"new-pw")

        assert db_admission_service.admit(event.id, ALICE, b"new-pw").serial_number == 1


@pytest.mark.django_db(transaction=True)
class TestConcurrentAdmissions:
    """Claims from separate connections against one event."""

    def test_concurrent_admissions_never_oversubscribe(
        self, db_event_service, db_admission_service, db_authority
    ):
        event, _ = db_event_service.create_event(
            db_authority, make_config(max_attendees=Capacity(5)), SECRET
        )

        def attempt(index):
            try:
                credential = db_admission_service.admit(
                    event.id, Identity(f"user-{index}"), SECRET
                )
                return credential.serial_number
            except CapacityExceededError as exc:
                return exc.code.value
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, range(8)))

        serials = sorted(r for r in results if isinstance(r, int))
        assert serials == [1, 2, 3, 4, 5]
        assert results.count("CAPACITY_EXCEEDED") == 3
        assert orm.Event.objects.get(pk=event.id.value).attendee_count == 5
        assert orm.Credential.objects.filter(event_id=event.id.value).count() == 5


@pytest.mark.django_db
class TestInitializeCommand:
    def test_command_mints_authority(self):
        out = StringIO()
        call_command("initialize_attendance", "deployer", stdout=out)

        authority = orm.AdministrativeAuthority.objects.get()
        assert f"authority_id={authority.id}" in out.getvalue()
        assert f"nonce={authority.nonce}" in out.getvalue()

    def test_command_refuses_second_run(self):
        call_command("initialize_attendance", "deployer", stdout=StringIO())
        with pytest.raises(CommandError):
            call_command("initialize_attendance", "deployer", stdout=StringIO())
