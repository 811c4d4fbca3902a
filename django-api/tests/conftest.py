"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from attendance.domain import Identity
from attendance.services import AdmissionService, AuthorityService, EventService
from attendance.stores import InMemoryAttendanceStore

from factories import SECRET, START, FixedClock, make_config


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture
def store() -> InMemoryAttendanceStore:
    return InMemoryAttendanceStore()


@pytest.fixture
def authority_service(store) -> AuthorityService:
    return AuthorityService(store)


@pytest.fixture
def event_service(store, clock) -> EventService:
    return EventService(store, clock=clock)


@pytest.fixture
def admission_service(store, clock) -> AdmissionService:
    return AdmissionService(store, clock=clock)


@pytest.fixture
def deployer() -> Identity:
    return Identity("deployer")


@pytest.fixture
def authority(authority_service, deployer):
    return authority_service.initialize(deployer)


@pytest.fixture
def event(event_service, authority):
    created, _ = event_service.create_event(authority, make_config(), SECRET)
    return created


@pytest.fixture
def signal_log():
    """Collect notifications sent on the attendance signals."""
    from attendance.notifications import credential_minted, event_created

    received = []

    def record(signal_name):
        def receiver(sender, **kwargs):
            kwargs.pop("signal", None)
            received.append((signal_name, kwargs))

        return receiver

    created_receiver = record("event_created")
    minted_receiver = record("credential_minted")
    event_created.connect(created_receiver, weak=False)
    credential_minted.connect(minted_receiver, weak=False)
    yield received
    event_created.disconnect(created_receiver)
    credential_minted.disconnect(minted_receiver)
