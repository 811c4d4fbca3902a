"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache
from django.db import transaction

from attendance import models as orm
from attendance.domain import Identity
from attendance.services import AdmissionService, AuthorityService, EventService
from attendance.signals import EVENT_LIST_CACHE_KEY, event_cache_key
from attendance.stores.django_store import DjangoAttendanceStore
from factories import SECRET, make_config


@pytest.fixture
def created_event(clock):
    store = DjangoAttendanceStore()
    authority = AuthorityService(store).initialize(Identity("deployer"))
    event, _ = EventService(store, clock=clock).create_event(authority, make_config(), SECRET)
    return store, authority, event


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_event_save_invalidates_list_cache(
        self, created_event, django_capture_on_commit_callbacks
    ):
        """Saving an event invalidates the events:list cache key."""
        _, _, event = created_event
        cache.set(EVENT_LIST_CACHE_KEY, ["stale"])

        with django_capture_on_commit_callbacks(execute=True):
            orm.Event.objects.get(pk=event.id.value).save()

        assert cache.get(EVENT_LIST_CACHE_KEY) is None

    def test_event_save_invalidates_detail_cache(
        self, created_event, django_capture_on_commit_callbacks
    ):
        """Saving an event invalidates the events:{id} cache key."""
        _, _, event = created_event
        cache.set(event_cache_key(event.id), "stale")

        with django_capture_on_commit_callbacks(execute=True):
            orm.Event.objects.get(pk=event.id.value).save()

        assert cache.get(event_cache_key(event.id)) is None

    def test_invalidation_waits_for_commit(
        self, created_event, django_capture_on_commit_callbacks
    ):
        """A reader racing the write must not re-cache rows that are not committed yet."""
        _, _, event = created_event
        cache.set(event_cache_key(event.id), "stale")

        with django_capture_on_commit_callbacks() as callbacks:
            orm.Event.objects.get(pk=event.id.value).save()
            assert cache.get(event_cache_key(event.id)) == "stale"

        assert cache.get(event_cache_key(event.id)) == "stale"
        for callback in callbacks:
            callback()
        assert cache.get(event_cache_key(event.id)) is None

    def test_rolled_back_save_keeps_cache(self, created_event):
        _, _, event = created_event
        cache.set(event_cache_key(event.id), "cached")

        with pytest.raises(RuntimeError):
            with transaction.atomic():
                orm.Event.objects.get(pk=event.id.value).save()
                raise RuntimeError("abort")

        assert cache.get(event_cache_key(event.id)) == "cached"

    def test_event_creation_invalidates_list_cache(
        self, clock, created_event, django_capture_on_commit_callbacks
    ):
        store, authority, _ = created_event
        cache.set(EVENT_LIST_CACHE_KEY, ["stale"])

        with django_capture_on_commit_callbacks(execute=True):
            EventService(store, clock=clock).create_event(authority, make_config(), SECRET)

        assert cache.get(EVENT_LIST_CACHE_KEY) is None

    def test_admission_invalidates_detail_cache(
        self, clock, created_event, django_capture_on_commit_callbacks
    ):
        """A claim changes attendee_count, so the cached detail must go."""
        store, _, event = created_event
        cache.set(event_cache_key(event.id), "stale")

        with django_capture_on_commit_callbacks(execute=True):
            AdmissionService(store, clock=clock).admit(event.id, Identity("alice"), SECRET)

        assert cache.get(event_cache_key(event.id)) is None
