"""Signal receivers for cache invalidation and the notification log."""

import logging

from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from attendance.models import Event
from attendance.notifications import credential_minted, event_created

logger = logging.getLogger("attendance.signals")

EVENT_LIST_CACHE_KEY = "events:list"


def event_cache_key(event_id) -> str:
    return f"events:{event_id}"


@receiver(post_save, sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches once the transaction saving an event commits."""
    keys = [EVENT_LIST_CACHE_KEY, event_cache_key(instance.pk)]
    transaction.on_commit(lambda: cache.delete_many(keys), using=kwargs.get("using"))


@receiver(event_created)
def log_event_created(sender, event_id, name, date, location, **kwargs):
    logger.info(
        "Event created id=%s name=%r date=%s location=%r", event_id, name, date, location
    )


@receiver(credential_minted)
def log_credential_minted(sender, event_id, identity, credential_id, serial_number, **kwargs):
    logger.info(
        "Credential minted event=%s identity=%s credential=%s serial=%d",
        event_id,
        identity,
        credential_id,
        serial_number,
    )
