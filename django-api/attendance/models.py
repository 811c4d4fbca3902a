"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class EventRegistry(models.Model):
    """Singleton row counting created events."""

    SINGLETON_ID = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_ID)
    event_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"EventRegistry({self.event_count} events)"


class AdministrativeAuthority(models.Model):
    """Persistence model for the administrative capability token."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    holder = models.CharField(max_length=255)
    nonce = models.UUIDField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"AdministrativeAuthority held by {self.holder}"


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField()
    location = models.CharField(max_length=255)
    date = models.DateTimeField()
    image_url = models.URLField(max_length=500, blank=True, null=True)
    expiration = models.DateTimeField()
    max_attendees = models.PositiveIntegerField()
    attendee_count = models.PositiveIntegerField(default=0)
    secret_digest = models.BinaryField(max_length=32)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="event_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(attendee_count__lte=models.F("max_attendees")),
                name="event_attendance_within_capacity",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class ClaimLedger(models.Model):
    """Persistence model for the per-event set of claimants."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.OneToOneField(
        Event, on_delete=models.PROTECT, related_name="claim_ledger"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Claims for {self.event_id}"


class Claim(models.Model):
    """One identity recorded in a claim ledger."""

    ledger = models.ForeignKey(
        ClaimLedger, on_delete=models.PROTECT, related_name="claims"
    )
    identity = models.CharField(max_length=255)
    claimed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["ledger", "identity"], name="claim_unique_identity"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.identity} in {self.ledger_id}"


class Credential(models.Model):
    """Persistence model for issued credentials."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        Event, on_delete=models.PROTECT, related_name="credentials"
    )
    owner = models.CharField(max_length=255)
    serial_number = models.PositiveIntegerField()
    name = models.CharField(max_length=255)
    description = models.TextField()
    image_url = models.URLField(max_length=500, blank=True, null=True)
    date = models.DateTimeField()
    location = models.CharField(max_length=255)
    issued_at = models.DateTimeField()

    class Meta:
        ordering = ["-issued_at"]
        indexes = [
            models.Index(fields=["owner", "-issued_at"], name="credential_owner_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "serial_number"], name="credential_unique_serial"
            ),
            models.UniqueConstraint(
                fields=["event", "owner"], name="credential_unique_owner"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} #{self.serial_number}"
