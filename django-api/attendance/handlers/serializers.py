"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    date = serializers.DateTimeField()
    image_url = serializers.URLField(allow_null=True)
    expiration = serializers.DateTimeField()
    max_attendees = serializers.IntegerField(source="max_attendees.value")
    attendee_count = serializers.IntegerField()


class CredentialSerializer(serializers.Serializer):
    """Serializer for Credential domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    owner = serializers.CharField(source="owner.value")
    serial_number = serializers.IntegerField()
    name = serializers.CharField()
    description = serializers.CharField()
    image_url = serializers.URLField(allow_null=True)
    date = serializers.DateTimeField()
    location = serializers.CharField()
    issued_at = serializers.DateTimeField()


class ClaimRequestSerializer(serializers.Serializer):
    """Input for POST /api/events/{event_id}/claim"""

    secret = serializers.CharField(trim_whitespace=False, max_length=1024)
