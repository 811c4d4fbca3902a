"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from attendance.domain import Identity
from attendance.domain.errors import DomainError, ErrorCode
from attendance.handlers.serializers import (
    ClaimRequestSerializer,
    CredentialSerializer,
    EventSerializer,
)
from attendance.services import AdmissionService, EventService
from attendance.services.event_service import parse_event_id
from attendance.signals import EVENT_LIST_CACHE_KEY, event_cache_key
from attendance.stores.django_store import DjangoAttendanceStore

ERROR_STATUS = {
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CREDENTIAL_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CLAIM_LEDGER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CREDENTIAL_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_SECRET: status.HTTP_403_FORBIDDEN,
    ErrorCode.ALREADY_CLAIMED: status.HTTP_409_CONFLICT,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_EXPIRED: status.HTTP_410_GONE,
}


def _error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def _caller(request: Request) -> Identity:
    return Identity(request.user.get_username())


def _event_service() -> EventService:
    return EventService(DjangoAttendanceStore())


def _admission_service() -> AdmissionService:
    return AdmissionService(DjangoAttendanceStore())


class EventListView(APIView):
    """Handler for GET /api/events"""

    def get(self, request: Request) -> Response:
        events = cache.get(EVENT_LIST_CACHE_KEY)
        if events is None:
            events = _event_service().list_events()
            cache.set(EVENT_LIST_CACHE_KEY, events, settings.ATTENDANCE_CACHE_TIMEOUT)
        return Response({"results": EventSerializer(events, many=True).data})


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            parsed = parse_event_id(event_id)
            key = event_cache_key(parsed)
            event = cache.get(key)
            if event is None:
                event = _event_service().get_event(parsed)
                cache.set(key, event, settings.ATTENDANCE_CACHE_TIMEOUT)
        except DomainError as exc:
            return _error_response(exc)
        payload = EventSerializer(event).data
        return Response({**payload, "is_active": event.is_active(timezone.now())})


class ClaimView(APIView):
    """Handler for GET and POST /api/events/{event_id}/claim"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            claimed = _event_service().has_claimed(event_id, _caller(request))
        except DomainError as exc:
            return _error_response(exc)
        return Response({"has_claimed": claimed})

    def post(self, request: Request, event_id: str) -> Response:
        serializer = ClaimRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        secret = serializer.validated_data["secret"].encode("utf-8")
        try:
            credential = _admission_service().admit(event_id, _caller(request), secret)
        except DomainError as exc:
            return _error_response(exc)
        return Response(CredentialSerializer(credential).data, status=status.HTTP_201_CREATED)


class CredentialListView(APIView):
    """Handler for GET /api/credentials"""

    def get(self, request: Request) -> Response:
        credentials = _event_service().list_credentials(_caller(request))
        return Response({"results": CredentialSerializer(credentials, many=True).data})
