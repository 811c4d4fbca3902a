from django.urls import path

from attendance.handlers import (
    ClaimView,
    CredentialListView,
    EventDetailView,
    EventListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/claim", ClaimView.as_view(), name="event-claim"),
    path("credentials", CredentialListView.as_view(), name="credential-list"),
]
