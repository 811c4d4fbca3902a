from attendance.handlers.views import (
    ClaimView,
    CredentialListView,
    EventDetailView,
    EventListView,
)

__all__ = ["ClaimView", "CredentialListView", "EventDetailView", "EventListView"]
