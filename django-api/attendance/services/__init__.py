from attendance.services.admission_service import AdmissionService
from attendance.services.authority_service import AuthorityService
from attendance.services.event_service import EventService

__all__ = ["AdmissionService", "AuthorityService", "EventService"]
