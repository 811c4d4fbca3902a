from attendance.domain.models import (
    AdministrativeAuthority,
    ClaimLedger,
    Credential,
    Event,
    EventConfig,
    EventDetails,
    EventRegistry,
)
from attendance.domain.value_objects import (
    AuthorityId,
    Capacity,
    CredentialId,
    EventId,
    Identity,
    SecretDigest,
)

__all__ = [
    "AdministrativeAuthority",
    "ClaimLedger",
    "Credential",
    "Event",
    "EventConfig",
    "EventDetails",
    "EventRegistry",
    "AuthorityId",
    "Capacity",
    "CredentialId",
    "EventId",
    "Identity",
    "SecretDigest",
]
