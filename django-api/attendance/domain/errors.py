"""Domain error codes for the attendance module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    CLAIM_LEDGER_NOT_FOUND = "CLAIM_LEDGER_NOT_FOUND"
    CREDENTIAL_NOT_FOUND = "CREDENTIAL_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_CREDENTIAL_ID = "INVALID_CREDENTIAL_ID"
    INVALID_EVENT_CONFIG = "INVALID_EVENT_CONFIG"
    EVENT_EXPIRED = "EVENT_EXPIRED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INVALID_SECRET = "INVALID_SECRET"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    UNAUTHORIZED = "UNAUTHORIZED"
    ALREADY_INITIALIZED = "ALREADY_INITIALIZED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when the storage layer has no entity for a reference."""


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message=f"Event {event_id} not found",
        )


class ClaimLedgerNotFoundError(NotFoundError):
    """Raised when the claim ledger of an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.CLAIM_LEDGER_NOT_FOUND,
            message=f"Claim ledger for event {event_id} not found",
        )


class CredentialNotFoundError(NotFoundError):
    """Raised when a credential is not found."""

    def __init__(self, credential_id: str) -> None:
        super().__init__(
            code=ErrorCode.CREDENTIAL_NOT_FOUND,
            message=f"Credential {credential_id} not found",
        )


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidCredentialIdError(DomainError):
    """Raised when a credential ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CREDENTIAL_ID,
            message="Invalid credential ID format",
        )


class InvalidEventConfigError(DomainError):
    def __init__(self, reason: str) -> None:
        super().__init__(code=ErrorCode.INVALID_EVENT_CONFIG, message=reason)


class AdmissionDenied(DomainError):
    """Base class for the reasons an admission can be refused."""


class EventExpiredError(AdmissionDenied):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_EXPIRED,
            message="Event has expired",
        )


class CapacityExceededError(AdmissionDenied):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message="Event has reached its attendee capacity",
        )


class InvalidSecretError(AdmissionDenied):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SECRET,
            message="Invalid event secret",
        )


class AlreadyClaimedError(AdmissionDenied):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CLAIMED,
            message="Credential already claimed for this event",
        )


class UnauthorizedError(DomainError):
    """Raised when an administrative operation lacks a valid authority."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UNAUTHORIZED,
            message="A valid administrative authority is required",
        )


class AlreadyInitializedError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_INITIALIZED,
            message="Attendance registry is already initialized",
        )
