"""Domain primitives that enforce validity at creation time."""

import hmac
from dataclasses import dataclass
from typing import Self
from uuid import UUID

from attendance.domain.hashing import DIGEST_SIZE, digest


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CredentialId:
    """Unique identifier for a Credential."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class AuthorityId:
    """Unique identifier for an AdministrativeAuthority."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Identity:
    """Opaque principal supplied by the caller's execution context."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Identity cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True, repr=False)
class SecretDigest:
    """Fixed-length digest of an event secret."""

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != DIGEST_SIZE:
            raise ValueError(f"Secret digest must be {DIGEST_SIZE} bytes")

    @classmethod
    def from_secret(cls, secret: bytes) -> Self:
        return cls(value=digest(secret))

    def matches(self, secret: bytes) -> bool:
        """Compare the digest of ``secret`` against this one in constant time."""
        return hmac.compare_digest(digest(secret), self.value)

    def __repr__(self) -> str:
        return "SecretDigest(<redacted>)"
