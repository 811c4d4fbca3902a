"""Deterministic one-way digest used to store and verify event secrets."""

import hashlib

DIGEST_SIZE = hashlib.sha256().digest_size


def digest(secret: bytes) -> bytes:
    """Return the SHA-256 digest of ``secret``."""
    if not isinstance(secret, (bytes, bytearray, memoryview)):
        raise TypeError("secret must be bytes")
    return hashlib.sha256(secret).digest()
