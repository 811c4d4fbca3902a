"""Administrative authority bootstrap, validation and transfer."""

import logging

from attendance.domain import AdministrativeAuthority, EventRegistry, Identity
from attendance.domain.errors import AlreadyInitializedError, UnauthorizedError
from attendance.stores.interfaces import AttendanceStore

logger = logging.getLogger("attendance.authority")


def require_authority(store: AttendanceStore, authority: object) -> AdministrativeAuthority:
    """Return ``authority`` if it is the live stored token.

    Raises:
        UnauthorizedError: If ``authority`` is not an AdministrativeAuthority,
            is unknown to the store, or has since been transferred.
    """
    if not isinstance(authority, AdministrativeAuthority):
        raise UnauthorizedError()
    stored = store.get_authority(authority.id)
    if stored is None or stored.nonce != authority.nonce:
        logger.warning("Rejected stale or unknown authority %s", authority.id)
        raise UnauthorizedError()
    return stored


class AuthorityService:
    """Service owning the one-time setup and the authority token lifecycle."""

    def __init__(self, store: AttendanceStore) -> None:
        self._store = store

    def initialize(self, deployer: Identity) -> AdministrativeAuthority:
        """Create the event registry and mint the authority for ``deployer``.

        Raises:
            AlreadyInitializedError: If the registry already exists.
        """
        with self._store.atomic():
            if self._store.get_registry(for_update=True) is not None:
                raise AlreadyInitializedError()
            authority = AdministrativeAuthority.mint(deployer)
            self._store.save_registry(EventRegistry())
            self._store.save_authority(authority)
        logger.info("Attendance initialized; authority %s minted for %s", authority.id, deployer)
        return authority

    def transfer_authority(
        self, authority: AdministrativeAuthority, recipient: Identity
    ) -> AdministrativeAuthority:
        """Move the authority to ``recipient``; the passed-in token stops working."""
        with self._store.atomic():
            current = require_authority(self._store, authority)
            moved = current.moved_to(recipient)
            self._store.save_authority(moved)
        logger.info("Authority %s transferred %s -> %s", moved.id, current.holder, recipient)
        return moved

    def get_registry(self) -> EventRegistry:
        registry = self._store.get_registry()
        return registry if registry is not None else EventRegistry()
