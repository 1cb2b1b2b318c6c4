"""In-memory cache of loaded users."""

from __future__ import annotations

from uuid import UUID

from backup.domain.aggregates import User
from backup.ports.repositories import IUserCache


class UserCache(IUserCache):
    """Holds users loaded from storage until they are released.

    Loading a user registers it here; cleanup drops it again, so an export
    over many users does not keep them all in memory.
    """

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}

    def register(self, user: User) -> None:
        """Add or replace a loaded user."""
        self._users[user.uuid] = user

    def cleanup(self, user: User) -> None:
        """Release the cache entry of a user."""
        self._users.pop(user.uuid, None)

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._users

    def __len__(self) -> int:
        return len(self._users)
