"""Repository protocols (ports) for the backup context.

The export reads the permission model through these interfaces only. Any
file or database backend can implement them, as long as user loads may run
concurrently.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from backup.domain.aggregates import Group, Track, User


@runtime_checkable
class IPermissionStorage(Protocol):
    """Storage holding the (potentially very large) user population."""

    async def get_unique_users(self) -> set[UUID]:
        """Return the identifiers of every user with stored data.

        Called once per export job. May be a long-running scan.

        Returns:
            Set of user UUIDs
        """
        ...

    async def load_user(self, uuid: UUID) -> User:
        """Load a single user with all of its permission assignments.

        Called once per exported user, concurrently across many UUIDs.

        Args:
            uuid: The user to load

        Returns:
            The fully hydrated User

        Raises:
            UserNotFoundError: If no data exists for the UUID
        """
        ...


@runtime_checkable
class IUserCache(Protocol):
    """In-memory user cache populated as a side effect of loading users."""

    def cleanup(self, user: User) -> None:
        """Release the cache entry created when the user was loaded.

        Best effort; called once per exported user after serialization.
        """
        ...


@runtime_checkable
class IGroupManager(Protocol):
    """In-memory registry of loaded groups."""

    def get_all(self) -> dict[str, Group]:
        """Return all loaded groups keyed by name."""
        ...


@runtime_checkable
class ITrackManager(Protocol):
    """In-memory registry of loaded tracks."""

    def get_all(self) -> dict[str, Track]:
        """Return all loaded tracks keyed by name, in insertion order."""
        ...
