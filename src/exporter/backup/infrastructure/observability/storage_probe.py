"""Domain probe for permission storage operations."""

from __future__ import annotations

from typing import Protocol

import structlog


class StorageProbe(Protocol):
    """Domain probe for permission storage reads."""

    def unique_users_listed(self, count: int) -> None:
        """Record that the unique user set was listed."""
        ...

    def invalid_uuid_skipped(self, raw_value: str) -> None:
        """Record that a stored user identifier was not a valid UUID."""
        ...

    def user_loaded(self, uuid: str, node_count: int) -> None:
        """Record that a user was loaded."""
        ...

    def user_not_found(self, uuid: str) -> None:
        """Record that no data exists for a user."""
        ...

    def groups_loaded(self, count: int) -> None:
        """Record that all groups were loaded."""
        ...

    def tracks_loaded(self, count: int) -> None:
        """Record that all tracks were loaded."""
        ...


class DefaultStorageProbe:
    """Default implementation of StorageProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(component="storage")

    def unique_users_listed(self, count: int) -> None:
        self._logger.info("storage_unique_users_listed", count=count)

    def invalid_uuid_skipped(self, raw_value: str) -> None:
        self._logger.warning("storage_invalid_uuid_skipped", raw_value=raw_value)

    def user_loaded(self, uuid: str, node_count: int) -> None:
        self._logger.debug("storage_user_loaded", uuid=uuid, node_count=node_count)

    def user_not_found(self, uuid: str) -> None:
        self._logger.warning("storage_user_not_found", uuid=uuid)

    def groups_loaded(self, count: int) -> None:
        self._logger.info("storage_groups_loaded", count=count)

    def tracks_loaded(self, count: int) -> None:
        self._logger.info("storage_tracks_loaded", count=count)
