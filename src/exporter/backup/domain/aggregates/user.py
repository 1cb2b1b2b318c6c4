"""User aggregate for the backup context."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from backup.domain.value_objects import DEFAULT_GROUP_NAME, Node


@dataclass
class User:
    """A permission subject identified by a stable UUID.

    ``primary_group`` holds the stored value only; ``None`` means the user
    never had a primary group set and implicitly uses the default group.
    """

    uuid: UUID
    username: str | None = None
    nodes: list[Node] = field(default_factory=list)
    primary_group: str | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.uuid}, {self.username or 'unknown username'})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same UUID."""
        if not isinstance(other, User):
            return False
        return self.uuid == other.uuid

    def __hash__(self) -> int:
        """Hash based on UUID for use in sets and dicts."""
        return hash(self.uuid)

    @property
    def primary_group_or_default(self) -> str:
        return (self.primary_group or DEFAULT_GROUP_NAME).lower()
