"""Track aggregate for the backup context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from backup.domain.value_objects import validate_name


@dataclass
class Track:
    """An ordered promotion/demotion path of group names.

    Business rules:
    - Track names follow the same rules as group names
    - A group appears at most once on a track
    - The sequence may be empty; its order is significant
    """

    name: str
    groups: list[str] = field(default_factory=list)

    @classmethod
    def create(cls, name: str, groups: Iterable[str] = ()) -> Track:
        """Factory method for creating a track.

        Args:
            name: The track name (normalized to lower case)
            groups: Group names in promotion order

        Returns:
            A new Track

        Raises:
            InvalidNameError: If the name is invalid
            ValueError: If a group appears twice
        """
        track = cls(name=validate_name(name))
        for group_name in groups:
            track.append(group_name)
        return track

    def append(self, group_name: str) -> None:
        """Append a group to the end of the track.

        Raises:
            ValueError: If the group is already on the track
        """
        group_name = group_name.lower()
        if group_name in self.groups:
            raise ValueError(f"Group {group_name} is already on track {self.name}")
        self.groups.append(group_name)

    def __len__(self) -> int:
        return len(self.groups)
