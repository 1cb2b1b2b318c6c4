"""In-memory registries of loaded groups and tracks."""

from __future__ import annotations

from typing import Iterable

from backup.domain.aggregates import Group, Track
from backup.ports.repositories import IGroupManager, ITrackManager


class GroupManager(IGroupManager):
    """Registry of loaded groups, keyed by lower-case name."""

    def __init__(self, groups: Iterable[Group] = ()) -> None:
        self._groups: dict[str, Group] = {}
        self.load(groups)

    def load(self, groups: Iterable[Group]) -> None:
        """Add or replace groups."""
        for group in groups:
            self._groups[group.name.lower()] = group

    def get_all(self) -> dict[str, Group]:
        return dict(self._groups)


class TrackManager(ITrackManager):
    """Registry of loaded tracks, keyed by lower-case name.

    Tracks are returned in the order they were first loaded.
    """

    def __init__(self, tracks: Iterable[Track] = ()) -> None:
        self._tracks: dict[str, Track] = {}
        self.load(tracks)

    def load(self, tracks: Iterable[Track]) -> None:
        """Add or replace tracks."""
        for track in tracks:
            self._tracks[track.name.lower()] = track

    def get_all(self) -> dict[str, Track]:
        return dict(self._tracks)
