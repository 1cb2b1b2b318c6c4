"""Sequential export of groups and tracks.

Groups and tracks are few, so they are written on the calling task in a
fixed order; only users need the concurrent exporter.
"""

from __future__ import annotations

from typing import Iterable

from backup.application.observability import DefaultExportProbe, ExportProbe
from backup.application.progress import ProgressReporter
from backup.application.sink import SerializingSink
from backup.application.value_objects import StageResult
from backup.domain import commands
from backup.domain.aggregates import Group, Track
from backup.domain.value_objects import HolderType
from backup.ports.repositories import IGroupManager, ITrackManager


def sort_groups(groups: Iterable[Group]) -> list[Group]:
    """Order groups by weight descending, then name ascending (case-insensitive).

    Heavier groups sit higher in the hierarchy, so they are created first and
    lighter groups that inherit from them can be replayed afterwards.
    """
    return sorted(groups, key=lambda group: (-(group.weight or 0), group.name.lower()))


def group_record(group: Group) -> list[str]:
    """Build the export record of a single group (without the trailing blank)."""
    lines = [f"# Export group: {group.name}"]
    lines.extend(
        commands.prefixed(commands.node_as_command(node, group.name, HolderType.GROUP))
        for node in group.nodes
    )
    return lines


def track_record(track: Track) -> list[str]:
    """Build the export record of a single track (without the trailing blank)."""
    lines = [f"# Export track: {track.name}"]
    lines.extend(commands.track_append(track.name, group) for group in track.groups)
    return lines


class GroupExporter:
    """Writes the group section of an export."""

    STAGE = "groups"

    def __init__(
        self,
        group_manager: IGroupManager,
        sink: SerializingSink,
        reporter: ProgressReporter,
        probe: ExportProbe | None = None,
    ) -> None:
        self._group_manager = group_manager
        self._sink = sink
        self._reporter = reporter
        self._probe = probe or DefaultExportProbe()

    async def export(self) -> StageResult:
        """Write group creation commands followed by every group's nodes.

        The default group exists on every fresh instance, so it gets no
        creation command; its nodes are still written.
        """
        self._probe.stage_started(self.STAGE)
        self._reporter.log("Starting group export.")

        groups = sort_groups(self._group_manager.get_all().values())

        await self._sink.emit(
            ["# Create groups"]
            + [commands.create_group(g.name) for g in groups if not g.is_default]
        )

        count = 0
        for group in groups:
            record = group_record(group) + [""]
            if count == 0:
                record.insert(0, "")
            await self._sink.emit(record)
            count += 1
            self._reporter.log_all_progress("Exported {} groups so far.", count)

        self._reporter.log(f"Exported {count} groups.")
        await self._sink.emit(["", ""])

        self._probe.stage_completed(self.STAGE, count)
        return StageResult(stage=self.STAGE, count=count)


class TrackExporter:
    """Writes the track section of an export, if there are any tracks."""

    STAGE = "tracks"

    def __init__(
        self,
        track_manager: ITrackManager,
        sink: SerializingSink,
        reporter: ProgressReporter,
        probe: ExportProbe | None = None,
    ) -> None:
        self._track_manager = track_manager
        self._sink = sink
        self._reporter = reporter
        self._probe = probe or DefaultExportProbe()

    async def export(self) -> StageResult:
        """Write track creation commands, then each track's groups in order.

        Tracks keep their enumeration order; the group order inside a track
        is the promotion path and is written exactly as stored.
        """
        self._probe.stage_started(self.STAGE)
        self._reporter.log("Starting track export.")

        tracks = list(self._track_manager.get_all().values())
        count = 0
        if tracks:
            await self._sink.emit(
                ["# Create tracks"]
                + [commands.create_track(t.name) for t in tracks]
                + [""]
            )

            for track in tracks:
                await self._sink.emit(track_record(track) + [""])
                count += 1
                self._reporter.log_all_progress("Exported {} tracks so far.", count)

            await self._sink.emit(["", ""])

        self._reporter.log(f"Exported {count} tracks.")
        self._probe.stage_completed(self.STAGE, count)
        return StageResult(stage=self.STAGE, count=count)
