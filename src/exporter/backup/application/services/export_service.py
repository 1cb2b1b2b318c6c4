"""Export application service for the backup context.

Drives an export job: header, groups, tracks, users (optionally) and the
final notification to listeners. Stages run one after another; only the
user stage is concurrent internally.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

from backup.application.group_exporter import GroupExporter, TrackExporter
from backup.application.observability import DefaultExportProbe, ExportProbe
from backup.application.progress import DEFAULT_NOTIFY_FREQUENCY, ProgressReporter
from backup.application.sink import SerializingSink
from backup.application.user_exporter import (
    DEFAULT_PROGRESS_INTERVAL_SECONDS,
    DEFAULT_WORKER_COUNT,
    UserExporter,
)
from backup.application.value_objects import (
    ExportOutcome,
    ExportStatus,
    UserExportResult,
)
from backup.ports.observers import ExportObserver
from backup.ports.repositories import (
    IGroupManager,
    IPermissionStorage,
    ITrackManager,
    IUserCache,
)

HEADER_TITLE = "# Permission Export File"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class ExportService:
    """Application service running a single export job.

    The service owns the output file for the duration of run(): it is
    opened, flushed and closed here on every path, and is only written to
    through a SerializingSink.

    Failures are turned into an ExportOutcome rather than raised:
    - a failed write ends the job as FAILED;
    - a failed user task ends the job as PARTIAL once the other users are
      exported, with a trailing comment marking the file as incomplete;
    - anything else unexpected ends the job as FAILED.
    """

    def __init__(
        self,
        storage: IPermissionStorage,
        user_cache: IUserCache,
        group_manager: IGroupManager,
        track_manager: ITrackManager,
        executor: ExportObserver,
        output_path: Path,
        include_users: bool = True,
        worker_count: int = DEFAULT_WORKER_COUNT,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL_SECONDS,
        notify_frequency: int = DEFAULT_NOTIFY_FREQUENCY,
        listeners: tuple[ExportObserver, ...] = (),
        probe: ExportProbe | None = None,
        clock: Callable[[], datetime] = _local_now,
    ):
        """Initialize ExportService with dependencies.

        Args:
            storage: Storage holding the users
            user_cache: Cache released after each exported user
            group_manager: Registry of loaded groups
            track_manager: Registry of loaded tracks
            executor: The actor running the export; always a listener
            output_path: File to write the script to
            include_users: Whether to run the user stage
            worker_count: Maximum number of users loaded concurrently
            progress_interval: Seconds between progress reports for users
            notify_frequency: Item interval for periodic progress messages
            listeners: Additional listeners (e.g. an operational console)
            probe: Optional domain probe for observability
            clock: Source of the header timestamp
        """
        self._storage = storage
        self._user_cache = user_cache
        self._group_manager = group_manager
        self._track_manager = track_manager
        self._executor = executor
        self._output_path = output_path
        self._include_users = include_users
        self._worker_count = worker_count
        self._progress_interval = progress_interval
        self._probe = probe or DefaultExportProbe()
        self._clock = clock

        self._reporter = ProgressReporter(
            notify_frequency=notify_frequency, probe=self._probe
        )
        for listener in listeners:
            self._reporter.add_listener(listener)
        self._reporter.add_listener(executor)

    @property
    def reporter(self) -> ProgressReporter:
        return self._reporter

    async def run(self) -> ExportOutcome:
        """Run the export job to completion.

        Never raises; the outcome describes how the job ended.
        """
        path = self._output_path.absolute()
        self._probe.export_started(str(path), self._include_users)

        try:
            with self._output_path.open("w", encoding="utf-8", newline="\n") as stream:
                sink = SerializingSink(stream, probe=self._probe)
                outcome = await self._export(sink, path)
                await sink.flush()
        except Exception as e:
            self._probe.export_failed(str(path), str(e))
            self._reporter.log_error(f"Export failed: {e}")
            return ExportOutcome(
                status=ExportStatus.FAILED, output_path=path, errors=(str(e),)
            )

        self._probe.export_completed(
            str(path), outcome.status.value, outcome.groups, outcome.tracks, outcome.users
        )
        if outcome.succeeded:
            for listener in self._reporter.listeners:
                self._reporter.notify(listener, f"Successfully exported to {path}.")
        else:
            for listener in self._reporter.listeners:
                self._reporter.notify(
                    listener,
                    f"Export to {path} is incomplete: {len(outcome.errors)} error(s).",
                )
        return outcome

    async def _export(self, sink: SerializingSink, path: Path) -> ExportOutcome:
        self._reporter.log("Starting.")

        await sink.emit(
            [
                HEADER_TITLE,
                f"# Generated by {self._executor.display_name} at "
                f"{self._clock().strftime(TIMESTAMP_FORMAT)}",
                "",
            ]
        )

        groups = await GroupExporter(
            self._group_manager, sink, self._reporter, probe=self._probe
        ).export()
        tracks = await TrackExporter(
            self._track_manager, sink, self._reporter, probe=self._probe
        ).export()

        users = UserExportResult(total=0, exported=0)
        if self._include_users:
            users = await UserExporter(
                self._storage,
                self._user_cache,
                sink,
                self._reporter,
                probe=self._probe,
                worker_count=self._worker_count,
                progress_interval=self._progress_interval,
            ).export()

        status = ExportStatus.SUCCESS
        if not users.complete:
            status = ExportStatus.PARTIAL
            await sink.emit(
                [
                    "",
                    f"# Export incomplete: {users.exported} of {users.total} "
                    "users exported",
                ]
            )

        return ExportOutcome(
            status=status,
            output_path=path,
            groups=groups.count,
            tracks=tracks.count,
            users=users.exported,
            errors=tuple(str(failure) for failure in users.failures),
        )
