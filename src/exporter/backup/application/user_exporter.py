"""Concurrent export of users.

There are likely to be a lot of users, and storage can serve concurrent
reads, so every user is loaded and serialized by its own task. A semaphore
bounds how many tasks touch storage at once. Each task hands its finished
record to the SerializingSink, which keeps records from interleaving.
"""

from __future__ import annotations

import asyncio
from uuid import UUID

from backup.application.observability import DefaultExportProbe, ExportProbe
from backup.application.progress import ProgressReporter
from backup.application.sink import SerializingSink
from backup.application.value_objects import UserExportResult
from backup.domain import commands
from backup.domain.aggregates import User
from backup.domain.value_objects import DEFAULT_GROUP_NAME, HolderType
from backup.ports.exceptions import UserExportError
from backup.ports.repositories import IPermissionStorage, IUserCache

DEFAULT_WORKER_COUNT = 32
DEFAULT_PROGRESS_INTERVAL_SECONDS = 5.0


def user_record(user: User) -> list[str]:
    """Build the export record of a single user.

    A fresh instance puts every user in the default group implicitly, so
    an explicit default membership is not written. If the user does not
    hold default membership, the record removes it instead.

    Args:
        user: The loaded user

    Returns:
        Ordered lines of the user's record
    """
    holder_id = str(user.uuid)
    lines = [f"# Export user: {holder_id} - {user.username or 'unknown username'}"]

    in_default = False
    for node in user.nodes:
        if node.is_group_node and node.group_name == DEFAULT_GROUP_NAME:
            in_default = True
            continue
        lines.append(
            commands.prefixed(
                commands.node_as_command(node, holder_id, HolderType.USER)
            )
        )

    primary_group = user.primary_group_or_default
    if primary_group != DEFAULT_GROUP_NAME:
        lines.append(commands.switch_primary_group(holder_id, primary_group))

    if not in_default:
        lines.append(commands.remove_default_parent(holder_id))

    return lines


class UserExporter:
    """Exports every stored user through a bounded pool of tasks.

    The stage waits in slices of progress_interval seconds and reports the
    running count after each slice that ends without completion. Every
    notify_frequency-th exported user is reported as well.

    The first failed task stops the wait. Tasks are never cancelled: the
    ones still pending run to completion or failure and are drained before
    the stage returns, so no task outlives the stage.
    """

    STAGE = "users"

    def __init__(
        self,
        storage: IPermissionStorage,
        user_cache: IUserCache,
        sink: SerializingSink,
        reporter: ProgressReporter,
        probe: ExportProbe | None = None,
        worker_count: int = DEFAULT_WORKER_COUNT,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the exporter.

        Args:
            storage: Storage to enumerate and load users from
            user_cache: Cache whose entries are released after each user
            sink: Shared writer for the export output
            reporter: Progress reporter for listeners
            probe: Optional domain probe for observability
            worker_count: Maximum number of users loaded concurrently
            progress_interval: Seconds between progress reports
        """
        if worker_count < 1:
            raise ValueError("worker_count must be >= 1")
        if progress_interval <= 0:
            raise ValueError("progress_interval must be > 0")
        self._storage = storage
        self._user_cache = user_cache
        self._sink = sink
        self._reporter = reporter
        self._probe = probe or DefaultExportProbe()
        self._worker_count = worker_count
        self._progress_interval = progress_interval
        self._exported = 0

    async def export(self) -> UserExportResult:
        """Export all unique users.

        Returns:
            The stage result, listing per-user failures if any

        Raises:
            ExportWriteError: If the output could not be written
        """
        self._probe.stage_started(self.STAGE)
        self._reporter.log(
            "Starting user export. Finding a list of unique users to export."
        )

        uuids = await self._storage.get_unique_users()
        total = len(uuids)
        self._probe.users_found(total)
        self._reporter.log(f"Found {total} unique users to export.")

        await self._sink.write_line("# Export users")

        self._exported = 0
        semaphore = asyncio.Semaphore(self._worker_count)
        pending: set[asyncio.Task[None]] = {
            asyncio.create_task(
                self._export_user(uuid, semaphore), name=f"export-user-{uuid}"
            )
            for uuid in uuids
        }

        failures: list[BaseException] = []
        try:
            while pending:
                done, pending = await asyncio.wait(
                    pending,
                    timeout=self._progress_interval,
                    return_when=asyncio.FIRST_EXCEPTION,
                )
                failures.extend(_failures_of(done))
                if failures:
                    break
                if pending:
                    # Timed out; still running.
                    self._probe.user_export_progress(self._exported, total)
                    self._reporter.log_all_progress(
                        "Exported {} users so far.", self._exported
                    )
        finally:
            if pending:
                drained = await asyncio.gather(*pending, return_exceptions=True)
                failures.extend(
                    error
                    for error in drained
                    if isinstance(error, Exception) and error not in failures
                )

        # Anything other than a per-user failure (a write failure) ends the job.
        for error in failures:
            if not isinstance(error, UserExportError):
                raise error

        user_failures = tuple(e for e in failures if isinstance(e, UserExportError))
        for failure in user_failures:
            self._reporter.log_error(str(failure))

        self._reporter.log(f"Exported {self._exported} users.")
        self._probe.stage_completed(self.STAGE, self._exported)
        return UserExportResult(
            total=total, exported=self._exported, failures=user_failures
        )

    async def _export_user(self, uuid: UUID, semaphore: asyncio.Semaphore) -> None:
        async with semaphore:
            try:
                user = await self._storage.load_user(uuid)
                record = user_record(user)
            except Exception as e:
                self._probe.user_export_failed(str(uuid), str(e))
                raise UserExportError(uuid, e) from e

            self._release(user)
            await self._sink.emit(record)
            self._exported += 1
            self._probe.user_exported(str(uuid), len(record))
            self._reporter.log_progress("Exported {} users so far.", self._exported)

    def _release(self, user: User) -> None:
        try:
            self._user_cache.cleanup(user)
        except Exception as e:
            self._probe.user_cleanup_failed(str(user.uuid), str(e))


def _failures_of(tasks: set[asyncio.Task[None]]) -> list[BaseException]:
    return [
        error
        for task in tasks
        if not task.cancelled() and (error := task.exception()) is not None
    ]
