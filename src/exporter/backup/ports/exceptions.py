"""Exceptions for the backup context.

Storage adapters raise these at the port boundary; the application layer
turns them into typed results so that only the export driver decides
whether a job failed.
"""

from __future__ import annotations

from uuid import UUID


class ExportError(Exception):
    """Base class for export failures."""

    pass


class ExportWriteError(ExportError):
    """Raised when writing to the export output fails.

    Output that failed mid-record can no longer be replayed safely, so a
    write failure ends the job.
    """

    pass


class UserNotFoundError(ExportError):
    """Raised by storage when no data exists for a user UUID."""

    def __init__(self, uuid: UUID) -> None:
        super().__init__(f"No stored data for user {uuid}")
        self.uuid = uuid


class UserExportError(ExportError):
    """Raised when exporting a single user fails.

    Wraps the underlying storage or serialization error together with the
    UUID of the user being exported.
    """

    def __init__(self, uuid: UUID, cause: BaseException) -> None:
        super().__init__(f"Failed to export user {uuid}: {cause}")
        self.uuid = uuid
        self.cause = cause
