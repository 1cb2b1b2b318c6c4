"""Protocol for export engine observability.

Defines the interface for domain probes that capture the significant
events of an export job, keeping the engine free of logging calls.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class ExportProbe(Protocol):
    """Domain probe for export jobs."""

    def export_started(self, output_path: str, include_users: bool) -> None:
        """Record that an export job started."""
        ...

    def stage_started(self, stage: str) -> None:
        """Record that an export stage (groups, tracks, users) started."""
        ...

    def stage_completed(self, stage: str, count: int) -> None:
        """Record that an export stage finished."""
        ...

    def users_found(self, count: int) -> None:
        """Record the size of the unique user set."""
        ...

    def user_exported(self, uuid: str, line_count: int) -> None:
        """Record that a user's record was emitted."""
        ...

    def user_export_failed(self, uuid: str, error: str) -> None:
        """Record that exporting a user failed."""
        ...

    def user_cleanup_failed(self, uuid: str, error: str) -> None:
        """Record that releasing a user's cache entry failed."""
        ...

    def user_export_progress(self, exported: int, total: int) -> None:
        """Record a periodic progress snapshot of the user stage."""
        ...

    def write_failed(self, error: str) -> None:
        """Record that writing to the output failed."""
        ...

    def listener_failed(self, listener: str, error: str) -> None:
        """Record that delivering a message to a listener failed."""
        ...

    def export_completed(
        self,
        output_path: str,
        status: str,
        groups: int,
        tracks: int,
        users: int,
    ) -> None:
        """Record that an export job finished."""
        ...

    def export_failed(self, output_path: str, error: str) -> None:
        """Record that an export job failed."""
        ...


class DefaultExportProbe:
    """Default implementation of ExportProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(component="exporter")

    def export_started(self, output_path: str, include_users: bool) -> None:
        self._logger.info(
            "export_started",
            output_path=output_path,
            include_users=include_users,
        )

    def stage_started(self, stage: str) -> None:
        self._logger.info("export_stage_started", stage=stage)

    def stage_completed(self, stage: str, count: int) -> None:
        self._logger.info("export_stage_completed", stage=stage, count=count)

    def users_found(self, count: int) -> None:
        self._logger.info("export_users_found", count=count)

    def user_exported(self, uuid: str, line_count: int) -> None:
        self._logger.debug("export_user_exported", uuid=uuid, line_count=line_count)

    def user_export_failed(self, uuid: str, error: str) -> None:
        self._logger.error("export_user_failed", uuid=uuid, error=error)

    def user_cleanup_failed(self, uuid: str, error: str) -> None:
        self._logger.warning("export_user_cleanup_failed", uuid=uuid, error=error)

    def user_export_progress(self, exported: int, total: int) -> None:
        self._logger.info("export_user_progress", exported=exported, total=total)

    def write_failed(self, error: str) -> None:
        self._logger.error("export_write_failed", error=error)

    def listener_failed(self, listener: str, error: str) -> None:
        self._logger.warning("export_listener_failed", listener=listener, error=error)

    def export_completed(
        self,
        output_path: str,
        status: str,
        groups: int,
        tracks: int,
        users: int,
    ) -> None:
        """Log completion; partial exports are logged as warnings."""
        log = self._logger.info if status == "success" else self._logger.warning
        log(
            "export_completed",
            output_path=output_path,
            status=status,
            groups=groups,
            tracks=tracks,
            users=users,
        )

    def export_failed(self, output_path: str, error: str) -> None:
        self._logger.error("export_failed", output_path=output_path, error=error)
