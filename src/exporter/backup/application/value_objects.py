"""Value objects for the backup application layer.

Every export stage reports a typed result instead of printing and moving
on; the export driver combines them into one ExportOutcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from backup.ports.exceptions import UserExportError


class ExportStatus(StrEnum):
    """Overall result of an export job."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class StageResult:
    """Result of a sequential export stage."""

    stage: str
    count: int


@dataclass(frozen=True)
class UserExportResult:
    """Result of the concurrent user stage.

    Attributes:
        total: Number of unique users found in storage
        exported: Number of user records emitted
        failures: Per-user failures that stopped the stage early
    """

    total: int
    exported: int
    failures: tuple[UserExportError, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.failures and self.exported == self.total


@dataclass(frozen=True)
class ExportOutcome:
    """Result of a whole export job."""

    status: ExportStatus
    output_path: Path
    groups: int = 0
    tracks: int = 0
    users: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> bool:
        return self.status is ExportStatus.SUCCESS
