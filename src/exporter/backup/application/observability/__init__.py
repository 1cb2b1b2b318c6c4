"""Domain-Oriented Observability for the backup application layer."""

from backup.application.observability.export_probe import (
    DefaultExportProbe,
    ExportProbe,
)

__all__ = [
    "ExportProbe",
    "DefaultExportProbe",
]
