"""Application services for the backup context.

Application services orchestrate the export stages and own the output
resource for the lifetime of a job.
"""

from backup.application.services.export_service import ExportService

__all__ = [
    "ExportService",
]
