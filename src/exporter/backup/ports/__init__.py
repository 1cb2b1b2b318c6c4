"""Ports for the backup context.

Ports define the interfaces the export engine consumes. Storage backends,
caches and message listeners live outside the engine and plug in here.
"""

from backup.ports.observers import ExportObserver
from backup.ports.repositories import (
    IGroupManager,
    IPermissionStorage,
    ITrackManager,
    IUserCache,
)

__all__ = [
    "ExportObserver",
    "IGroupManager",
    "IPermissionStorage",
    "ITrackManager",
    "IUserCache",
]
