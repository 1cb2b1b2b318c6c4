"""Domain-Oriented Observability for the backup infrastructure layer."""

from backup.infrastructure.observability.storage_probe import (
    DefaultStorageProbe,
    StorageProbe,
)

__all__ = [
    "StorageProbe",
    "DefaultStorageProbe",
]
