"""Domain aggregates for the backup context.

Aggregates are read-only snapshots of the stored permission model as far as
the export is concerned.
"""

from backup.domain.aggregates.group import Group
from backup.domain.aggregates.track import Track
from backup.domain.aggregates.user import User

__all__ = [
    "Group",
    "Track",
    "User",
]
