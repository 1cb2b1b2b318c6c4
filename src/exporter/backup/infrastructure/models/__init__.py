"""SQLAlchemy ORM models for the permission storage.

Permission assignments are stored one row per node, with the node's
server/world context as columns and any further contexts as JSON.
"""

from backup.infrastructure.models.group import GroupModel, GroupPermissionModel
from backup.infrastructure.models.track import TrackModel
from backup.infrastructure.models.user import PlayerModel, UserPermissionModel

__all__ = [
    "GroupModel",
    "GroupPermissionModel",
    "PlayerModel",
    "TrackModel",
    "UserPermissionModel",
]
