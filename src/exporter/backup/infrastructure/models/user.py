"""SQLAlchemy ORM models for the user tables."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from backup.infrastructure.models.permission import PermissionColumnsMixin
from infrastructure.database.models import Base


class PlayerModel(Base):
    """ORM model for the players table (username and primary group)."""

    __tablename__ = "permscript_players"

    uuid: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str | None] = mapped_column(String(16), nullable=True, index=True)
    primary_group: Mapped[str | None] = mapped_column(String(36), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<PlayerModel(uuid={self.uuid}, username={self.username})>"


class UserPermissionModel(Base, PermissionColumnsMixin):
    """ORM model for the user permissions table (one row per node).

    No foreign key to players: a user can hold permissions without ever
    having been seen with a username.
    """

    __tablename__ = "permscript_user_permissions"

    uuid: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<UserPermissionModel(uuid={self.uuid}, "
            f"permission={self.permission}, value={self.value})>"
        )
