"""SQLAlchemy ORM models for the group tables."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from backup.infrastructure.models.permission import PermissionColumnsMixin
from infrastructure.database.models import Base


class GroupModel(Base):
    """ORM model for the groups table.

    A group row only records that the group exists; everything else about
    a group, including its weight, is stored as permission rows.
    """

    __tablename__ = "permscript_groups"

    name: Mapped[str] = mapped_column(String(36), primary_key=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<GroupModel(name={self.name})>"


class GroupPermissionModel(Base, PermissionColumnsMixin):
    """ORM model for the group permissions table (one row per node)."""

    __tablename__ = "permscript_group_permissions"

    name: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("permscript_groups.name", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GroupPermissionModel(name={self.name}, "
            f"permission={self.permission}, value={self.value})>"
        )
