"""SQLAlchemy ORM model for the tracks table."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class TrackModel(Base):
    """ORM model for the tracks table.

    The member groups are stored as an ordered JSON list of group names.
    """

    __tablename__ = "permscript_tracks"

    name: Mapped[str] = mapped_column(String(36), primary_key=True)
    groups: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TrackModel(name={self.name}, groups={self.groups})>"
