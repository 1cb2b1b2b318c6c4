"""SQLAlchemy implementation of IPermissionStorage.

Every read opens its own session from the session factory, so concurrent
user loads run on separate pooled connections instead of queueing behind
one shared session.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backup.domain.aggregates import Group, Track, User
from backup.infrastructure.mappers import node_from_row
from backup.infrastructure.models import (
    GroupModel,
    GroupPermissionModel,
    PlayerModel,
    TrackModel,
    UserPermissionModel,
)
from backup.infrastructure.observability import DefaultStorageProbe, StorageProbe
from backup.infrastructure.user_cache import UserCache
from backup.ports.exceptions import UserNotFoundError
from backup.ports.repositories import IPermissionStorage


class SqlPermissionStorage(IPermissionStorage):
    """Reads groups, tracks and users from the permission tables.

    Loaded users are registered in the user cache; the export releases
    them through IUserCache.cleanup once they are written.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        user_cache: UserCache,
        probe: StorageProbe | None = None,
    ) -> None:
        """Initialize storage with a session factory.

        Args:
            session_factory: Factory for creating database sessions
            user_cache: Cache that loaded users are registered in
            probe: Optional domain probe for observability
        """
        self._session_factory = session_factory
        self._user_cache = user_cache
        self._probe = probe or DefaultStorageProbe()

    async def get_unique_users(self) -> set[UUID]:
        """Return every UUID holding at least one stored permission."""
        async with self._session_factory() as session:
            stmt = select(UserPermissionModel.uuid).distinct()
            result = await session.execute(stmt)
            raw_values = result.scalars().all()

        uuids: set[UUID] = set()
        for raw in raw_values:
            try:
                uuids.add(UUID(raw))
            except ValueError:
                self._probe.invalid_uuid_skipped(raw)

        self._probe.unique_users_listed(len(uuids))
        return uuids

    async def load_user(self, uuid: UUID) -> User:
        """Load a user's player data and permission rows.

        Raises:
            UserNotFoundError: If neither player data nor permissions exist
        """
        async with self._session_factory() as session:
            player_stmt = select(PlayerModel).where(PlayerModel.uuid == str(uuid))
            player = (await session.execute(player_stmt)).scalar_one_or_none()

            nodes_stmt = (
                select(UserPermissionModel)
                .where(UserPermissionModel.uuid == str(uuid))
                .order_by(UserPermissionModel.id)
            )
            rows = (await session.execute(nodes_stmt)).scalars().all()

        if player is None and not rows:
            self._probe.user_not_found(str(uuid))
            raise UserNotFoundError(uuid)

        user = User(
            uuid=uuid,
            username=player.username if player else None,
            nodes=[node_from_row(row) for row in rows],
            primary_group=player.primary_group if player else None,
        )
        self._user_cache.register(user)
        self._probe.user_loaded(str(uuid), len(user.nodes))
        return user

    async def load_all_groups(self) -> list[Group]:
        """Load every group with its nodes, in storage order."""
        async with self._session_factory() as session:
            names = (
                (await session.execute(select(GroupModel.name).order_by(GroupModel.name)))
                .scalars()
                .all()
            )
            rows = (
                (
                    await session.execute(
                        select(GroupPermissionModel).order_by(GroupPermissionModel.id)
                    )
                )
                .scalars()
                .all()
            )

        groups = {name.lower(): Group(name=name.lower()) for name in names}
        for row in rows:
            group = groups.get(row.name.lower())
            if group is not None:
                group.add_node(node_from_row(row))

        self._probe.groups_loaded(len(groups))
        return list(groups.values())

    async def load_all_tracks(self) -> list[Track]:
        """Load every track with its ordered group list."""
        async with self._session_factory() as session:
            models = (
                (await session.execute(select(TrackModel).order_by(TrackModel.name)))
                .scalars()
                .all()
            )

        tracks = [
            Track(name=model.name.lower(), groups=[g.lower() for g in model.groups or []])
            for model in models
        ]
        self._probe.tracks_loaded(len(tracks))
        return tracks
