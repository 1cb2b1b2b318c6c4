"""Mapping between permission rows and domain nodes."""

from __future__ import annotations

from datetime import UTC, datetime

from backup.domain.value_objects import ContextSet, Node
from backup.infrastructure.models.permission import (
    GLOBAL_CONTEXT,
    PermissionColumnsMixin,
)


def node_from_row(row: PermissionColumnsMixin) -> Node:
    """Convert a stored permission row into a Node."""
    pairs: list[tuple[str, str]] = []
    if row.server and row.server.lower() != GLOBAL_CONTEXT:
        pairs.append(("server", row.server))
    if row.world and row.world.lower() != GLOBAL_CONTEXT:
        pairs.append(("world", row.world))
    for key, value in row.contexts or ():
        pairs.append((str(key), str(value)))

    expiry = None
    if row.expiry:
        expiry = datetime.fromtimestamp(row.expiry, tz=UTC)

    return Node(
        key=row.permission,
        value=bool(row.value),
        expiry=expiry,
        contexts=ContextSet(pairs=tuple(pairs)),
    )
