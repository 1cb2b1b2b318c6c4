"""Column layout shared by the group and user permission tables."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

GLOBAL_CONTEXT = "global"


class PermissionColumnsMixin:
    """Mixin providing the columns of one stored node.

    ``server``/``world`` use ``"global"`` for "not set" and ``expiry`` uses
    0 for a permanent node. ``contexts`` holds any other context pairs as a
    JSON list of ``[key, value]`` pairs.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    permission: Mapped[str] = mapped_column(String(200), nullable=False)
    value: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    server: Mapped[str] = mapped_column(
        String(36), nullable=False, default=GLOBAL_CONTEXT
    )
    world: Mapped[str] = mapped_column(
        String(64), nullable=False, default=GLOBAL_CONTEXT
    )
    expiry: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    contexts: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
