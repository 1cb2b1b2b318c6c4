"""Unit test fixtures with in-memory collaborators."""

from __future__ import annotations

import asyncio
import random
import shlex
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

import pytest
from unittest.mock import MagicMock

from backup.domain.aggregates import Group, Track, User
from backup.domain.value_objects import (
    DEFAULT_GROUP_NAME,
    ChatMetaType,
    ContextSet,
    Node,
)


class FakePermissionStorage:
    """In-memory IPermissionStorage with per-user load delays.

    Delays are derived from a seeded RNG so that load completion order is
    shuffled relative to submission order, but reproducible.
    """

    def __init__(
        self,
        users: list[User],
        seed: int = 0,
        max_delay: float = 0.01,
        failing: frozenset[UUID] = frozenset(),
    ) -> None:
        self.users = {user.uuid: user for user in users}
        self.failing = failing
        self.loaded: list[UUID] = []
        self.unique_user_calls = 0
        self.max_concurrent_loads = 0
        self._active = 0
        rng = random.Random(seed)
        self._delays = {uuid: rng.uniform(0, max_delay) for uuid in self.users}

    async def get_unique_users(self) -> set[UUID]:
        self.unique_user_calls += 1
        return set(self.users)

    async def load_user(self, uuid: UUID) -> User:
        self._active += 1
        self.max_concurrent_loads = max(self.max_concurrent_loads, self._active)
        try:
            await asyncio.sleep(self._delays.get(uuid, 0))
            if uuid in self.failing:
                raise RuntimeError("storage unavailable")
            self.loaded.append(uuid)
            return self.users[uuid]
        finally:
            self._active -= 1


class RecordingObserver:
    """ExportObserver collecting every message it receives."""

    def __init__(self, display_name: str = "tester@localhost") -> None:
        self._display_name = display_name
        self.messages: list[str] = []

    @property
    def display_name(self) -> str:
        return self._display_name

    def send_message(self, message: str) -> None:
        self.messages.append(message)


def node_signature(node: Node) -> tuple:
    """Comparable form of a node, independent of context ordering."""
    return (node.key, node.value, node.expiry, tuple(sorted(node.contexts.pairs)))


@dataclass
class ReplayedUser:
    nodes: list[Node] = field(
        default_factory=lambda: [Node.group(DEFAULT_GROUP_NAME)]
    )
    primary_group: str = DEFAULT_GROUP_NAME


@dataclass
class ReplayedState:
    """State rebuilt by executing an export script against an empty target."""

    groups: dict[str, list[Node]] = field(
        default_factory=lambda: {DEFAULT_GROUP_NAME: []}
    )
    tracks: dict[str, list[str]] = field(default_factory=dict)
    users: dict[str, ReplayedUser] = field(default_factory=dict)


class ScriptReplayer:
    """Executes export scripts line by line against a fresh ReplayedState."""

    def replay(self, script: str) -> ReplayedState:
        state = ReplayedState()
        for line in script.splitlines():
            if not line or line.startswith("#"):
                continue
            tokens = shlex.split(line)
            assert tokens[0] == "/lp", line
            self._execute(state, tokens[1:], line)
        return state

    def _execute(self, state: ReplayedState, args: list[str], line: str) -> None:
        match args:
            case ["creategroup", name]:
                assert name not in state.groups, line
                state.groups[name] = []
            case ["createtrack", name]:
                assert name not in state.tracks, line
                state.tracks[name] = []
            case ["track", name, "append", group]:
                assert group in state.groups, line
                state.tracks[name].append(group)
            case ["group", name, *rest]:
                assert name in state.groups, line
                self._apply(state.groups[name], rest, line)
            case ["user", uuid, "switchprimarygroup", group]:
                state.users.setdefault(uuid, ReplayedUser()).primary_group = group
            case ["user", uuid, *rest]:
                self._apply(state.users.setdefault(uuid, ReplayedUser()).nodes, rest, line)
            case _:
                raise AssertionError(f"Unknown command: {line}")

    def _apply(self, nodes: list[Node], args: list[str], line: str) -> None:
        match args:
            case ["parent", "add", group, *ctx]:
                nodes.append(Node.group(group, contexts=_contexts(ctx)))
            case ["parent", "addtemp", group, expiry, *ctx]:
                nodes.append(
                    Node.group(group, expiry=_expiry(expiry), contexts=_contexts(ctx))
                )
            case ["parent", "remove", group, *ctx]:
                removed = Node.group(group, contexts=_contexts(ctx))
                nodes[:] = [
                    n for n in nodes if node_signature(n) != node_signature(removed)
                ]
            case ["permission", "set", key, value, *ctx]:
                nodes.append(Node(key=key, value=value == "true", contexts=_contexts(ctx)))
            case ["permission", "settemp", key, value, expiry, *ctx]:
                nodes.append(
                    Node(
                        key=key,
                        value=value == "true",
                        expiry=_expiry(expiry),
                        contexts=_contexts(ctx),
                    )
                )
            case ["meta", "set", key, value, *ctx]:
                nodes.append(Node.meta(key, value, contexts=_contexts(ctx)))
            case ["meta", "settemp", key, value, expiry, *ctx]:
                nodes.append(
                    Node.meta(key, value, expiry=_expiry(expiry), contexts=_contexts(ctx))
                )
            case ["meta", action, priority, text, *rest] if action.startswith("add"):
                temporary = action.startswith("addtemp")
                meta_type = ChatMetaType(action.removeprefix("addtemp").removeprefix("add"))
                expiry = _expiry(rest.pop(0)) if temporary else None
                nodes.append(
                    Node.chat_meta(
                        meta_type, int(priority), text, expiry=expiry, contexts=_contexts(rest)
                    )
                )
            case _:
                raise AssertionError(f"Unknown holder command: {line}")


def _contexts(tokens: list[str]) -> ContextSet:
    return ContextSet(pairs=tuple(tuple(token.split("=", 1)) for token in tokens))


def _expiry(token: str) -> datetime:
    return datetime.fromtimestamp(int(token), tz=UTC)


@pytest.fixture
def replayer():
    """Provide a script replayer."""
    return ScriptReplayer()


@pytest.fixture
def observer():
    """Provide a recording export observer."""
    return RecordingObserver()


@pytest.fixture
def mock_probe():
    """Provide a mock export probe."""
    return MagicMock()


@pytest.fixture
def sample_groups():
    """Provide the admin/mod/default group set."""
    return [
        Group.create(
            "default",
            weight=0,
            nodes=[Node(key="essentials.spawn")],
        ),
        Group.create(
            "mod",
            weight=5,
            nodes=[Node(key="essentials.kick"), Node.group("default")],
        ),
        Group.create(
            "admin",
            weight=10,
            nodes=[Node(key="essentials.ban"), Node.group("mod")],
        ),
    ]


@pytest.fixture
def sample_tracks():
    """Provide a staff track."""
    return [Track.create("staff", groups=["default", "mod", "admin"])]


@pytest.fixture
def storage_factory():
    """Provide a factory for fake permission storage."""
    return FakePermissionStorage
