"""Value objects for the backup domain.

Value objects are immutable descriptors for permission assignments (nodes),
their context metadata and the holders they are attached to.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

DEFAULT_GROUP_NAME = "default"

MAX_NAME_LENGTH = 36

_NAME_PATTERN = re.compile(r"^[a-z0-9_\-]+$")

# Node keys use "." as a delimiter; "\." escapes a literal dot.
_UNESCAPED_DOT = re.compile(r"(?<!\\)\.")


class InvalidNameError(ValueError):
    """Raised when a group or track name does not satisfy the naming rules."""


def validate_name(name: str) -> str:
    """Normalize and validate a group or track name.

    Args:
        name: Raw name as supplied by storage or a caller

    Returns:
        The lower-cased name

    Raises:
        InvalidNameError: If the name is empty, too long, or contains
            characters outside of [a-z0-9_-]
    """
    normalized = name.lower()
    if not normalized or len(normalized) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            f"Name must be between 1 and {MAX_NAME_LENGTH} characters: {name!r}"
        )
    if not _NAME_PATTERN.match(normalized):
        raise InvalidNameError(f"Name contains invalid characters: {name!r}")
    return normalized


def escape_delimiters(text: str) -> str:
    """Escape node key delimiters inside a key segment."""
    return text.replace(".", "\\.")


def unescape_delimiters(text: str) -> str:
    """Reverse escape_delimiters."""
    return text.replace("\\.", ".")


def _split_key(key: str, parts: int) -> list[str] | None:
    segments = _UNESCAPED_DOT.split(key, maxsplit=parts - 1)
    if len(segments) != parts:
        return None
    return segments


def _canonical_key(key: str) -> str:
    """Escape delimiters inside the free-text segment of meta and chat meta keys.

    ``prefix.10.Mr. Smith`` and ``prefix.10.Mr\\. Smith`` name the same
    prefix; both become the latter, which is also what Node.chat_meta builds.
    """
    segments = _split_key(key, 3)
    if segments is None:
        return key
    kind, middle, text = segments
    if kind.lower() != "meta":
        if kind.lower() not in {t.value for t in ChatMetaType}:
            return key
        try:
            int(middle)
        except ValueError:
            return key
    return f"{kind}.{middle}.{escape_delimiters(unescape_delimiters(text))}"


class HolderType(StrEnum):
    """The kind of entity a node is attached to."""

    USER = "user"
    GROUP = "group"


class ChatMetaType(StrEnum):
    """Chat meta node kinds carrying a priority and a text value."""

    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True)
class ContextSet:
    """Ordered, immutable set of context key/value pairs.

    Keys are stored lower-case. Duplicate pairs are collapsed while the
    first-seen order is kept, since the rendered command keeps that order.
    """

    pairs: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        seen: list[tuple[str, str]] = []
        for key, value in self.pairs:
            pair = (key.lower(), value)
            if pair not in seen:
                seen.append(pair)
        object.__setattr__(self, "pairs", tuple(seen))

    @classmethod
    def of(cls, **contexts: str) -> ContextSet:
        """Build a context set from keyword arguments."""
        return cls(pairs=tuple(contexts.items()))

    def is_empty(self) -> bool:
        return not self.pairs

    def get(self, key: str) -> list[str]:
        """Return all values stored under a key, in order."""
        key = key.lower()
        return [v for k, v in self.pairs if k == key]

    @property
    def server(self) -> str | None:
        values = self.get("server")
        return values[0] if values else None

    @property
    def world(self) -> str | None:
        values = self.get("world")
        return values[0] if values else None

    def __iter__(self):
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


@dataclass(frozen=True)
class Node:
    """A single permission assignment attached to a group or a user.

    The node key encodes what kind of assignment it is:

    - ``group.<name>``: membership of (inheritance from) another group
    - ``weight.<n>``: the ordering weight of a group
    - ``prefix.<priority>.<text>`` / ``suffix.<priority>.<text>``: chat meta
    - ``meta.<key>.<value>``: arbitrary meta data
    - anything else: a plain permission string

    Context and expiry are opaque to the export and re-serialized verbatim.
    """

    key: str
    value: bool = True
    expiry: datetime | None = None
    contexts: ContextSet = field(default_factory=ContextSet)

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Node key must not be empty")
        object.__setattr__(self, "key", _canonical_key(self.key))
        if self.expiry is not None:
            expiry = self.expiry
            if expiry.tzinfo is None:
                expiry = expiry.replace(tzinfo=UTC)
            object.__setattr__(self, "expiry", expiry.replace(microsecond=0))

    @classmethod
    def group(cls, group_name: str, **kwargs) -> Node:
        """Create a group membership node."""
        return cls(key=f"group.{group_name.lower()}", **kwargs)

    @classmethod
    def weight_node(cls, weight: int) -> Node:
        """Create a weight node."""
        return cls(key=f"weight.{weight}")

    @classmethod
    def chat_meta(
        cls, meta_type: ChatMetaType, priority: int, text: str, **kwargs
    ) -> Node:
        """Create a prefix or suffix node."""
        return cls(
            key=f"{meta_type.value}.{priority}.{escape_delimiters(text)}", **kwargs
        )

    @classmethod
    def meta(cls, meta_key: str, meta_value: str, **kwargs) -> Node:
        """Create a meta node."""
        return cls(
            key=f"meta.{escape_delimiters(meta_key)}.{escape_delimiters(meta_value)}",
            **kwargs,
        )

    @property
    def is_temporary(self) -> bool:
        return self.expiry is not None

    @property
    def expiry_unix_time(self) -> int | None:
        if self.expiry is None:
            return None
        return int(self.expiry.timestamp())

    @property
    def is_group_node(self) -> bool:
        return self.group_name is not None

    @property
    def group_name(self) -> str | None:
        """Return the group this node grants membership of, if any."""
        prefix, _, rest = self.key.partition(".")
        if prefix.lower() != "group" or not rest:
            return None
        return rest.lower()

    @property
    def weight(self) -> int | None:
        """Return the weight carried by a weight node, if any."""
        prefix, _, rest = self.key.partition(".")
        if prefix.lower() != "weight" or not rest:
            return None
        try:
            return int(rest)
        except ValueError:
            return None

    @property
    def chat_meta_type(self) -> ChatMetaType | None:
        segments = _split_key(self.key, 3)
        if segments is None:
            return None
        try:
            meta_type = ChatMetaType(segments[0].lower())
        except ValueError:
            return None
        try:
            int(segments[1])
        except ValueError:
            return None
        return meta_type

    @property
    def chat_meta_entry(self) -> tuple[int, str] | None:
        """Return (priority, text) for prefix/suffix nodes."""
        if self.chat_meta_type is None:
            return None
        segments = _split_key(self.key, 3)
        assert segments is not None
        return int(segments[1]), unescape_delimiters(segments[2])

    @property
    def meta_entry(self) -> tuple[str, str] | None:
        """Return (key, value) for meta nodes."""
        segments = _split_key(self.key, 3)
        if segments is None or segments[0].lower() != "meta":
            return None
        return unescape_delimiters(segments[1]), unescape_delimiters(segments[2])
