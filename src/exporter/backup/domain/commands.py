"""Rendering of permission assignments as replayable commands.

Every rendered command is a single line: the invocation prefix, a holder
selector, a subcommand and its arguments. Arguments containing whitespace
are double quoted so a command parser can split the line back into the
original tokens.
"""

from __future__ import annotations

from backup.domain.value_objects import (
    DEFAULT_GROUP_NAME,
    ContextSet,
    HolderType,
    Node,
)

COMMAND_PREFIX = "/lp"

_SPECIAL = frozenset("\"'\\")


def quote(argument: str) -> str:
    """Quote an argument if it would otherwise split into several tokens."""
    if argument == "" or any(ch.isspace() or ch in _SPECIAL for ch in argument):
        escaped = argument.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return argument


def format_contexts(contexts: ContextSet) -> list[str]:
    """Render contexts as key=value tokens, server and world first."""
    tokens: list[str] = []
    for key in ("server", "world"):
        tokens.extend(quote(f"{key}={value}") for value in contexts.get(key))
    tokens.extend(
        quote(f"{key}={value}")
        for key, value in contexts
        if key not in ("server", "world")
    )
    return tokens


def prefixed(command: str) -> str:
    """Prepend the invocation prefix to a subcommand."""
    return f"{COMMAND_PREFIX} {command}"


def node_as_command(node: Node, holder_id: str, holder_type: HolderType) -> str:
    """Render a node as the command that sets it on a holder.

    The returned command does not include the invocation prefix.

    Args:
        node: The permission assignment to render
        holder_id: Group name or user UUID string
        holder_type: Whether the holder is a group or a user

    Returns:
        The single-line command
    """
    tokens = [holder_type.value, holder_id]
    temp = "temp" if node.is_temporary else ""

    if node.value and node.group_name is not None:
        tokens += ["parent", f"add{temp}", quote(node.group_name)]
    elif node.value and node.chat_meta_type is not None:
        priority, text = node.chat_meta_entry  # type: ignore[misc]
        tokens += ["meta", f"add{temp}{node.chat_meta_type.value}", str(priority)]
        tokens.append(quote(text))
    elif node.value and node.meta_entry is not None:
        meta_key, meta_value = node.meta_entry
        tokens += ["meta", f"set{temp}", quote(meta_key), quote(meta_value)]
    else:
        tokens += ["permission", f"set{temp}", quote(node.key)]
        tokens.append("true" if node.value else "false")

    if node.is_temporary:
        tokens.append(str(node.expiry_unix_time))

    tokens += format_contexts(node.contexts)
    return " ".join(tokens)


def create_group(name: str) -> str:
    return prefixed(f"creategroup {name}")


def create_track(name: str) -> str:
    return prefixed(f"createtrack {name}")


def track_append(track_name: str, group_name: str) -> str:
    return prefixed(f"track {track_name} append {group_name}")


def switch_primary_group(holder_id: str, group_name: str) -> str:
    return prefixed(f"user {holder_id} switchprimarygroup {group_name}")


def remove_default_parent(holder_id: str) -> str:
    return prefixed(f"user {holder_id} parent remove {DEFAULT_GROUP_NAME}")
