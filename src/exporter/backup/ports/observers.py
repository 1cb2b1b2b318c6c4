"""Listener protocol for export progress and results."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ExportObserver(Protocol):
    """Someone who receives export progress messages.

    Typically the actor who started the export and an operational console.
    """

    @property
    def display_name(self) -> str:
        """Name (with location, if any) used in the export header."""
        ...

    def send_message(self, message: str) -> None:
        """Deliver a human-readable message."""
        ...
