"""Export listeners delivering progress messages to a terminal or the log."""

from __future__ import annotations

import structlog
from rich.console import Console
from rich.markup import escape


class ConsoleObserver:
    """Prints export messages to a rich console.

    Used for the operator who started the export from a terminal.
    """

    def __init__(self, display_name: str, console: Console | None = None) -> None:
        self._display_name = display_name
        self._console = console or Console(stderr=True)

    @property
    def display_name(self) -> str:
        return self._display_name

    def send_message(self, message: str) -> None:
        style = "red" if "Error ->" in message else "cyan"
        self._console.print(f"[{style}]{escape(message)}[/{style}]")


class LogObserver:
    """Forwards export messages to the structured log.

    Plays the role of the operational console: every message an export
    sends to its listeners also ends up in the application log.
    """

    def __init__(
        self,
        display_name: str = "log",
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._display_name = display_name
        self._logger = logger or structlog.get_logger().bind(component="export_log")

    @property
    def display_name(self) -> str:
        return self._display_name

    def send_message(self, message: str) -> None:
        self._logger.info("export_message", message=message)
