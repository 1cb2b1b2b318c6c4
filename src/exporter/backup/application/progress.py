"""Progress reporting for long-running export jobs."""

from __future__ import annotations

from backup.application.observability import DefaultExportProbe, ExportProbe
from backup.ports.observers import ExportObserver

DEFAULT_NOTIFY_FREQUENCY = 500


class ProgressReporter:
    """Fans formatted status lines out to a set of registered listeners.

    Reports are best-effort snapshots: the counts passed in are not
    synchronized with the work they describe. A listener that fails to
    receive a message is recorded through the probe and skipped; the other
    listeners still get the message.
    """

    def __init__(
        self,
        label: str = "EXPORT",
        notify_frequency: int = DEFAULT_NOTIFY_FREQUENCY,
        probe: ExportProbe | None = None,
    ) -> None:
        if notify_frequency < 1:
            raise ValueError("notify_frequency must be >= 1")
        self._label = label
        self._notify_frequency = notify_frequency
        self._probe = probe or DefaultExportProbe()
        self._listeners: list[ExportObserver] = []

    @property
    def listeners(self) -> list[ExportObserver]:
        return list(self._listeners)

    def add_listener(self, listener: ExportObserver) -> None:
        """Register a listener; registering the same listener twice is a no-op."""
        if not any(existing is listener for existing in self._listeners):
            self._listeners.append(listener)

    def log(self, message: str) -> None:
        self.notify_all(f"{self._label} > {message}")

    def log_error(self, message: str) -> None:
        self.notify_all(f"{self._label} > Error -> {message}")

    def log_all_progress(self, template: str, count: int) -> None:
        """Report progress unconditionally.

        Args:
            template: Message with a ``{}`` placeholder for the count
            count: Current count
        """
        self.notify_all(f"{self._label} > {template.replace('{}', str(count))}")

    def log_progress(self, template: str, count: int) -> None:
        """Report progress only on every notify_frequency-th item."""
        if count % self._notify_frequency == 0:
            self.log_all_progress(template, count)

    def notify_all(self, message: str) -> None:
        """Deliver a raw message to every listener."""
        for listener in self._listeners:
            self.notify(listener, message)

    def notify(self, listener: ExportObserver, message: str) -> None:
        """Deliver a raw message to one listener."""
        try:
            listener.send_message(message)
        except Exception as e:
            self._probe.listener_failed(_describe(listener), str(e))


def _describe(listener: ExportObserver) -> str:
    try:
        return listener.display_name
    except Exception:
        return type(listener).__name__
