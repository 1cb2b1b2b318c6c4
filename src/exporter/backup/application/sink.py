"""Serializing writer for export output.

All output of an export job goes through one SerializingSink. A record
(the lines of one group, track or user) is written inside a single critical
section, so records emitted concurrently by user export tasks never
interleave.
"""

from __future__ import annotations

import asyncio
from typing import Sequence, TextIO

from backup.application.observability import DefaultExportProbe, ExportProbe
from backup.ports.exceptions import ExportWriteError


class SerializingSink:
    """Single logical writer guarded by an asyncio lock.

    The lock covers a whole record. The write itself does not yield to the
    event loop, so a task cancelled while waiting for the lock never leaves
    a record half written.

    A write failure is fatal: the sink raises ExportWriteError and refuses
    every later record, since a half-written record cannot be replayed.
    """

    def __init__(self, stream: TextIO, probe: ExportProbe | None = None) -> None:
        self._stream = stream
        self._probe = probe or DefaultExportProbe()
        self._lock = asyncio.Lock()
        self._failure: ExportWriteError | None = None

    async def emit(self, record: Sequence[str]) -> None:
        """Append all lines of a record atomically.

        Args:
            record: Ordered lines of one logical unit

        Raises:
            ExportWriteError: If the underlying write fails, now or earlier
        """
        lines = list(record)
        async with self._lock:
            self._check()
            try:
                self._stream.write("".join(f"{line}\n" for line in lines))
            except (OSError, ValueError) as e:
                # ValueError: write to a closed file
                self._fail(f"Failed to write export output: {e}", e)

    async def write_line(self, line: str = "") -> None:
        """Emit a single line as its own record."""
        await self.emit([line])

    async def flush(self) -> None:
        async with self._lock:
            self._check()
            try:
                self._stream.flush()
            except (OSError, ValueError) as e:
                self._fail(f"Failed to flush export output: {e}", e)

    def _check(self) -> None:
        if self._failure is not None:
            raise self._failure

    def _fail(self, message: str, cause: Exception) -> None:
        self._failure = ExportWriteError(message)
        self._probe.write_failed(str(cause))
        raise self._failure from cause
