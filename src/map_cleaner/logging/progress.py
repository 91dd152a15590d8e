"""Console progress reporting."""

from __future__ import annotations

import sys
from typing import TextIO

PROGRESS_TICK_INTERVAL = 1000


class ProgressReporter:
    """Writes progress lines and counter ticks to a text stream."""

    def __init__(self, stream: TextIO | None = None, quiet: bool = False) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._quiet = quiet
        self._tick_open = False

    def line(self, message: str) -> None:
        """Write one progress line."""
        if self._quiet:
            return
        if self._tick_open:
            self._stream.write("\n")
            self._tick_open = False
        self._stream.write(f"{message}\n")
        self._stream.flush()

    def tick(self, count: int, interval: int = PROGRESS_TICK_INTERVAL) -> None:
        """Write a running counter every `interval` items, on a single line."""
        if self._quiet or count % interval != 0:
            return
        self._stream.write(f"{count}..")
        self._stream.flush()
        self._tick_open = True

    @classmethod
    def silent(cls) -> ProgressReporter:
        """Return a reporter that discards all output."""
        return cls(quiet=True)
