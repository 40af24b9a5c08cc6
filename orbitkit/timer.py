"""Wall-clock stopwatch."""

from __future__ import annotations

import time
from typing import Optional


class Timer:
    """Stopwatch measuring elapsed wall-clock seconds.

    Also usable as a context manager: started on entry, stopped on exit.
    """

    def __init__(self) -> None:
        self._elapsed = 0.0
        self._started_at: Optional[float] = None

    def start(self) -> None:
        """Start (or restart) timing."""
        self._started_at = time.perf_counter()

    def stop(self) -> None:
        """Stop timing and keep the elapsed time; resets it to 0 if not running."""
        if self._started_at is None:
            self._elapsed = 0.0
            return
        self._elapsed = time.perf_counter() - self._started_at
        self._started_at = None

    def read(self) -> float:
        """Return the time elapsed so far without stopping; 0 if not running."""
        if self._started_at is None:
            self._elapsed = 0.0
        else:
            self._elapsed = time.perf_counter() - self._started_at
        return self._elapsed

    def get(self) -> float:
        """Return the last measured elapsed time."""
        return self._elapsed

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()