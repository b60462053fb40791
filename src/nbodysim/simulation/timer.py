"""High-resolution timer for benchmarking runs."""

from __future__ import annotations
import time


class Timer:
    """
    Wall-clock stopwatch.

    `elapsed` is measured up to `stop()`, or up to now while still running.
    """

    def __init__(self):
        self._start: float | None = None
        self._end: float | None = None

    def start(self) -> None:
        self._start = time.perf_counter()
        self._end = None

    def stop(self) -> float:
        """Stop the timer and return the elapsed seconds."""
        if self._start is None:
            raise RuntimeError("timer was never started")
        self._end = time.perf_counter()
        return self.elapsed

    @property
    def running(self) -> bool:
        return self._start is not None and self._end is None

    @property
    def elapsed(self) -> float:
        """Seconds between start and stop (0.0 if never started)."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return end - self._start

    def __enter__(self) -> Timer:
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
