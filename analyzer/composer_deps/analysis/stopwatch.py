"""Wall-clock timer for a single analysis run."""

import time
from typing import Optional


class Stopwatch:
    """Measures elapsed seconds between start() and stop().

    Raises RuntimeError when started twice or stopped without being started.
    """

    def __init__(self) -> None:
        self._started_at: Optional[float] = None

    def start(self) -> None:
        if self._started_at is not None:
            raise RuntimeError("Stopwatch was already started")
        self._started_at = time.perf_counter()

    def stop(self) -> float:
        """Stop the watch and return the elapsed time in seconds."""
        if self._started_at is None:
            raise RuntimeError("Stopwatch was not started")
        elapsed = time.perf_counter() - self._started_at
        self._started_at = None
        return elapsed
