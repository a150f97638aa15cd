from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Tuple


Callback = Callable[[], None]


class Scheduler:
    """Deterministic millisecond clock for the engine's short delays.

    The host advances it from its own frame loop (or a test advances it by
    hand). Callbacks fire in due-time order, ties in scheduling order.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, Callback]] = []
        self._seq = itertools.count()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def call_later(self, delay_ms: float, callback: Callback) -> None:
        if delay_ms < 0:
            raise ValueError(f"delay must be non-negative, got {delay_ms}")
        heapq.heappush(self._queue, (self.now + float(delay_ms), next(self._seq), callback))

    def advance(self, ms: float) -> int:
        """Move the clock forward and run everything that became due."""
        if ms < 0:
            raise ValueError(f"cannot advance by a negative amount: {ms}")
        deadline = self.now + float(ms)
        fired = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
            fired += 1
        self.now = deadline
        return fired

    def flush(self) -> int:
        """Run every pending callback, including ones scheduled while flushing."""
        fired = 0
        while self._queue:
            fired += self.advance(max(0.0, self._queue[0][0] - self.now))
        return fired

    def clear(self) -> None:
        self._queue.clear()
