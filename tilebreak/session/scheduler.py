"""
Scheduler - Deferred callbacks owned by the presentation layer.

The opponent's "thinking time" is a scheduled callback, never a sleep
inside the engine. The host loop decides when callbacks run.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable
import heapq
import itertools


class Scheduler(ABC):
    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]):
        """Run callback after delay seconds."""
        pass


class ManualScheduler(Scheduler):
    """
    Scheduler driven by its owner.

    Time only moves when advance() is called. run_pending() runs every
    queued callback in due order, including ones scheduled while running.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]):
        heapq.heappush(self._queue, (self.now + max(0.0, delay), next(self._seq), callback))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def next_delay(self) -> float | None:
        """Seconds until the next callback is due, or None when idle."""
        if not self._queue:
            return None
        return max(0.0, self._queue[0][0] - self.now)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run what became due. Returns the count run."""
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
            ran += 1
        self.now = target
        return ran

    def run_pending(self) -> int:
        """Run everything queued, jumping the clock to each due time."""
        ran = 0
        while self._queue:
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
            ran += 1
        return ran
