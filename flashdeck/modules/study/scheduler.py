"""Single-threaded queue of delayed callbacks with an injectable clock.

Nothing runs in the background: callers drain the queue with ``run_due``
whenever they interact with it, so transitions fire in due order on the
caller's thread and tests can drive time with a fake clock.
"""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

Clock = Callable[[], float]


@dataclass(order=True)
class Timer:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class EventQueue:
    def __init__(self, clock: Clock = time.monotonic) -> None:
        self.clock = clock
        self._heap: list[Timer] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        timer = Timer(
            due=self.clock() + max(0.0, float(delay)),
            seq=next(self._seq),
            callback=callback,
        )
        heapq.heappush(self._heap, timer)
        return timer

    def next_due(self) -> Optional[float]:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
        return self._heap[0].due if self._heap else None

    @property
    def pending(self) -> int:
        return sum(1 for t in self._heap if not t.cancelled)

    def run_due(self) -> int:
        """Run every callback whose due time has passed, including ones they schedule."""
        ran = 0
        while True:
            due = self.next_due()
            if due is None or due > self.clock():
                return ran
            timer = heapq.heappop(self._heap)
            timer.callback()
            ran += 1

    def run_until_idle(self, sleep: Callable[[float], None] = time.sleep) -> int:
        """Block until the queue is empty, sleeping between due times."""
        ran = 0
        while True:
            due = self.next_due()
            if due is None:
                return ran
            wait = due - self.clock()
            if wait > 0:
                sleep(wait)
            ran += self.run_due()
