"""Minimal discrete-event scheduler.

Events are ordered by time, then by insertion order, so events scheduled for
the same instant run in the order they were scheduled.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(order=True)
class Event:
    """A scheduled callback."""

    time_s: float
    seq: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple[Any, ...] = field(default=(), compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class EventScheduler:
    """Run callbacks at simulated instants.

    Example:
        >>> scheduler = EventScheduler()
        >>> _ = scheduler.schedule(2.0, print, "tick")
        >>> scheduler.run(until=5.0)
        tick
        >>> scheduler.now
        5.0
    """

    def __init__(self, start_time_s: float = 0.0):
        self._now = start_time_s
        self._queue: list[Event] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        """Current simulated time (s)."""
        return self._now

    def schedule(self, delay_s: float, callback: Callable[..., Any], *args: Any) -> Event:
        """Schedule ``callback(*args)`` after ``delay_s`` seconds."""
        if delay_s < 0:
            raise ValueError(f"delay_s must be >= 0, got {delay_s}")
        return self.schedule_at(self._now + delay_s, callback, *args)

    def schedule_at(self, time_s: float, callback: Callable[..., Any], *args: Any) -> Event:
        """Schedule ``callback(*args)`` at absolute time ``time_s``."""
        if time_s < self._now:
            raise ValueError(f"Cannot schedule at {time_s}, current time is {self._now}")
        event = Event(time_s, next(self._seq), callback, args)
        heapq.heappush(self._queue, event)
        return event

    def step(self) -> bool:
        """Run the next pending event.

        Returns:
            False if no event was pending.
        """
        while self._queue:
            event = heapq.heappop(self._queue)
            if event.cancelled:
                continue
            self._now = event.time_s
            event.callback(*event.args)
            return True
        return False

    def run(self, until: float | None = None) -> None:
        """Run events in time order.

        Args:
            until: Stop before events later than this time and advance the
                clock to it. Runs until the queue is empty when None.
        """
        while self._queue:
            if until is not None and self._queue[0].time_s > until:
                break
            self.step()
        if until is not None and until > self._now:
            self._now = until

    def pending(self) -> int:
        """Number of pending, non-cancelled events."""
        return sum(1 for e in self._queue if not e.cancelled)

    def stop(self) -> None:
        """Drop every pending event."""
        self._queue.clear()
