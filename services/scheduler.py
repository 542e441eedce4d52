"""
Timer service for the simulation.

Mirrors the shape of Kivy's Clock (schedule_once / schedule_interval,
events with cancel()) but keeps its own queue and reads time from an
injectable clock. The Kivy app pumps run_pending() from a real Clock
interval; tests drive a ManualClock through advance() so every timer fires
at its exact due time.
"""

from __future__ import annotations

import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple


Callback = Callable[[], None]


class ManualClock:
    """A clock that only moves when told to. Calling it returns the current time."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def set(self, t: float) -> None:
        """Move the clock to t; time never runs backwards."""
        if t < self.now:
            raise ValueError("ManualClock cannot move backwards.")
        self.now = float(t)


class ScheduledEvent:
    """Handle for a scheduled callback; cancel() stops any future firing."""

    def __init__(self, callback: Callback, due: float, interval: Optional[float]) -> None:
        self.callback = callback
        self.due = due
        self.interval = interval
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        """True while the event may still fire."""
        if self.cancelled:
            return False
        return self.interval is not None or not self.fired

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """
    Single-threaded timer queue ordered by due time.

    Callbacks run synchronously inside run_pending(), one at a time, in
    due-time order (ties in scheduling order). Interval events are
    re-queued before their callback runs so the callback may cancel them.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._queue: List[Tuple[float, int, ScheduledEvent]] = []
        self._seq = itertools.count()
        self._events: List[ScheduledEvent] = []

    def now(self) -> float:
        return float(self._clock())

    def _push(self, event: ScheduledEvent) -> None:
        heapq.heappush(self._queue, (event.due, next(self._seq), event))

    def schedule_once(self, callback: Callback, delay: float) -> ScheduledEvent:
        """Run callback once, delay seconds from now."""
        if delay < 0:
            raise ValueError("delay must be >= 0.")
        event = ScheduledEvent(callback, self.now() + delay, None)
        self._push(event)
        self._track(event)
        return event

    def schedule_interval(self, callback: Callback, interval: float) -> ScheduledEvent:
        """Run callback every interval seconds, first firing one interval from now."""
        if interval <= 0:
            raise ValueError("interval must be > 0.")
        event = ScheduledEvent(callback, self.now() + interval, interval)
        self._push(event)
        self._track(event)
        return event

    def _track(self, event: ScheduledEvent) -> None:
        self._events = [e for e in self._events if e.active]
        self._events.append(event)

    def pending(self) -> int:
        """Number of events that may still fire."""
        return sum(1 for e in self._events if e.active)

    def cancel_all(self) -> None:
        """Cancel every outstanding event (teardown)."""
        for event in self._events:
            event.cancel()
        self._events = []
        self._queue = []

    def run_pending(self) -> int:
        """
        Fire every event due at or before the current time.

        Returns:
            int: Number of callbacks invoked.
        """
        now = self.now()
        fired = 0
        while self._queue and self._queue[0][0] <= now:
            due, _, event = heapq.heappop(self._queue)
            if event.cancelled:
                continue
            if event.interval is not None:
                event.due = due + event.interval
                self._push(event)
            event.fired = True
            event.callback()
            fired += 1
        return fired

    def advance(self, seconds: float) -> int:
        """
        Move a ManualClock forward, firing each event at its own due time.

        Raises:
            TypeError: if the scheduler is not driven by a ManualClock.
        """
        clock = self._clock
        if not isinstance(clock, ManualClock):
            raise TypeError("advance() requires a ManualClock.")
        if seconds < 0:
            raise ValueError("seconds must be >= 0.")
        target = clock.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            clock.set(max(clock.now, self._queue[0][0]))
            fired += self.run_pending()
        clock.set(target)
        fired += self.run_pending()
        return fired
