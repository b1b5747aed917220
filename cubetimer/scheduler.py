"""
Cooperative timers for the single-threaded main loop.

Nothing here sleeps or spawns threads. The owner of the loop calls
`Scheduler.run_due()` every time it wakes up (after a key poll times out, for
example) and every timer whose due time has passed fires on that thread.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

Clock = Callable[[], float]


class TimerHandle:
    """A scheduled callback. Keep it around to cancel it."""

    def __init__(
        self,
        when: float,
        callback: Callable[[], None],
        interval: Optional[float] = None,
    ) -> None:
        self.when = when
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else f"due={self.when:.3f}"
        return f"<TimerHandle {state} interval={self.interval}>"


class Scheduler:
    def __init__(self, clock: Clock = time.monotonic) -> None:
        self.clock = clock
        self._handles: List[TimerHandle] = []

    def now(self) -> float:
        return self.clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now() + delay, callback)
        self._handles.append(handle)
        return handle

    def call_every(
        self, interval: float, callback: Callable[[], None]
    ) -> TimerHandle:
        """Fire `callback` every `interval` seconds, the first time after one interval."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(self.now() + interval, callback, interval)
        self._handles.append(handle)
        return handle

    def pending(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled)

    def next_due(self) -> Optional[float]:
        """Seconds until the next timer is due (0 if overdue), None if idle."""
        live = [h.when for h in self._handles if not h.cancelled]
        if not live:
            return None
        return max(0.0, min(live) - self.now())

    def run_due(self) -> int:
        """
        Fire every timer that is due, earliest first, and return how many
        callbacks ran.

        A repeating timer is moved forward by its interval from the previous
        due time rather than from now, so a late loop catches up instead of
        drifting. Callbacks may schedule or cancel timers; a timer cancelled
        by an earlier callback in the same pass does not fire.
        """
        now = self.now()
        fired = 0
        while True:
            self._handles = [h for h in self._handles if not h.cancelled]
            due = [h for h in self._handles if h.when <= now]
            if not due:
                return fired

            handle = min(due, key=lambda h: h.when)
            if handle.repeating:
                handle.when += handle.interval
            else:
                handle.cancel()

            handle.callback()
            fired += 1
