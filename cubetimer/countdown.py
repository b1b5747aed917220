"""Pre-roll countdown that runs before the stopwatch starts."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from . import config
from .scheduler import Scheduler, TimerHandle

log = logging.getLogger(__name__)


class Countdown:
    """
    Counts down from `start_from` once per `interval`.

    After `start()` the countdown shows `start_from`; every interval it
    decrements and reports the new value through `on_tick` until it reaches
    zero, at which point the timer is released and `on_complete` runs
    instead.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_tick: Optional[Callable[[int], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        interval: float = config.COUNTDOWN_INTERVAL,
    ) -> None:
        self.scheduler = scheduler
        self.on_tick = on_tick
        self.on_complete = on_complete
        self.interval = interval
        self.remaining = 0
        self._handle: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, start_from: int = config.COUNTDOWN_FROM) -> None:
        if self.active:
            raise RuntimeError("a countdown is already running")
        if start_from < 1:
            raise ValueError("start_from must be at least 1")
        self.remaining = start_from
        self._handle = self.scheduler.call_every(self.interval, self._on_timer)
        log.debug("Countdown started from %d", start_from)

    def cancel(self) -> None:
        """Stop the countdown. Does nothing if none is running."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        self.remaining = 0
        log.debug("Countdown cancelled")

    def _on_timer(self) -> None:
        self.remaining -= 1
        if self.remaining > 0:
            if self.on_tick is not None:
                self.on_tick(self.remaining)
            return

        # release before completing so the callback may start a new countdown
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self.on_complete is not None:
            self.on_complete()
