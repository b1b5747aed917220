"""Millisecond stopwatch backed by the scheduler's clock."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from . import config
from .scheduler import Scheduler, TimerHandle

log = logging.getLogger(__name__)


class Stopwatch:
    """
    Measures one solve at a time.

    While running, a repeating timer samples the elapsed time every
    `interval` seconds and hands it to `on_sample` so a display can refresh.
    The samples are cosmetic: `stop()` always returns ``stop - start`` read
    from the clock.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_sample: Optional[Callable[[int], None]] = None,
        interval: float = config.SAMPLE_INTERVAL,
    ) -> None:
        self.scheduler = scheduler
        self.on_sample = on_sample
        self.interval = interval
        self._start: Optional[float] = None
        self._handle: Optional[TimerHandle] = None
        self.elapsed_millis = 0

    @property
    def running(self) -> bool:
        return self._start is not None

    def _measure(self) -> int:
        if self._start is None:
            raise RuntimeError("stopwatch is not running")
        return max(0, int((self.scheduler.now() - self._start) * 1000))

    def start(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self.elapsed_millis = 0
        self._start = self.scheduler.now()
        self._handle = self.scheduler.call_every(self.interval, self._on_timer)
        log.debug("Stopwatch started")

    def sample(self) -> int:
        self.elapsed_millis = self._measure()
        return self.elapsed_millis

    def _on_timer(self) -> None:
        elapsed = self.sample()
        if self.on_sample is not None:
            self.on_sample(elapsed)

    def stop(self) -> int:
        final = self._measure()
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._start = None
        self.elapsed_millis = final
        log.debug("Stopwatch stopped at %d ms", final)
        return final
