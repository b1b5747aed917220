"""
The timing state machine.

    Idle --tap--> Countdown(5) --tick x5--> Running --tap--> ShowingResult --tap--> Idle
                      |
                      +--tap--> Idle

`transition` is a pure function from (phase, event) to the next phase and a
list of effects. `TimerController` owns the one live phase, runs the effects
(countdown, stopwatch, sound, store writes) and feeds timer callbacks back in
as events.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union

from . import config, scramble
from .countdown import Countdown as CountdownSequencer
from .errors import StoreWriteError
from .scheduler import Scheduler
from .sound import Silent, SoundCue
from .stats import average_of_last_n, load_history
from .stopwatch import Stopwatch
from .store import Solve, SolveStore, utc_now

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolveResult:
    time_millis: int
    # negative = faster than the trailing average, positive = slower
    compared_to_average_millis: Optional[int]


# Phases


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Countdown:
    remaining: int


@dataclass(frozen=True)
class Running:
    elapsed_millis: int = 0


@dataclass(frozen=True)
class ShowingResult:
    result: SolveResult
    store_error: Optional[StoreWriteError] = None


TimerPhase = Union[Idle, Countdown, Running, ShowingResult]


# Events


@dataclass(frozen=True)
class Tap:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Sample:
    elapsed_millis: int


@dataclass(frozen=True)
class SolveFinished:
    result: SolveResult
    store_error: Optional[StoreWriteError] = None


Event = Union[Tap, Tick, Sample, SolveFinished]


class Effect(enum.Enum):
    START_COUNTDOWN = "start_countdown"
    CANCEL_COUNTDOWN = "cancel_countdown"
    PLAY_START_CUE = "play_start_cue"
    START_STOPWATCH = "start_stopwatch"
    FINISH_SOLVE = "finish_solve"
    NEW_SCRAMBLE = "new_scramble"


def transition(
    phase: TimerPhase, event: Event, countdown_from: int = config.COUNTDOWN_FROM
) -> Tuple[TimerPhase, List[Effect]]:
    """Next phase and the effects to run. Events a phase does not expect leave it unchanged."""
    if isinstance(phase, Idle):
        if isinstance(event, Tap):
            return Countdown(countdown_from), [Effect.START_COUNTDOWN]

    elif isinstance(phase, Countdown):
        if isinstance(event, Tap):
            return Idle(), [Effect.CANCEL_COUNTDOWN]
        if isinstance(event, Tick):
            if phase.remaining > 1:
                return Countdown(phase.remaining - 1), []
            return Running(0), [Effect.PLAY_START_CUE, Effect.START_STOPWATCH]

    elif isinstance(phase, Running):
        if isinstance(event, Sample):
            return Running(event.elapsed_millis), []
        if isinstance(event, Tap):
            return phase, [Effect.FINISH_SOLVE]
        if isinstance(event, SolveFinished):
            return ShowingResult(event.result, event.store_error), []

    elif isinstance(phase, ShowingResult):
        if isinstance(event, Tap):
            return Idle(), [Effect.NEW_SCRAMBLE]

    else:
        raise TypeError(f"unknown phase {phase!r}")

    return phase, []


def compare_to_average(
    time_millis: int,
    prior: Sequence[Solve],
    window: int = config.AVERAGE_WINDOW,
) -> Optional[int]:
    """Signed difference to the average of the last `window` prior solves; None without history."""
    average = average_of_last_n(prior, window)
    if average is None:
        return None
    return time_millis - int(average)


Listener = Callable[["TimerController"], None]


class TimerController:
    """
    Owns the timer phase and everything with side effects: the countdown,
    the stopwatch, the start cue and writes to the solve store.

    Display code reads `phase`, `visible_scramble` and `result`, and
    registers a listener to hear about phase changes.
    """

    def __init__(
        self,
        store: SolveStore,
        sound: Optional[SoundCue] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        countdown_from: int = config.COUNTDOWN_FROM,
        timestamp: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.sound = sound or Silent()
        self.scheduler = scheduler or Scheduler()
        self.rng = rng or random.Random()
        self.countdown_from = countdown_from
        self.timestamp = timestamp

        self.countdown = CountdownSequencer(
            self.scheduler,
            on_tick=lambda remaining: self.dispatch(Tick()),
            on_complete=lambda: self.dispatch(Tick()),
        )
        self.stopwatch = Stopwatch(
            self.scheduler, on_sample=lambda elapsed: self.dispatch(Sample(elapsed))
        )

        self.phase: TimerPhase = Idle()
        self.scramble = scramble.generate(rng=self.rng)
        self.last_error: Optional[StoreWriteError] = None
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @property
    def visible_scramble(self) -> Optional[str]:
        return self.scramble if isinstance(self.phase, Idle) else None

    @property
    def result(self) -> Optional[SolveResult]:
        return self.phase.result if isinstance(self.phase, ShowingResult) else None

    def tap(self) -> None:
        self.dispatch(Tap())

    def dispatch(self, event: Event) -> None:
        new_phase, effects = transition(self.phase, event, self.countdown_from)
        changed = new_phase != self.phase
        if changed:
            log.debug("%s -> %s on %s", self.phase, new_phase, event)
        self.phase = new_phase

        for effect in effects:
            self._run(effect)

        if changed:
            for listener in self._listeners:
                listener(self)

    def _run(self, effect: Effect) -> None:
        if effect is Effect.START_COUNTDOWN:
            self.countdown.start(self.countdown_from)
        elif effect is Effect.CANCEL_COUNTDOWN:
            self.countdown.cancel()
        elif effect is Effect.PLAY_START_CUE:
            self.sound.play_start_cue()
        elif effect is Effect.START_STOPWATCH:
            self.stopwatch.start()
        elif effect is Effect.FINISH_SOLVE:
            self._finish_solve()
        elif effect is Effect.NEW_SCRAMBLE:
            self.scramble = scramble.generate(rng=self.rng)

    def _finish_solve(self) -> None:
        elapsed = self.stopwatch.stop()
        # compare against the history as it was before this solve
        prior = load_history(self.store)
        compared = compare_to_average(elapsed, prior)

        error: Optional[StoreWriteError] = None
        try:
            self.store.create(elapsed, self.timestamp())
        except StoreWriteError as e:
            log.error("Could not save solve: %s", e)
            error = e
        self.last_error = error

        self.dispatch(SolveFinished(SolveResult(elapsed, compared), error))

    def history(self) -> List[Solve]:
        return load_history(self.store)

    def delete_solve(self, solve: Solve) -> Optional[StoreWriteError]:
        """Delete one solve; returns the failure instead of raising it."""
        try:
            self.store.delete(solve)
        except StoreWriteError as e:
            log.error("Could not delete solve: %s", e)
            self.last_error = e
            return e
        return None

    def delete_all(self) -> Optional[StoreWriteError]:
        try:
            self.store.delete_all()
        except StoreWriteError as e:
            log.error("Could not delete solves: %s", e)
            self.last_error = e
            return e
        return None

    def close(self) -> None:
        """Release the countdown and stopwatch timers."""
        self.countdown.cancel()
        if self.stopwatch.running:
            self.stopwatch.stop()
