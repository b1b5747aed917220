"""
Statistics over a solve history.

Every function takes the history as a sequence of solves ordered oldest
first and returns None when there is nothing to compute ("no data"). None of
them keep state or touch the store, except `load_history`, which is the one
place a failed read is turned into an empty history.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from statistics import mean
from typing import Iterator, List, Optional, Sequence

from . import config
from .errors import StoreReadError
from .store import Solve, SolveStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollingStatsPoint:
    at_timestamp: datetime
    window_average_millis: float


@dataclass(frozen=True)
class Summary:
    count: int
    best: Optional[int]
    worst: Optional[int]
    mean: Optional[float]
    average_of_5: Optional[float]


def best_time(solves: Sequence[Solve]) -> Optional[int]:
    if not solves:
        return None
    return min(s.duration_millis for s in solves)


def worst_time(solves: Sequence[Solve]) -> Optional[int]:
    if not solves:
        return None
    return max(s.duration_millis for s in solves)


def average_of_last_n(
    solves: Sequence[Solve], n: int = config.AVERAGE_WINDOW
) -> Optional[float]:
    """Mean of the `n` most recent solves, or of all of them if there are fewer."""
    if n < 1:
        raise ValueError("n must be at least 1")
    if not solves:
        return None
    return mean(s.duration_millis for s in solves[-n:])


def average_all(solves: Sequence[Solve]) -> Optional[float]:
    if not solves:
        return None
    return mean(s.duration_millis for s in solves)


def rolling_window_series(
    solves: Sequence[Solve], window_size: int = config.AVERAGE_WINDOW
) -> Iterator[RollingStatsPoint]:
    """
    Moving average over `window_size` consecutive solves.

    Yields one point per solve from the `window_size`-th on, stamped with
    that solve's timestamp. Yields nothing when the history is shorter than
    the window. Each call starts over from the beginning.
    """
    if window_size < 1:
        raise ValueError("window_size must be at least 1")
    for i in range(window_size - 1, len(solves)):
        window = solves[i - window_size + 1 : i + 1]
        yield RollingStatsPoint(
            at_timestamp=solves[i].timestamp,
            window_average_millis=mean(s.duration_millis for s in window),
        )


def chart_series(
    solves: Sequence[Solve], window_size: int = config.AVERAGE_WINDOW
) -> List[RollingStatsPoint]:
    """What the trend chart plots: the rolling average, or each solve on its own while there are too few."""
    if len(solves) < window_size:
        return [RollingStatsPoint(s.timestamp, float(s.duration_millis)) for s in solves]
    return list(rolling_window_series(solves, window_size))


def solves_on(solves: Sequence[Solve], day: date) -> List[Solve]:
    """Solves completed on `day` (local time), most recent first."""
    matching = [s for s in solves if s.timestamp.astimezone().date() == day]
    return sorted(matching, key=lambda s: s.timestamp, reverse=True)


def summarize(solves: Sequence[Solve]) -> Summary:
    return Summary(
        count=len(solves),
        best=best_time(solves),
        worst=worst_time(solves),
        mean=average_all(solves),
        average_of_5=average_of_last_n(solves, 5),
    )


def load_history(store: SolveStore) -> List[Solve]:
    """The store's history, or an empty one if it cannot be read."""
    try:
        return store.query_all()
    except StoreReadError as e:
        log.error("Could not load solves: %s", e)
        return []
