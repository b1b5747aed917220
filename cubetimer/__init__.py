"""Speedcubing practice timer: countdown, stopwatch, solve history and stats."""

from .errors import CubeTimerError, StoreError, StoreReadError, StoreWriteError
from .machine import (
    Countdown,
    Idle,
    Running,
    ShowingResult,
    SolveResult,
    TimerController,
    transition,
)
from .scramble import generate as generate_scramble
from .stats import (
    RollingStatsPoint,
    average_all,
    average_of_last_n,
    best_time,
    rolling_window_series,
)
from .store import JsonSolveStore, MemorySolveStore, Solve, SolveStore

__version__ = "0.1.0"

__all__ = [
    "CubeTimerError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "Countdown",
    "Idle",
    "Running",
    "ShowingResult",
    "SolveResult",
    "TimerController",
    "transition",
    "generate_scramble",
    "RollingStatsPoint",
    "average_all",
    "average_of_last_n",
    "best_time",
    "rolling_window_series",
    "JsonSolveStore",
    "MemorySolveStore",
    "Solve",
    "SolveStore",
]
