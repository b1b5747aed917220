"""Shared test fixtures for cubetimer tests."""

import random
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Sequence

import pytest

from cubetimer.errors import StoreReadError, StoreWriteError
from cubetimer.scheduler import Scheduler
from cubetimer.store import MemorySolveStore, Solve

EPOCH = datetime(2025, 11, 22, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FlakyStore(MemorySolveStore):
    """Memory store whose reads or writes can be switched to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_reads = False
        self.fail_writes = False

    def create(self, duration_millis, timestamp):
        if self.fail_writes:
            raise StoreWriteError("disk full")
        return super().create(duration_millis, timestamp)

    def delete(self, solve):
        if self.fail_writes:
            raise StoreWriteError("disk full")
        super().delete(solve)

    def delete_all(self):
        if self.fail_writes:
            raise StoreWriteError("disk full")
        super().delete_all()

    def query_all(self):
        if self.fail_reads:
            raise StoreReadError("corrupt history")
        return super().query_all()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> Scheduler:
    return Scheduler(clock=clock)


@pytest.fixture
def advance(clock: FakeClock, scheduler: Scheduler) -> Callable[[float], int]:
    """Move the clock forward and fire whatever became due."""

    def _advance(seconds: float) -> int:
        clock.advance(seconds)
        return scheduler.run_due()

    return _advance


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def make_solves(durations: Sequence[int], start: datetime = EPOCH) -> List[Solve]:
    """Solves one minute apart, oldest first."""
    return [
        Solve(timestamp=start + timedelta(minutes=i), duration_millis=d)
        for i, d in enumerate(durations)
    ]


@pytest.fixture
def solves_factory() -> Callable[[Sequence[int]], List[Solve]]:
    return make_solves
