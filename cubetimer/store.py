"""
Solve records and the stores that keep them.

`SolveStore` is what the timer talks to. Two implementations ship here:
`MemorySolveStore` for tests and throwaway sessions, and `JsonSolveStore`,
which keeps the history in a JSON array on disk. A record looks like:

  {"id": "3f0c...", "timestamp": "2025-11-29T12:34:56.789000+00:00",
   "duration_millis": 12345, "formatted": "12.345"}
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from .errors import StoreReadError, StoreWriteError
from .output import format_time

log = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Solve:
    timestamp: datetime
    duration_millis: int
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.duration_millis < 0:
            raise ValueError(f"duration_millis must be >= 0, got {self.duration_millis}")

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "duration_millis": self.duration_millis,
            "formatted": format_time(self.duration_millis),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Solve:
        timestamp = datetime.fromisoformat(record["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            timestamp=timestamp,
            duration_millis=int(record["duration_millis"]),
            id=str(record["id"]),
        )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SolveStore(ABC):
    """
    Persistence for solves. Writes raise `StoreWriteError`, reads raise
    `StoreReadError`.
    """

    @abstractmethod
    def create(self, duration_millis: int, timestamp: datetime) -> Solve: ...

    @abstractmethod
    def delete(self, solve: Solve) -> None: ...

    @abstractmethod
    def delete_all(self) -> None: ...

    @abstractmethod
    def query_all(self) -> List[Solve]:
        """Every solve, oldest first."""


class MemorySolveStore(SolveStore):
    def __init__(self) -> None:
        self._solves: List[Solve] = []

    def create(self, duration_millis: int, timestamp: datetime) -> Solve:
        try:
            solve = Solve(timestamp=timestamp, duration_millis=duration_millis)
        except ValueError as e:
            raise StoreWriteError(str(e)) from e
        self._solves.append(solve)
        return solve

    def delete(self, solve: Solve) -> None:
        before = len(self._solves)
        self._solves = [s for s in self._solves if s.id != solve.id]
        if len(self._solves) == before:
            raise StoreWriteError(f"no solve with id {solve.id}")

    def delete_all(self) -> None:
        self._solves = []

    def query_all(self) -> List[Solve]:
        return sorted(self._solves, key=lambda s: s.timestamp)


class JsonSolveStore(SolveStore):
    """Solve history kept as a JSON array in `filename`."""

    def __init__(self, filename: str) -> None:
        self.filename = filename

    def _load(self) -> List[Solve]:
        if not os.path.exists(self.filename):
            return []
        try:
            with open(self.filename, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreReadError(f"cannot read {self.filename}: {e}") from e

        if not isinstance(data, list):
            raise StoreReadError(f"{self.filename} does not contain a list of solves")
        try:
            return [Solve.from_record(record) for record in data]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreReadError(f"malformed solve record in {self.filename}: {e}") from e

    def _save(self, solves: List[Solve]) -> None:
        # write atomically
        tmp = self.filename + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump([s.to_record() for s in solves], f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.filename)
        except OSError as e:
            raise StoreWriteError(f"cannot write {self.filename}: {e}") from e

    def _load_for_write(self) -> List[Solve]:
        try:
            return self._load()
        except StoreReadError as e:
            # refuse to overwrite a history we could not parse
            raise StoreWriteError(str(e)) from e

    def create(self, duration_millis: int, timestamp: datetime) -> Solve:
        try:
            solve = Solve(timestamp=timestamp, duration_millis=duration_millis)
        except ValueError as e:
            raise StoreWriteError(str(e)) from e
        solves = self._load_for_write()
        solves.append(solve)
        self._save(solves)
        log.debug("Saved solve %s (%d ms) to %s", solve.id, duration_millis, self.filename)
        return solve

    def delete(self, solve: Solve) -> None:
        solves = self._load_for_write()
        remaining = [s for s in solves if s.id != solve.id]
        if len(remaining) == len(solves):
            raise StoreWriteError(f"no solve with id {solve.id}")
        self._save(remaining)

    def delete_all(self) -> None:
        self._save([])

    def query_all(self) -> List[Solve]:
        return sorted(self._load(), key=lambda s: s.timestamp)
