"""Tests for solve records and stores."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from cubetimer.errors import StoreReadError, StoreWriteError
from cubetimer.store import JsonSolveStore, MemorySolveStore, Solve, SolveStore

T0 = datetime(2025, 11, 22, 9, 30, tzinfo=timezone.utc)


class TestSolve:
    """Tests for the Solve record."""

    def test_negative_duration_rejected(self) -> None:
        with pytest.raises(ValueError):
            Solve(timestamp=T0, duration_millis=-1)

    def test_zero_duration_allowed(self) -> None:
        assert Solve(timestamp=T0, duration_millis=0).duration_millis == 0

    def test_immutable(self) -> None:
        solve = Solve(timestamp=T0, duration_millis=1000)
        with pytest.raises(AttributeError):
            solve.duration_millis = 5  # type: ignore[misc]

    def test_record_round_trip(self) -> None:
        solve = Solve(timestamp=T0, duration_millis=83456)
        record = solve.to_record()
        assert record["formatted"] == "1:23.456"
        assert Solve.from_record(record) == solve

    def test_naive_timestamp_read_as_utc(self) -> None:
        solve = Solve.from_record(
            {"id": "a", "timestamp": "2025-11-22T09:30:00", "duration_millis": 1}
        )
        assert solve.timestamp == T0


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path: Path) -> SolveStore:
    if request.param == "memory":
        return MemorySolveStore()
    return JsonSolveStore(str(tmp_path / "solves.json"))


class TestSolveStores:
    """Behaviour shared by every store."""

    def test_empty(self, any_store: SolveStore) -> None:
        assert any_store.query_all() == []

    def test_create_and_query_oldest_first(self, any_store: SolveStore) -> None:
        any_store.create(3000, T0 + timedelta(minutes=2))
        any_store.create(1000, T0)
        any_store.create(2000, T0 + timedelta(minutes=1))
        assert [s.duration_millis for s in any_store.query_all()] == [1000, 2000, 3000]

    def test_create_returns_solve(self, any_store: SolveStore) -> None:
        solve = any_store.create(1500, T0)
        assert solve.duration_millis == 1500
        assert solve.timestamp == T0
        assert any_store.query_all() == [solve]

    def test_negative_duration_is_write_failure(self, any_store: SolveStore) -> None:
        with pytest.raises(StoreWriteError):
            any_store.create(-5, T0)
        assert any_store.query_all() == []

    def test_delete_one(self, any_store: SolveStore) -> None:
        first = any_store.create(1000, T0)
        second = any_store.create(2000, T0 + timedelta(minutes=1))
        any_store.delete(first)
        assert any_store.query_all() == [second]

    def test_delete_missing(self, any_store: SolveStore) -> None:
        with pytest.raises(StoreWriteError):
            any_store.delete(Solve(timestamp=T0, duration_millis=1))

    def test_delete_all(self, any_store: SolveStore) -> None:
        any_store.create(1000, T0)
        any_store.create(2000, T0)
        any_store.delete_all()
        assert any_store.query_all() == []


class TestJsonSolveStore:
    """Tests specific to the JSON file store."""

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = str(tmp_path / "solves.json")
        JsonSolveStore(path).create(1234, T0)
        solves = JsonSolveStore(path).query_all()
        assert [s.duration_millis for s in solves] == [1234]

    def test_file_format(self, tmp_path: Path) -> None:
        path = tmp_path / "solves.json"
        solve = JsonSolveStore(str(path)).create(12345, T0)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == [
            {
                "id": solve.id,
                "timestamp": "2025-11-22T09:30:00+00:00",
                "duration_millis": 12345,
                "formatted": "12.345",
            }
        ]

    def test_no_temp_file_left(self, tmp_path: Path) -> None:
        JsonSolveStore(str(tmp_path / "solves.json")).create(1, T0)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["solves.json"]

    def test_invalid_json_is_read_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "solves.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreReadError):
            JsonSolveStore(str(path)).query_all()

    def test_not_a_list_is_read_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "solves.json"
        path.write_text('{"seconds": 1}', encoding="utf-8")
        with pytest.raises(StoreReadError):
            JsonSolveStore(str(path)).query_all()

    def test_bad_record_is_read_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "solves.json"
        path.write_text('[{"seconds": 1.5}]', encoding="utf-8")
        with pytest.raises(StoreReadError):
            JsonSolveStore(str(path)).query_all()

    def test_unreadable_history_not_overwritten(self, tmp_path: Path) -> None:
        """A write never replaces a history file it could not parse."""
        path = tmp_path / "solves.json"
        path.write_text("garbage", encoding="utf-8")
        with pytest.raises(StoreWriteError):
            JsonSolveStore(str(path)).create(1000, T0)
        assert path.read_text(encoding="utf-8") == "garbage"

    def test_unwritable_location(self, tmp_path: Path) -> None:
        store = JsonSolveStore(str(tmp_path / "missing" / "solves.json"))
        with pytest.raises(StoreWriteError):
            store.create(1000, T0)
