"""Tests for the JSON habit database."""

import json
import threading
from datetime import datetime

import pytest

from habitcheck.core.database import BackupManager, HabitDatabase
from habitcheck.core.exceptions import DatabaseError, HabitNotFoundError, ValidationError


def reopen(database):
    return HabitDatabase(database.data_file, database.backup_manager.backup_dir, database.backup_manager.max_backups)


def fail_write(*args, **kwargs):
    raise OSError("disk full")


def test_starts_empty(database):
    assert database.list_habits("alice") == []
    assert database.get_stats()["total_habits"] == 0


def test_create_and_persist(database):
    habit = database.create_habit("alice", "Read", "📚", created_at=datetime(2024, 1, 10, 15, 30))

    loaded = reopen(database).get_habit("alice", habit.habit_id)
    assert loaded.name == "Read"
    assert loaded.icon == "📚"
    assert loaded.created_at == datetime(2024, 1, 10, 15, 30)


def test_file_layout(database):
    habit = database.create_habit("alice", "Read")
    database.toggle_tracking("alice", habit.habit_id, "2024-01-12")

    data = json.loads(database.data_file.read_text(encoding="utf-8"))
    assert data["habits"][habit.habit_id]["tracking"] == [{"date": "2024-01-12", "completed": True}]


def test_list_is_scoped_and_newest_first(database):
    first = database.create_habit("alice", "First", created_at=datetime(2024, 1, 1))
    second = database.create_habit("alice", "Second", created_at=datetime(2024, 1, 5))
    database.create_habit("bob", "Other")

    assert [h.habit_id for h in database.list_habits("alice")] == [second.habit_id, first.habit_id]


def test_other_users_habit_is_not_found(database):
    habit = database.create_habit("alice", "Read")

    with pytest.raises(HabitNotFoundError):
        database.get_habit("bob", habit.habit_id)
    with pytest.raises(HabitNotFoundError):
        database.toggle_tracking("bob", habit.habit_id, "2024-01-12")
    with pytest.raises(HabitNotFoundError):
        database.delete_habit("bob", habit.habit_id)


def test_update(database):
    habit = database.create_habit("alice", "Read")
    database.update_habit("alice", habit.habit_id, name="Read 20 pages")
    database.update_habit("alice", habit.habit_id, icon="📖")

    loaded = reopen(database).get_habit("alice", habit.habit_id)
    assert loaded.name == "Read 20 pages"
    assert loaded.icon == "📖"


def test_invalid_update_changes_nothing(database):
    habit = database.create_habit("alice", "Read", "📚")

    with pytest.raises(ValidationError):
        database.update_habit("alice", habit.habit_id, name="Better name", icon="x" * 11)

    assert database.get_habit("alice", habit.habit_id).name == "Read"


def test_delete_removes_tracking(database):
    habit = database.create_habit("alice", "Read")
    database.toggle_tracking("alice", habit.habit_id, "2024-01-12")
    database.delete_habit("alice", habit.habit_id)

    reopened = reopen(database)
    assert reopened.list_habits("alice") == []
    assert reopened.get_stats()["total_entries"] == 0


def test_toggle_persists(database):
    habit = database.create_habit("alice", "Read")

    _, first = database.toggle_tracking("alice", habit.habit_id, "2024-01-12")
    _, second = database.toggle_tracking("alice", habit.habit_id, "2024-01-12")

    assert (first, second) == (True, False)
    entry = reopen(database).get_habit("alice", habit.habit_id).tracking.get("2024-01-12")
    assert entry is not None and entry.completed is False


def test_malformed_date_does_not_touch_state(database):
    habit = database.create_habit("alice", "Read")
    saves = database.get_stats()["save_count"]

    with pytest.raises(ValidationError):
        database.toggle_tracking("alice", habit.habit_id, "2024-13-01")

    assert len(database.get_habit("alice", habit.habit_id).tracking) == 0
    assert database.get_stats()["save_count"] == saves


def test_concurrent_toggles_on_different_dates_all_survive(database):
    habit = database.create_habit("alice", "Read")
    days = [f"2024-01-{d:02d}" for d in range(1, 29)]

    threads = [
        threading.Thread(target=database.toggle_tracking, args=("alice", habit.habit_id, day))
        for day in days
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    tracking = reopen(database).get_habit("alice", habit.habit_id).tracking
    assert tracking.completed_dates() == days


def test_corrupted_file_without_backup_starts_empty(database):
    database.create_habit("alice", "Read")
    database.data_file.write_text("{not json", encoding="utf-8")

    reopened = reopen(database)

    assert reopened.list_habits("alice") == []
    assert database.data_file.with_suffix(".corrupt").exists()


def test_corrupted_file_restored_from_backup(database):
    habit = database.create_habit("alice", "Read")
    assert database.create_backup() is not None
    database.data_file.write_text("[]garbage", encoding="utf-8")

    reopened = reopen(database)

    assert reopened.get_habit("alice", habit.habit_id).name == "Read"


def test_shutdown_writes_backup(database):
    database.create_habit("alice", "Read")
    database.shutdown()
    assert len(database.backup_manager.list_backups()) == 1


def test_backup_rotation(tmp_path):
    source = tmp_path / "habits.json"
    source.write_text('{"habits": {}}', encoding="utf-8")
    manager = BackupManager(tmp_path / "backups", max_backups=2)

    for _ in range(4):
        manager.create_backup(source)

    assert len(manager.list_backups()) == 2


def test_backup_of_missing_file(tmp_path):
    manager = BackupManager(tmp_path / "backups")
    assert manager.create_backup(tmp_path / "missing.json") is None


class TestFailedSaveLeavesStateUnchanged:

    @pytest.fixture
    def failing_writes(self, monkeypatch):
        def enable():
            monkeypatch.setattr("habitcheck.core.database.json.dump", fail_write)

        return enable

    def test_toggle_of_new_date(self, database, failing_writes):
        habit = database.create_habit("alice", "Read")
        failing_writes()

        with pytest.raises(DatabaseError):
            database.toggle_tracking("alice", habit.habit_id, "2024-01-12")

        assert database.get_habit("alice", habit.habit_id).tracking.get("2024-01-12") is None

    def test_toggle_of_existing_date(self, database, failing_writes):
        habit = database.create_habit("alice", "Read")
        database.toggle_tracking("alice", habit.habit_id, "2024-01-12")
        failing_writes()

        with pytest.raises(DatabaseError):
            database.toggle_tracking("alice", habit.habit_id, "2024-01-12")

        assert database.get_habit("alice", habit.habit_id).tracking.is_completed("2024-01-12")

    def test_create(self, database, failing_writes):
        failing_writes()

        with pytest.raises(DatabaseError):
            database.create_habit("alice", "Read")

        assert database.list_habits("alice") == []

    def test_update(self, database, failing_writes):
        habit = database.create_habit("alice", "Read", "📚")
        failing_writes()

        with pytest.raises(DatabaseError):
            database.update_habit("alice", habit.habit_id, name="Read more", icon="📖")

        loaded = database.get_habit("alice", habit.habit_id)
        assert (loaded.name, loaded.icon) == ("Read", "📚")

    def test_delete(self, database, failing_writes):
        habit = database.create_habit("alice", "Read")
        failing_writes()

        with pytest.raises(DatabaseError):
            database.delete_habit("alice", habit.habit_id)

        assert database.get_habit("alice", habit.habit_id).name == "Read"

    def test_failed_change_is_not_written_by_the_next_save(self, database, monkeypatch):
        habit = database.create_habit("alice", "Read")
        with monkeypatch.context() as m:
            m.setattr("habitcheck.core.database.json.dump", fail_write)
            with pytest.raises(DatabaseError):
                database.toggle_tracking("alice", habit.habit_id, "2024-01-12")

        database.toggle_tracking("alice", habit.habit_id, "2024-01-13")

        tracking = reopen(database).get_habit("alice", habit.habit_id).tracking
        assert tracking.completed_dates() == ["2024-01-13"]
        assert "2024-01-12" not in tracking
