"""Tests for the JSON task store."""

import json
import logging

import pytest

from taskcli.store import StoreError, TaskStore, next_id
from taskcli.utils import Task


def _task(task_id: int, **kwargs) -> Task:
    kwargs.setdefault("name", f"Task {task_id}")
    kwargs.setdefault("created_at", "2024-05-01T10:00:00.000Z")
    return Task(id=task_id, **kwargs)


class TestNextId:
    """Test id assignment."""

    def test_empty(self):
        assert next_id([]) == 1

    def test_max_plus_one(self):
        assert next_id([_task(1), _task(5), _task(3)]) == 6

    def test_gaps_are_not_reused(self):
        assert next_id([_task(3)]) == 4


class TestLoad:
    """Test loading the data file."""

    def test_missing_file(self, store):
        assert store.load() == []

    def test_empty_file(self, store, data_file):
        data_file.write_text("   \n")
        assert store.load() == []

    def test_malformed_json_warns_and_starts_empty(self, store, data_file, caplog):
        data_file.write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="taskcli.store"):
            assert store.load() == []
        assert "Could not read tasks file" in caplog.text

    def test_non_array_starts_empty(self, store, data_file, caplog):
        data_file.write_text(json.dumps({"tasks": []}))
        with caplog.at_level(logging.WARNING, logger="taskcli.store"):
            assert store.load() == []
        assert "does not contain a JSON array" in caplog.text

    def test_numeric_string_ids(self, store, data_file):
        data_file.write_text(
            json.dumps([{"id": "2", "name": "Legacy", "description": "", "status": "done"}])
        )
        tasks = store.load()
        assert [t.id for t in tasks] == [2]
        assert tasks[0].status == "done"

    def test_invalid_and_duplicate_records_are_skipped(self, store, data_file, caplog):
        data_file.write_text(
            json.dumps(
                [
                    {"id": 1, "name": "ok", "status": "todo"},
                    {"id": 2, "name": "bad status", "status": "someday"},
                    {"id": 1, "name": "duplicate", "status": "todo"},
                    {"id": 3, "name": "also ok", "status": "in-progress"},
                ]
            )
        )
        with caplog.at_level(logging.WARNING, logger="taskcli.store"):
            tasks = store.load()
        assert [(t.id, t.name) for t in tasks] == [(1, "ok"), (3, "also ok")]
        assert "Skipping invalid task record #1" in caplog.text
        assert "Skipping duplicate task id 1" in caplog.text


class TestSave:
    """Test writing the data file."""

    def test_round_trip(self, store):
        tasks = [
            _task(1, description="first"),
            _task(2, status="in-progress", updated_at="2024-05-03T00:00:00.000Z"),
            _task(7, name="Ünïcode — ok", status="done"),
        ]
        store.save(tasks)
        assert store.load() == tasks

    def test_pretty_printed_array(self, store, data_file):
        store.save([_task(1)])
        raw = data_file.read_text(encoding="utf-8")
        assert raw.startswith("[\n  {")
        assert json.loads(raw)[0]["createdAt"] == "2024-05-01T10:00:00.000Z"

    def test_overwrites_corrupt_file(self, store, data_file):
        data_file.write_text("garbage")
        store.save([_task(1)])
        assert [t.id for t in store.load()] == [1]

    def test_creates_missing_directory(self, tmp_path):
        store = TaskStore(tmp_path / "nested" / "dir" / "task.json")
        store.save([_task(1)])
        assert store.path.exists()

    def test_no_temp_file_left_behind(self, store, data_dir):
        store.save([_task(1)])
        assert sorted(p.name for p in data_dir.iterdir()) == ["task.json"]

    def test_write_failure_raises_store_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = TaskStore(blocker / "task.json")
        with pytest.raises(StoreError, match="Could not write tasks file"):
            store.save([_task(1)])
