"""Comprehensive tests for snapshot storage."""

import json
import threading
from datetime import datetime, timezone

import pytest

from taskboard.models import Status, Task
from taskboard.query import query
from taskboard.sample_data import sample_tasks
from taskboard.storage import JsonStorage, Storage, task_from_dict, task_to_dict
from taskboard.store import TaskStore


def make_task(task_id, title="Test", status=Status.PENDING):
    return Task(
        id=task_id,
        title=title,
        description="",
        status=status,
        created_at=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        due_date=datetime(2024, 2, 1, 12, 0, 0, tzinfo=timezone.utc),
    )


class TestJsonStorage:
    """Test suite for JsonStorage implementation."""

    @pytest.fixture
    def storage(self, tmp_path):
        """Create a JsonStorage instance with a temporary file path."""
        return JsonStorage(tmp_path / "tasks.json")

    @pytest.fixture
    def tasks(self):
        return {task.id: task for task in sample_tasks()}

    def test_storage_is_abstract(self):
        with pytest.raises(TypeError):
            Storage()

    def test_exists(self, storage, tasks):
        assert not storage.exists()
        storage.save(tasks)
        assert storage.exists()

    def test_save_writes_valid_json(self, storage, tasks):
        storage.save(tasks)

        with open(storage.file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        assert list(data) == ["1", "2", "3", "4"]
        assert data["1"]["title"] == "Complete project proposal"
        assert data["1"]["status"] == "pending"
        assert data["2"]["status"] == "completed"
        assert data["3"]["due_date"] == "2024-07-08T17:00:00+00:00"

    def test_load_missing_file(self, storage):
        assert storage.load() == {}

    def test_load_empty_file(self, storage):
        storage.file_path.touch()
        assert storage.load() == {}

    def test_save_and_load_keeps_tasks_and_order(self, storage, tasks):
        storage.save(tasks)
        loaded = storage.load()
        assert loaded == tasks
        assert list(loaded) == list(tasks)

    def test_save_overwrites_existing_data(self, storage, tasks):
        storage.save(tasks)
        storage.save({"x": make_task("x", "New task")})

        loaded = storage.load()
        assert list(loaded) == ["x"]

    def test_save_creates_parent_directories(self, tmp_path):
        file_path = tmp_path / "subdir" / "nested" / "tasks.json"
        JsonStorage(file_path).save({"1": make_task("1")})
        assert file_path.exists()

    def test_unicode_and_special_characters(self, storage):
        task = make_task("1", 'Réunion "client" \n\t ✓')
        storage.save({"1": task})
        assert storage.load()["1"].title == task.title

    def test_load_handles_corrupted_json(self, storage):
        storage.file_path.write_text("{invalid json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            storage.load()

    def test_load_rejects_wrong_shape(self, storage):
        storage.file_path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ValueError, match="Malformed task snapshot"):
            storage.load()

    def test_load_rejects_missing_field(self, storage):
        storage.file_path.write_text(json.dumps({"1": {"id": "1"}}), encoding="utf-8")
        with pytest.raises(ValueError, match="Malformed task snapshot"):
            storage.load()

    def test_load_null_description_becomes_empty(self, storage):
        data = task_to_dict(make_task("1"))
        data["description"] = None
        storage.file_path.write_text(json.dumps({"1": data}), encoding="utf-8")

        task = storage.load()["1"]
        assert task.description == ""
        assert query(TaskStore([task]), "all", "zzz") == []

    def test_load_rejects_non_string_description(self, storage):
        data = task_to_dict(make_task("1"))
        data["description"] = ["not", "text"]
        storage.file_path.write_text(json.dumps({"1": data}), encoding="utf-8")
        with pytest.raises(ValueError, match="description must be a string"):
            storage.load()

    @pytest.mark.parametrize("title", ["", "   ", None, 42])
    def test_load_rejects_invalid_title(self, storage, title):
        data = task_to_dict(make_task("1"))
        data["title"] = title
        storage.file_path.write_text(json.dumps({"1": data}), encoding="utf-8")
        with pytest.raises(ValueError, match="title cannot be empty"):
            storage.load()

    def test_load_rejects_unknown_status(self, storage):
        data = task_to_dict(make_task("1"))
        data["status"] = "overdue"
        storage.file_path.write_text(json.dumps({"1": data}), encoding="utf-8")
        with pytest.raises(ValueError):
            storage.load()

    def test_concurrent_reads(self, storage, tasks):
        storage.save(tasks)

        results = []
        errors = []

        def read_tasks():
            try:
                results.append(len(storage.load()))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=read_tasks) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert results == [4] * 10


class TestTaskDict:
    """Test suite for the JSON task form."""

    def test_from_dict_defaults_description(self):
        task = task_from_dict({
            "id": 7,
            "title": "Call back",
            "status": "pending",
            "created_at": "2023-06-15T10:00:00Z",
            "due_date": "2024-07-15T23:59:59Z",
        })
        assert task.id == "7"
        assert task.description == ""
        assert task.due_date.tzinfo is not None

    def test_to_dict_fields(self):
        assert sorted(task_to_dict(make_task("1"))) == [
            "created_at", "description", "due_date", "id", "status", "title"
        ]
