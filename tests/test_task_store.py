# tests/test_task_store.py

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from study_mate.tasks.errors import LoadFailedError, SaveFailedError, StorageError
from study_mate.tasks.task_models import AssignmentTask, ExamTask, Priority, ReadingTask, Task
from study_mate.tasks.task_store import FileTaskStore, InMemoryTaskStore

DUE = datetime(2030, 1, 10, 9, 30, tzinfo=UTC)


def _tasks() -> list[Task]:
    return [
        AssignmentTask(title="Essay", subject="Design", due_date=DUE, priority=Priority.HIGH),
        ExamTask(title="Midterm", subject="Math", due_date=DUE + timedelta(days=1), location="Room 204"),
        ReadingTask(title="Read", subject="IT", due_date=DUE + timedelta(days=2), chapter_range="Ch 2-3"),
    ]


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    store = FileTaskStore(tmp_path / "nope" / "tasks.json")
    assert store.load() == []


def test_empty_file_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_bytes(b"")
    assert FileTaskStore(path).load() == []


def test_save_then_load_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "data" / "tasks.json"
    store = FileTaskStore(path)
    tasks = _tasks()

    store.save(tasks)
    loaded = FileTaskStore(path).load()

    assert loaded == tasks
    assert [type(t) for t in loaded] == [AssignmentTask, ExamTask, ReadingTask]


def test_saved_file_is_json_array_with_type_tags(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    FileTaskStore(path).save(_tasks())

    data = json.loads(path.read_text("utf-8"))
    assert [r["typeIdentifier"] for r in data] == ["AssignmentTask", "ExamTask", "ReadingTask"]
    assert data[1]["location"] == "Room 204"


def test_save_leaves_no_temp_file(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = FileTaskStore(path)
    store.save(_tasks())
    store.save([])

    assert sorted(p.name for p in tmp_path.iterdir()) == ["tasks.json"]
    assert store.load() == []


def test_corrupt_json_raises_storage_error(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("[{not json", "utf-8")

    with pytest.raises(LoadFailedError) as exc:
        FileTaskStore(path).load()
    assert isinstance(exc.value, StorageError)
    assert exc.value.message == "Failed to load tasks."


def _write_bad_utf8(path: Path) -> None:
    path.write_bytes(b'[{"title": "\xff\xfe"}]')


def _write_deeply_nested(path: Path) -> None:
    path.write_text("[" * 200_000 + "]" * 200_000, "utf-8")


def _make_directory(path: Path) -> None:
    path.mkdir()


@pytest.mark.parametrize(
    "corrupt",
    [_write_bad_utf8, _write_deeply_nested, _make_directory],
    ids=["bad-utf8", "deep-nesting", "directory"],
)
def test_unreadable_file_raises_load_failed(tmp_path: Path, corrupt) -> None:
    path = tmp_path / "tasks.json"
    corrupt(path)

    with pytest.raises(LoadFailedError):
        FileTaskStore(path).load()


def test_malformed_record_fails_whole_load(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    FileTaskStore(path).save(_tasks())
    data = json.loads(path.read_text("utf-8"))
    del data[2]["dueDate"]
    path.write_text(json.dumps(data), "utf-8")

    with pytest.raises(StorageError):
        FileTaskStore(path).load()


def test_failed_save_keeps_previous_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "tasks.json"
    store = FileTaskStore(path)
    store.save(_tasks())
    before = path.read_text("utf-8")

    def boom(src, dst) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("study_mate.tasks.task_store.os.replace", boom)

    with pytest.raises(SaveFailedError):
        store.save([])

    assert path.read_text("utf-8") == before
    assert not (tmp_path / "tasks.json.tmp").exists()


def test_in_memory_store_round_trips_without_aliasing() -> None:
    store = InMemoryTaskStore()
    tasks = _tasks()
    store.save(tasks)

    tasks[0].title = "changed after save"
    loaded = store.load()

    assert loaded[0].title == "Essay"
    assert loaded[0] is not tasks[0]
    assert store.save_count == 1
    assert len(store.saved_tasks) == 3


def test_in_memory_store_initial_tasks() -> None:
    tasks = _tasks()
    store = InMemoryTaskStore(tasks)
    assert store.load() == tasks
    assert store.save_count == 0


def test_in_memory_store_keeps_encoded_records() -> None:
    store = InMemoryTaskStore()
    store.save(_tasks())

    records = store.records
    assert [r["typeIdentifier"] for r in records] == ["AssignmentTask", "ExamTask", "ReadingTask"]
    assert records[2]["chapterRange"] == "Ch 2-3"

    records[0]["title"] = "edited copy"
    assert store.load()[0].title == "Essay"
