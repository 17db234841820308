# tests/test_task_repository.py

from __future__ import annotations

import pytest

from taskpad.errors import NotFound, ValidationError
from taskpad.storage.store import USERS, KeyValueStore
from taskpad.tasks.schemas import TaskFilter
from taskpad.tasks.seed import seed_sample_tasks
from taskpad.tasks.task_models import Task, TaskPriority, TaskStatus, parse_iso
from taskpad.tasks.task_query import sort_tasks
from taskpad.tasks.task_repository import TaskRepository


@pytest.fixture()
def users(store: KeyValueStore) -> tuple[str, str]:
    store.save(USERS, [{"_id": "u1", "name": "Ada"}, {"_id": "u2", "name": "Bob"}])
    return "u1", "u2"


def _task(id_: str, title: str, created_at: str, priority: str = "medium") -> Task:
    return Task(
        id=id_,
        user_id="u1",
        title=title,
        description="",
        status=TaskStatus.PENDING,
        priority=TaskPriority(priority),
        due_date=None,
        created_at=created_at,
        updated_at=created_at,
    )


def test_create_applies_defaults_and_round_trips(repo: TaskRepository, users) -> None:
    task = repo.create("u1", {"title": "  Write report  "})

    assert task.title == "Write report"
    assert task.status is TaskStatus.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.description == ""
    assert task.due_date is None
    assert task.created_at == task.updated_at
    assert parse_iso(task.created_at) is not None

    assert repo.get("u1", task.id) == task


def test_create_accepts_all_fields(repo: TaskRepository, users) -> None:
    task = repo.create(
        "u1",
        {
            "title": "Ship",
            "description": "v1",
            "status": "in-progress",
            "priority": "high",
            "dueDate": "2030-01-02",
            "_id": "ignored",
        },
    )
    rec = task.to_record()
    assert rec["status"] == "in-progress"
    assert rec["priority"] == "high"
    assert rec["dueDate"] == "2030-01-02"
    assert rec["userId"] == "u1"
    assert rec["_id"] != "ignored"


@pytest.mark.parametrize(
    ("payload", "field", "message"),
    [
        ({}, "title", "Task title is required"),
        ({"title": "   "}, "title", "Task title is required"),
        ({"title": "x" * 101}, "title", "Title cannot exceed 100 characters"),
        ({"title": "ok", "description": "d" * 501}, "description", "Description cannot exceed 500 characters"),
        ({"title": "ok", "status": "done"}, "status", "Invalid status"),
        ({"title": "ok", "priority": "urgent"}, "priority", "Invalid priority"),
        ({"title": "ok", "dueDate": "tomorrow"}, "dueDate", "Invalid due date format"),
    ],
)
def test_create_validation(repo: TaskRepository, users, payload, field, message) -> None:
    with pytest.raises(ValidationError) as ei:
        repo.create("u1", payload)
    assert [(e.field, e.message) for e in ei.value.errors] == [(field, message)]
    assert repo.list_tasks("u1") == []


def test_create_for_unknown_user(repo: TaskRepository, users) -> None:
    with pytest.raises(NotFound):
        repo.create("ghost", {"title": "x"})


def test_ownership_is_enforced(repo: TaskRepository, users) -> None:
    task = repo.create("u1", {"title": "mine"})

    with pytest.raises(NotFound) as ei:
        repo.get("u2", task.id)
    assert ei.value.message == "Task not found"

    with pytest.raises(NotFound):
        repo.update("u2", task.id, {"title": "theirs"})
    with pytest.raises(NotFound):
        repo.delete("u2", task.id)

    assert repo.get("u1", task.id).title == "mine"
    assert repo.list_tasks("u2") == []


def test_update_partial_and_timestamps(repo: TaskRepository, users) -> None:
    task = repo.create("u1", {"title": "draft", "priority": "low"})

    updated = repo.update("u1", task.id, {"status": "completed", "userId": "u2", "createdAt": "1970"})

    assert updated.status is TaskStatus.COMPLETED
    assert updated.priority is TaskPriority.LOW
    assert updated.title == "draft"
    assert updated.user_id == "u1"
    assert updated.created_at == task.created_at
    assert parse_iso(updated.updated_at) >= parse_iso(task.updated_at)

    with pytest.raises(ValidationError):
        repo.update("u1", task.id, {"title": ""})
    assert repo.get("u1", task.id).title == "draft"


def test_delete(repo: TaskRepository, users) -> None:
    a = repo.create("u1", {"title": "a"})
    b = repo.create("u1", {"title": "b"})

    repo.delete("u1", a.id)

    assert [t.id for t in repo.list_tasks("u1")] == [b.id]
    with pytest.raises(NotFound):
        repo.delete("u1", a.id)


def test_list_filters(repo: TaskRepository, users) -> None:
    repo.create("u1", {"title": "Buy milk", "priority": "low"})
    repo.create("u1", {"title": "Report", "description": "quarterly MILK numbers", "status": "completed"})
    repo.create("u1", {"title": "Call mom", "priority": "high", "status": "in-progress"})
    repo.create("u2", {"title": "Milk for Bob"})

    def titles(**flt) -> list[str]:
        return sorted(t.title for t in repo.list_tasks("u1", flt))

    assert titles() == ["Buy milk", "Call mom", "Report"]
    assert titles(status="all", priority="all") == ["Buy milk", "Call mom", "Report"]
    assert titles(status="completed") == ["Report"]
    assert titles(priority="high") == ["Call mom"]
    assert titles(search="milk") == ["Buy milk", "Report"]
    assert titles(search="milk", status="pending") == ["Buy milk"]
    assert titles(status="nope") == []


def test_sort_orders() -> None:
    tasks = [
        _task("1", "beta", "2024-01-02T00:00:00.000Z", "low"),
        _task("2", "Alpha", "2024-01-03T00:00:00.000Z", "medium"),
        _task("3", "gamma", "2024-01-01T00:00:00.000Z", "high"),
        _task("4", "delta", "2024-01-02T00:00:00.000Z", "high"),
    ]

    def ids(sort: str | None) -> list[str]:
        return [t.id for t in sort_tasks(tasks, sort)]

    assert ids("newest") == ["2", "1", "4", "3"]
    assert ids("oldest") == ["3", "1", "4", "2"]
    assert ids("title") == ["2", "1", "4", "3"]
    assert ids("priority") == ["3", "4", "2", "1"]
    assert ids(None) == ["1", "2", "3", "4"]
    assert ids("bogus") == ["1", "2", "3", "4"]


def test_list_accepts_filter_model(repo: TaskRepository, users) -> None:
    repo.create("u1", {"title": "b"})
    repo.create("u1", {"title": "A"})
    out = repo.list_tasks("u1", TaskFilter(sort="title"))
    assert [t.title for t in out] == ["A", "b"]


def test_stats_sum_to_total(repo: TaskRepository, users) -> None:
    repo.create("u1", {"title": "a"})
    repo.create("u1", {"title": "b", "status": "in-progress"})
    repo.create("u1", {"title": "c", "status": "completed"})
    repo.create("u1", {"title": "d", "status": "completed"})
    repo.create("u2", {"title": "other"})

    stats = repo.stats("u1")
    assert stats == {"total": 4, "pending": 1, "in-progress": 1, "completed": 2}
    assert stats["pending"] + stats["in-progress"] + stats["completed"] == stats["total"]


def test_delete_all_for_user(repo: TaskRepository, users) -> None:
    repo.create("u1", {"title": "a"})
    repo.create("u1", {"title": "b"})
    keep = repo.create("u2", {"title": "c"})

    assert repo.delete_all_for_user("u1") == 2
    assert repo.list_tasks("u1") == []
    assert [t.id for t in repo.list_tasks("u2")] == [keep.id]
    assert repo.delete_all_for_user("u1") == 0


def test_seed_runs_once_per_store(repo: TaskRepository, users) -> None:
    created = seed_sample_tasks(repo, "u1")
    assert [t.title for t in created] == ["Welcome to Task Manager!", "Try creating a new task"]
    assert seed_sample_tasks(repo, "u2") == []
    assert len(repo.list_tasks("u1")) == 2
