# src/taskpad/tasks/task_repository.py

from __future__ import annotations

import logging
from typing import Any

from ..core.validation import parse_input
from ..errors import NotFound
from ..storage.store import TASKS, USERS, KeyValueStore
from .schemas import TaskCreate, TaskFilter, TaskUpdate
from .task_models import Task, TaskStatus, generate_id, utc_now_iso
from .task_query import apply_query

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"


class TaskRepository:
    """
    Task CRUD + query over the local store, always scoped to one owner.

    A task that exists but belongs to someone else is reported exactly like a
    missing one (NotFound).
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    # ---- low-level helpers ----

    def _load_all(self) -> list[Task]:
        return [Task.from_record(r) for r in self._store.load(TASKS)]

    def _save_all(self, tasks: list[Task]) -> None:
        self._store.save(TASKS, [t.to_record() for t in tasks])

    def _user_exists(self, user_id: str) -> bool:
        return any(r.get("_id") == user_id for r in self._store.load(USERS))

    @staticmethod
    def _index_of(tasks: list[Task], user_id: str, task_id: str) -> int:
        for i, t in enumerate(tasks):
            if t.id == task_id and t.user_id == user_id:
                return i
        raise NotFound(TASK_NOT_FOUND)

    # ---- public API ----

    def list_tasks(self, user_id: str, flt: TaskFilter | dict[str, Any] | None = None) -> list[Task]:
        if not isinstance(flt, TaskFilter):
            flt = parse_input(TaskFilter, flt)
        own = [t for t in self._load_all() if t.user_id == user_id]
        return apply_query(own, flt)

    def create(self, user_id: str, data: dict[str, Any] | None) -> Task:
        payload = parse_input(TaskCreate, data)
        if not self._user_exists(user_id):
            raise NotFound("User not found")

        now = utc_now_iso()
        task = Task(
            id=generate_id(),
            user_id=user_id,
            title=payload.title,
            description=payload.description,
            status=payload.status,
            priority=payload.priority,
            due_date=payload.due_date,
            created_at=now,
            updated_at=now,
        )
        tasks = self._load_all()
        tasks.append(task)
        self._save_all(tasks)
        logger.debug("Task created id=%s user_id=%s", task.id, user_id)
        return task

    def get(self, user_id: str, task_id: str) -> Task:
        tasks = self._load_all()
        return tasks[self._index_of(tasks, user_id, task_id)]

    def update(self, user_id: str, task_id: str, patch: dict[str, Any] | None) -> Task:
        changes = parse_input(TaskUpdate, patch).changes()
        tasks = self._load_all()
        idx = self._index_of(tasks, user_id, task_id)

        task = tasks[idx]
        for name, value in changes.items():
            setattr(task, name, value)
        task.updated_at = utc_now_iso()

        self._save_all(tasks)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return task

    def delete(self, user_id: str, task_id: str) -> None:
        tasks = self._load_all()
        idx = self._index_of(tasks, user_id, task_id)
        del tasks[idx]
        self._save_all(tasks)
        logger.debug("Task deleted id=%s user_id=%s", task_id, user_id)

    def stats(self, user_id: str) -> dict[str, int]:
        own = [t for t in self._load_all() if t.user_id == user_id]
        out = {"total": len(own)}
        for status in TaskStatus:
            out[status.value] = sum(1 for t in own if t.status == status)
        return out

    def delete_all_for_user(self, user_id: str) -> int:
        tasks = self._load_all()
        keep = [t for t in tasks if t.user_id != user_id]
        removed = len(tasks) - len(keep)
        if removed:
            self._save_all(keep)
        logger.info("Removed %d task(s) of user_id=%s", removed, user_id)
        return removed
