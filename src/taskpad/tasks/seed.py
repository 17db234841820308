# src/taskpad/tasks/seed.py

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from .task_models import Task, TaskPriority, TaskStatus
from .task_repository import TaskRepository

logger = logging.getLogger(__name__)

SEED_FLAG = "initialized"


def seed_sample_tasks(repo: TaskRepository, user_id: str) -> list[Task]:
    """
    Give a fresh local store two welcome tasks for the first logged-in user.

    Runs at most once per store (guarded by a flag); later calls return [].
    """
    store = repo.store
    if store.get_flag(SEED_FLAG):
        return []

    tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).date().isoformat()
    samples = [
        {
            "title": "Welcome to Task Manager!",
            "description": "This is a sample task to get you started. You can edit or delete it.",
            "status": TaskStatus.PENDING.value,
            "priority": TaskPriority.HIGH.value,
            "dueDate": tomorrow,
        },
        {
            "title": "Try creating a new task",
            "description": 'Click the "Add Task" button to create your own tasks.',
            "status": TaskStatus.IN_PROGRESS.value,
            "priority": TaskPriority.MEDIUM.value,
        },
    ]
    created = [repo.create(user_id, s) for s in samples]
    store.set_flag(SEED_FLAG)
    logger.info("Seeded %d sample task(s) for user_id=%s", len(created), user_id)
    return created
