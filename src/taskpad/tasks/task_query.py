# src/taskpad/tasks/task_query.py

"""
Filtering and sorting for task lists.

Order of application:
- owner (done by the repository)
- status equality (skipped for "all" / empty)
- priority equality (same rule)
- case-insensitive substring search over title OR description
- sort: newest | oldest | title | priority (anything else keeps input order)

All sorts are stable.
"""

from __future__ import annotations

from datetime import datetime, timezone

from .schemas import ALL, TaskFilter
from .task_models import Task, parse_iso

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def _created(task: Task) -> datetime:
    return parse_iso(task.created_at) or _EPOCH


def _priority_rank(task: Task) -> int:
    return task.priority.rank


def _is_active(value: str | None) -> bool:
    return bool(value) and value != ALL


def filter_tasks(tasks: list[Task], flt: TaskFilter) -> list[Task]:
    out = list(tasks)

    if _is_active(flt.status):
        out = [t for t in out if t.status.value == flt.status]

    if _is_active(flt.priority):
        out = [t for t in out if t.priority.value == flt.priority]

    if flt.search:
        needle = flt.search.lower()
        out = [t for t in out if needle in t.title.lower() or needle in (t.description or "").lower()]

    return out


def sort_tasks(tasks: list[Task], sort: str | None) -> list[Task]:
    if sort == "newest":
        return sorted(tasks, key=_created, reverse=True)
    if sort == "oldest":
        return sorted(tasks, key=_created)
    if sort == "title":
        return sorted(tasks, key=lambda t: t.title.casefold())
    if sort == "priority":
        return sorted(tasks, key=_priority_rank)
    return list(tasks)


def apply_query(tasks: list[Task], flt: TaskFilter) -> list[Task]:
    return sort_tasks(filter_tasks(tasks, flt), flt.sort)
