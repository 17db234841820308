# src/taskpad/tasks/task_models.py

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

_B36 = string.digits + string.ascii_lowercase


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        # high sorts first
        return {"high": 1, "medium": 2, "low": 3}[self.value]

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


def _b36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_B36[r])
    return "".join(reversed(out))


def generate_id() -> str:
    """Millisecond timestamp in base 36 followed by random base-36 characters."""
    return _b36(int(time.time() * 1000)) + "".join(secrets.choice(_B36) for _ in range(11))


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(raw: str | None) -> datetime | None:
    if not raw:
        return None
    s = raw.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(slots=True)
class Task:
    id: str
    user_id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: str | None
    created_at: str
    updated_at: str

    def to_record(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> Task:
        return cls(
            id=str(rec.get("_id") or ""),
            user_id=str(rec.get("userId") or ""),
            title=str(rec.get("title") or ""),
            description=str(rec.get("description") or ""),
            status=TaskStatus.from_db(rec.get("status")),
            priority=TaskPriority.from_db(rec.get("priority")),
            due_date=rec.get("dueDate") or None,
            created_at=str(rec.get("createdAt") or ""),
            updated_at=str(rec.get("updatedAt") or ""),
        )
