# src/taskpad/tasks/schemas.py

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .task_models import TaskPriority, TaskStatus, parse_iso

TITLE_MAX = 100
DESCRIPTION_MAX = 500

ALL = "all"
SORT_KEYS = ("newest", "oldest", "title", "priority")


def _check_title(v: Any) -> str:
    if not isinstance(v, str) or not v.strip():
        raise ValueError("Task title is required")
    v = v.strip()
    if len(v) > TITLE_MAX:
        raise ValueError(f"Title cannot exceed {TITLE_MAX} characters")
    return v


def _check_description(v: Any) -> str:
    if v is None:
        return ""
    if not isinstance(v, str):
        raise ValueError("Description must be text")
    v = v.strip()
    if len(v) > DESCRIPTION_MAX:
        raise ValueError(f"Description cannot exceed {DESCRIPTION_MAX} characters")
    return v


def _check_status(v: Any) -> TaskStatus:
    try:
        return TaskStatus(v)
    except ValueError:
        raise ValueError("Invalid status") from None


def _check_priority(v: Any) -> TaskPriority:
    try:
        return TaskPriority(v)
    except ValueError:
        raise ValueError("Invalid priority") from None


def _check_due_date(v: Any) -> str | None:
    if v is None or v == "":
        return None
    if not isinstance(v, str) or parse_iso(v) is None:
        raise ValueError("Invalid due date format")
    return v.strip()


class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Required fields default to None so a missing value gets the same message as a blank one.
    title: str = Field(default=None, validate_default=True)
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: str | None = Field(default=None, alias="dueDate")

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return _check_title(v)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> str:
        return _check_description(v)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> TaskStatus:
        return TaskStatus.PENDING if v is None else _check_status(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v: Any) -> TaskPriority:
        return TaskPriority.MEDIUM if v is None else _check_priority(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> str | None:
        return _check_due_date(v)


class TaskUpdate(BaseModel):
    """
    Partial update. Only fields present in the payload are applied.

    Identity fields (_id, userId, createdAt) are not part of the schema and are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: str | None = Field(default=None, alias="dueDate")

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return _check_title(v)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> str:
        return _check_description(v)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> TaskStatus:
        return _check_status(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v: Any) -> TaskPriority:
        return _check_priority(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> str | None:
        return _check_due_date(v)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly provided by the caller, keyed by attribute name."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskFilter(BaseModel):
    """List query. Lenient: unknown values simply match nothing / do not reorder."""

    model_config = ConfigDict(extra="ignore")

    status: str | None = None
    priority: str | None = None
    search: str | None = None
    sort: str | None = None

    @field_validator("status", "priority", "search", "sort", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        if v is None:
            return None
        return str(v).strip()

    def to_params(self) -> dict[str, str]:
        """Query-string form (empty values dropped)."""
        return {k: v for k, v in self.model_dump().items() if v}
