# src/taskpad/errors.py

"""
Error taxonomy shared by the local services.

Services raise these; LocalApi turns them into failed response envelopes.
None of them is fatal to the process.
"""

from __future__ import annotations

from dataclasses import dataclass


class TaskpadError(Exception):
    """Base class for expected, user-facing failures."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ValidationError(TaskpadError):
    """Bad input shape, length or enum value. Carries field-level messages."""

    default_message = "Validation failed"

    def __init__(self, errors: list[FieldError] | None = None, message: str | None = None) -> None:
        self.errors: list[FieldError] = list(errors or [])
        if message is None and len(self.errors) == 1:
            message = self.errors[0].message
        super().__init__(message)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldError(field, message)])


class Unauthorized(TaskpadError):
    default_message = "Not authenticated"


class Conflict(TaskpadError):
    default_message = "Email already registered"


class NotFound(TaskpadError):
    default_message = "Not found"
