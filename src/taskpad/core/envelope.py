# src/taskpad/core/envelope.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import TaskpadError, ValidationError


@dataclass(slots=True)
class ApiResponse:
    """
    Uniform result of every logical operation, local or remote.

    Mirrors the backend JSON envelope: {success, data?, message?, errors?}.
    """

    success: bool
    data: Any = None
    message: str | None = None
    errors: list[dict[str, str]] = field(default_factory=list)

    @classmethod
    def ok(cls, data: Any = None, message: str | None = None) -> "ApiResponse":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, message: str, errors: list[dict[str, str]] | None = None) -> "ApiResponse":
        return cls(success=False, message=message, errors=list(errors or []))

    @classmethod
    def from_error(cls, err: TaskpadError) -> "ApiResponse":
        errors: list[dict[str, str]] = []
        if isinstance(err, ValidationError):
            errors = [e.to_dict() for e in err.errors]
        return cls.fail(err.message, errors)

    @classmethod
    def from_json(cls, body: Any) -> "ApiResponse":
        """Accept a backend body that already follows the envelope shape."""
        if not isinstance(body, dict):
            return cls.ok(body)
        raw_errors = body.get("errors") or []
        errors: list[dict[str, str]] = []
        if isinstance(raw_errors, list):
            for e in raw_errors:
                if isinstance(e, dict):
                    errors.append(
                        {
                            "field": str(e.get("field") or e.get("path") or e.get("param") or ""),
                            "message": str(e.get("message") or e.get("msg") or ""),
                        }
                    )
        return cls(
            success=bool(body.get("success")),
            data=body.get("data"),
            message=body.get("message"),
            errors=errors,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data
        if self.message is not None:
            out["message"] = self.message
        if self.errors:
            out["errors"] = list(self.errors)
        return out
