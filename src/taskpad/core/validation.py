# src/taskpad/core/validation.py

from __future__ import annotations

from typing import Any, TypeVar

import pydantic

from ..errors import FieldError, ValidationError

M = TypeVar("M", bound=pydantic.BaseModel)


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(p) for p in loc) or "body"


def _message(err: dict[str, Any]) -> str:
    # Custom validators raise ValueError(msg); pydantic prefixes it with "Value error, ".
    ctx = err.get("ctx") or {}
    inner = ctx.get("error")
    if inner is not None:
        return str(inner)
    return str(err.get("msg") or "Invalid value")


def parse_input(model: type[M], data: Any) -> M:
    """Validate a request payload, mapping pydantic errors to field-level messages."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError.single("body", "Request body must be an object")
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        errors = [FieldError(_field_name(tuple(err["loc"])), _message(err)) for err in e.errors()]
        raise ValidationError(errors) from None
