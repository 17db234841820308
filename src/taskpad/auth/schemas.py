# src/taskpad/auth/schemas.py

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

PASSWORD_MIN = 6

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(v: Any) -> str:
    if not isinstance(v, str) or not _EMAIL_RE.match(v.strip()):
        raise ValueError("Please provide a valid email")
    return v.strip().lower()


def _check_name(v: Any, message: str) -> str:
    if not isinstance(v, str) or not v.strip():
        raise ValueError(message)
    return v.strip()


def _check_new_password(v: Any, message: str) -> str:
    if not isinstance(v, str) or len(v) < PASSWORD_MIN:
        raise ValueError(message)
    return v


class SignupRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(default=None, validate_default=True)
    email: str = Field(default=None, validate_default=True)
    password: str = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return _check_name(v, "Name is required")

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: Any) -> str:
        return normalize_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v: Any) -> str:
        return _check_new_password(v, f"Password must be at least {PASSWORD_MIN} characters")


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(default=None, validate_default=True)
    password: str = Field(default=None, validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: Any) -> str:
        return normalize_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v: Any) -> str:
        if not isinstance(v, str) or not v:
            raise ValueError("Password is required")
        return v


class ProfileUpdate(BaseModel):
    """Only name and email can be changed through the profile endpoint."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return _check_name(v, "Name cannot be empty")

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: Any) -> str:
        return normalize_email(v)

    def changes(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class PasswordChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current_password: str = Field(default=None, alias="currentPassword", validate_default=True)
    new_password: str = Field(default=None, alias="newPassword", validate_default=True)

    @field_validator("current_password", mode="before")
    @classmethod
    def _current(cls, v: Any) -> str:
        if not isinstance(v, str) or not v:
            raise ValueError("Current password is required")
        return v

    @field_validator("new_password", mode="before")
    @classmethod
    def _new(cls, v: Any) -> str:
        return _check_new_password(v, f"New password must be at least {PASSWORD_MIN} characters")
