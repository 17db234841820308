# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The Dispatcher depends on Protocols instead of concrete implementations.
This keeps the remote backend / local fallback / credential strategy swappable
and makes testing easier.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .envelope import ApiResponse


class CredentialCodec(Protocol):
    """Password encoding strategy (demo base64, bcrypt, or a fast fake in tests)."""

    name: str

    def encode(self, plaintext: str) -> str: ...

    def matches(self, plaintext: str, encoded: str) -> bool: ...


class AuthApi(Protocol):
    async def signup(self, name: str, email: str, password: str) -> ApiResponse: ...

    async def login(self, email: str, password: str) -> ApiResponse: ...

    async def me(self) -> ApiResponse: ...

    async def update_profile(self, patch: dict[str, Any]) -> ApiResponse: ...

    async def change_password(self, current: str, new: str) -> ApiResponse: ...

    async def delete_account(self) -> ApiResponse: ...

    async def logout(self) -> ApiResponse: ...


class TaskApi(Protocol):
    async def list_tasks(self, flt: dict[str, Any] | None = None) -> ApiResponse: ...

    async def get_task(self, task_id: str) -> ApiResponse: ...

    async def create_task(self, data: dict[str, Any]) -> ApiResponse: ...

    async def update_task(self, task_id: str, patch: dict[str, Any]) -> ApiResponse: ...

    async def delete_task(self, task_id: str) -> ApiResponse: ...

    async def stats(self) -> ApiResponse: ...


class BackendApi(AuthApi, TaskApi, Protocol):
    """Full logical operation surface, served either remotely or locally."""
