# src/taskpad/api/local.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from ..auth.service import AuthService
from ..core.envelope import ApiResponse
from ..errors import TaskpadError
from ..tasks.seed import seed_sample_tasks
from ..tasks.task_repository import TaskRepository

logger = logging.getLogger(__name__)


class LocalApi:
    """
    Offline implementation of the backend API, used when the server is unreachable.

    Behavior:
    - every call answers with the same envelope the server would send
    - service errors (validation, auth, conflict, not found) become failed envelopes
    - every call waits a fixed delay first, so the UI behaves as if it talked to a server
    """

    def __init__(
        self,
        auth: AuthService,
        tasks: TaskRepository,
        *,
        delay_seconds: float = 0.3,
        seed_samples: bool = False,
    ) -> None:
        self._auth = auth
        self._tasks = tasks
        self._delay = max(0.0, float(delay_seconds))
        self._seed_samples = seed_samples

    async def _run(self, op: str, fn: Callable[[], Any], *, message: str | None = None) -> ApiResponse:
        if self._delay:
            await asyncio.sleep(self._delay)
        try:
            data = fn()
        except TaskpadError as e:
            logger.debug("Local %s failed: %s", op, e.message)
            return ApiResponse.from_error(e)
        except Exception:
            logger.exception("Local %s crashed", op)
            return ApiResponse.fail("Internal error")
        return ApiResponse.ok(data, message)

    def _maybe_seed(self, result: dict[str, Any]) -> dict[str, Any]:
        if self._seed_samples:
            seed_sample_tasks(self._tasks, result["user"]["_id"])
        return result

    # ---- auth ----

    async def signup(self, name: str, email: str, password: str) -> ApiResponse:
        return await self._run("signup", lambda: self._maybe_seed(self._auth.signup(name, email, password)))

    async def login(self, email: str, password: str) -> ApiResponse:
        return await self._run("login", lambda: self._maybe_seed(self._auth.login(email, password)))

    async def me(self) -> ApiResponse:
        return await self._run("me", self._auth.me)

    async def update_profile(self, patch: dict[str, Any]) -> ApiResponse:
        return await self._run("update_profile", lambda: self._auth.update_profile(patch))

    async def change_password(self, current: str, new: str) -> ApiResponse:
        return await self._run(
            "change_password",
            lambda: self._auth.change_password(current, new),
            message="Password changed successfully",
        )

    async def delete_account(self) -> ApiResponse:
        return await self._run(
            "delete_account", self._auth.delete_account, message="Account deleted successfully"
        )

    async def logout(self) -> ApiResponse:
        return await self._run("logout", self._auth.logout, message="Logged out successfully")

    # ---- tasks ----

    def _list(self, flt: dict[str, Any] | None) -> dict[str, Any]:
        tasks = self._tasks.list_tasks(self._auth.current_user_id(), flt)
        return {"data": [t.to_record() for t in tasks], "total": len(tasks)}

    async def list_tasks(self, flt: dict[str, Any] | None = None) -> ApiResponse:
        return await self._run("list_tasks", lambda: self._list(flt))

    async def get_task(self, task_id: str) -> ApiResponse:
        return await self._run(
            "get_task", lambda: self._tasks.get(self._auth.current_user_id(), task_id).to_record()
        )

    async def create_task(self, data: dict[str, Any]) -> ApiResponse:
        return await self._run(
            "create_task", lambda: self._tasks.create(self._auth.current_user_id(), data).to_record()
        )

    async def update_task(self, task_id: str, patch: dict[str, Any]) -> ApiResponse:
        return await self._run(
            "update_task",
            lambda: self._tasks.update(self._auth.current_user_id(), task_id, patch).to_record(),
        )

    async def delete_task(self, task_id: str) -> ApiResponse:
        return await self._run(
            "delete_task",
            lambda: self._tasks.delete(self._auth.current_user_id(), task_id),
            message="Task deleted successfully",
        )

    async def stats(self) -> ApiResponse:
        return await self._run("stats", lambda: self._tasks.stats(self._auth.current_user_id()))
