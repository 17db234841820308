# src/taskpad/api/dispatcher.py

"""
Availability-aware dispatcher.

Every logical operation goes through here. The first call probes the backend
health endpoint (one in-flight probe shared by concurrent callers); the answer
is kept in the injected ConnectionState and decides the route:

- reachable   -> RemoteApi
- unreachable -> LocalApi (same envelopes, served from the local store)

The state is re-probed after repeated remote transport failures, or on demand
via reprobe(). A failed remote call is reported to the caller as-is; it is not
replayed against the local store.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..core.envelope import ApiResponse
from .connection import ConnectionState
from ..core.ports import BackendApi
from .remote import RemoteApi, RemoteUnavailable

logger = logging.getLogger(__name__)

BACKEND_UNAVAILABLE = "Backend unavailable. Try again later."
INTERNAL_ERROR = "Internal error"

MODE_REMOTE = "remote"
MODE_LOCAL = "local"
MODE_UNKNOWN = "unknown"


class Dispatcher:
    def __init__(
        self,
        local: BackendApi,
        remote: RemoteApi | None,
        state: ConnectionState,
    ) -> None:
        self._local = local
        self._remote = remote
        self._state = state
        self._probe_lock = asyncio.Lock()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def mode(self) -> str:
        if self._remote is None or self._state.reachable is False:
            return MODE_LOCAL
        if self._state.reachable:
            return MODE_REMOTE
        return MODE_UNKNOWN

    async def _ensure_probed(self) -> None:
        if self._remote is None or not self._state.needs_probe():
            return
        async with self._probe_lock:
            if self._state.needs_probe():
                self._state.set_probe_result(await self._remote.probe())

    async def reprobe(self) -> str:
        """Forget the last probe result and probe again. Returns the new mode."""
        self._state.invalidate()
        await self._ensure_probed()
        return self.mode

    async def _call(self, op: str, *args: Any) -> ApiResponse:
        await self._ensure_probed()

        if self._remote is None or not self._state.reachable:
            logger.debug("Dispatch %s -> local", op)
            return await getattr(self._local, op)(*args)

        logger.debug("Dispatch %s -> remote", op)
        try:
            env = await getattr(self._remote, op)(*args)
        except RemoteUnavailable:
            self._state.record_remote_failure()
            return ApiResponse.fail(BACKEND_UNAVAILABLE)
        except Exception:
            logger.exception("Remote %s crashed", op)
            return ApiResponse.fail(INTERNAL_ERROR)
        self._state.record_remote_success()
        return env

    # ---- auth ----

    async def signup(self, name: str, email: str, password: str) -> ApiResponse:
        return await self._call("signup", name, email, password)

    async def login(self, email: str, password: str) -> ApiResponse:
        return await self._call("login", email, password)

    async def me(self) -> ApiResponse:
        return await self._call("me")

    async def update_profile(self, patch: dict[str, Any]) -> ApiResponse:
        return await self._call("update_profile", patch)

    async def change_password(self, current: str, new: str) -> ApiResponse:
        return await self._call("change_password", current, new)

    async def delete_account(self) -> ApiResponse:
        return await self._call("delete_account")

    async def logout(self) -> ApiResponse:
        return await self._call("logout")

    # ---- tasks ----

    async def list_tasks(self, flt: dict[str, Any] | None = None) -> ApiResponse:
        return await self._call("list_tasks", flt)

    async def get_task(self, task_id: str) -> ApiResponse:
        return await self._call("get_task", task_id)

    async def create_task(self, data: dict[str, Any]) -> ApiResponse:
        return await self._call("create_task", data)

    async def update_task(self, task_id: str, patch: dict[str, Any]) -> ApiResponse:
        return await self._call("update_task", task_id, patch)

    async def delete_task(self, task_id: str) -> ApiResponse:
        return await self._call("delete_task", task_id)

    async def stats(self) -> ApiResponse:
        return await self._call("stats")

    async def aclose(self) -> None:
        if self._remote is not None:
            await self._remote.aclose()
