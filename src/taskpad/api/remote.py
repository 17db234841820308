# src/taskpad/api/remote.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.envelope import ApiResponse
from ..storage.session import SessionState
from ..tasks.schemas import TaskFilter

logger = logging.getLogger(__name__)


class RemoteUnavailable(RuntimeError):
    """The backend could not be reached (connect error, timeout, broken response)."""


def _is_connection_error(exc: Exception) -> bool:
    return isinstance(exc, (httpx.TransportError, httpx.TimeoutException))


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


def _normalize(response: httpx.Response) -> ApiResponse:
    """
    Turn any backend answer into the envelope.

    - JSON body with a "success" key -> taken as-is
    - other 2xx body                 -> becomes data
    - error status                   -> success=False, message from body or HTTP reason
    """
    try:
        body: Any = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and "success" in body:
        env = ApiResponse.from_json(body)
        if not response.is_success:
            env.success = False
            env.message = env.message or response.reason_phrase
        return env

    if response.is_success:
        return ApiResponse.ok(body)

    message = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
    return ApiResponse.fail(str(message or response.reason_phrase or f"HTTP {response.status_code}"))


class RemoteApi:
    """
    httpx client for the real REST backend.

    - sends the session token as a Bearer header
    - keeps the local session in sync with auth responses
    - a 401 clears the session (the token is stale)
    - transport failures raise RemoteUnavailable; the Dispatcher decides what that means
    """

    def __init__(
        self,
        base_url: str,
        session: SessionState,
        *,
        health_path: str = "/health",
        probe_timeout_seconds: float = 2.0,
        request_timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._health_path = health_path
        self._probe_timeout = make_timeout(probe_timeout_seconds, probe_timeout_seconds)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=make_timeout(min(5.0, request_timeout_seconds), request_timeout_seconds),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def probe(self) -> bool:
        """GET the health path with a short timeout; only a 2xx answer counts as reachable."""
        try:
            response = await self._client.get(self._health_path, timeout=self._probe_timeout)
        except httpx.HTTPError as e:
            logger.info("Health probe failed (%s)", e.__class__.__name__)
            return False
        if not response.is_success:
            logger.info("Health probe got HTTP %s", response.status_code)
        return response.is_success

    def _auth_headers(self) -> dict[str, str]:
        token = self._session.token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> ApiResponse:
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=self._auth_headers()
            )
        except httpx.HTTPError as e:
            if _is_connection_error(e):
                logger.info("Remote %s %s: network/timeout error (%s)", method, path, e.__class__.__name__)
            else:
                logger.warning("Remote %s %s failed (%s)", method, path, e.__class__.__name__)
            raise RemoteUnavailable(f"Backend request failed: {method} {path}") from e

        if response.status_code >= 500:
            logger.warning("Remote %s %s: HTTP %s", method, path, response.status_code)

        env = _normalize(response)
        if response.status_code == 401:
            logger.info("Remote %s %s: 401, clearing session", method, path)
            self._session.end()
        return env

    def _remember_login(self, env: ApiResponse) -> ApiResponse:
        data = env.data if isinstance(env.data, dict) else {}
        token = data.get("token")
        user = data.get("user")
        if env.success and token and isinstance(user, dict):
            self._session.begin(user, str(token))
        return env

    # ---- auth ----

    async def signup(self, name: str, email: str, password: str) -> ApiResponse:
        env = await self._request("POST", "/auth/signup", json={"name": name, "email": email, "password": password})
        return self._remember_login(env)

    async def login(self, email: str, password: str) -> ApiResponse:
        env = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        return self._remember_login(env)

    async def me(self) -> ApiResponse:
        return await self._request("GET", "/auth/me")

    async def update_profile(self, patch: dict[str, Any]) -> ApiResponse:
        env = await self._request("PUT", "/auth/updateprofile", json=patch)
        if env.success and isinstance(env.data, dict):
            self._session.update_current_user(env.data)
        return env

    async def change_password(self, current: str, new: str) -> ApiResponse:
        return await self._request(
            "PUT", "/auth/changepassword", json={"currentPassword": current, "newPassword": new}
        )

    async def delete_account(self) -> ApiResponse:
        env = await self._request("DELETE", "/auth/deleteaccount")
        if env.success:
            self._session.end()
        return env

    async def logout(self) -> ApiResponse:
        try:
            return await self._request("POST", "/auth/logout")
        finally:
            self._session.end()

    # ---- tasks ----

    async def list_tasks(self, flt: dict[str, Any] | None = None) -> ApiResponse:
        params = TaskFilter.model_validate(flt or {}).to_params()
        return await self._request("GET", "/tasks", params=params)

    async def get_task(self, task_id: str) -> ApiResponse:
        return await self._request("GET", f"/tasks/{task_id}")

    async def create_task(self, data: dict[str, Any]) -> ApiResponse:
        return await self._request("POST", "/tasks", json=data)

    async def update_task(self, task_id: str, patch: dict[str, Any]) -> ApiResponse:
        return await self._request("PUT", f"/tasks/{task_id}", json=patch)

    async def delete_task(self, task_id: str) -> ApiResponse:
        return await self._request("DELETE", f"/tasks/{task_id}")

    async def stats(self) -> ApiResponse:
        return await self._request("GET", "/tasks/stats")
