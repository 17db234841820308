# tests/test_dispatcher.py

from __future__ import annotations

import asyncio

import pytest

from taskpad.api.connection import ConnectionState
from taskpad.api.dispatcher import (
    BACKEND_UNAVAILABLE,
    INTERNAL_ERROR,
    MODE_LOCAL,
    MODE_REMOTE,
    MODE_UNKNOWN,
    Dispatcher,
)
from taskpad.api.local import LocalApi
from taskpad.api.remote import RemoteApi
from taskpad.storage.session import SessionState

from .fakes import FakeBackend

BASE = "http://backend.test/api"


def _dispatcher(
    backend: FakeBackend,
    local_api: LocalApi,
    session: SessionState,
    *,
    reprobe_after_failures: int = 3,
) -> Dispatcher:
    remote = RemoteApi(BASE, session, transport=backend.transport())
    return Dispatcher(local_api, remote, ConnectionState(reprobe_after_failures=reprobe_after_failures))


@pytest.mark.asyncio
async def test_no_remote_means_local(local_api: LocalApi) -> None:
    api = Dispatcher(local_api, None, ConnectionState())
    assert api.mode == MODE_LOCAL

    env = await api.signup("Ada", "ada@x.io", "secret1")
    assert env.success
    assert (await api.create_task({"title": "t"})).success
    assert (await api.list_tasks()).data["total"] == 1
    await api.aclose()


@pytest.mark.asyncio
async def test_probe_once_then_remote(local_api: LocalApi, session: SessionState) -> None:
    backend = FakeBackend(routes={"GET /tasks/stats": {"success": True, "data": {"total": 7}}})
    api = _dispatcher(backend, local_api, session)
    try:
        assert api.mode == MODE_UNKNOWN

        results = await asyncio.gather(api.stats(), api.stats(), api.stats())

        assert all(r.data == {"total": 7} for r in results)
        assert len(backend.calls("/health")) == 1
        assert len(backend.calls("/tasks/stats")) == 3
        assert api.mode == MODE_REMOTE
        assert api.state.probed_at is not None
    finally:
        await api.aclose()


@pytest.mark.asyncio
async def test_unhealthy_backend_falls_back_to_local(local_api: LocalApi, session: SessionState) -> None:
    backend = FakeBackend(healthy=False)
    api = _dispatcher(backend, local_api, session)
    try:
        env = await api.signup("Ada", "ada@x.io", "secret1")
        assert env.success
        assert api.mode == MODE_LOCAL

        await api.create_task({"title": "offline"})
        listed = await api.list_tasks()
        assert [t["title"] for t in listed.data["data"]] == ["offline"]

        # Only the health check ever hit the network.
        assert [r.url.path for r in backend.requests] == ["/api/health"]
    finally:
        await api.aclose()


@pytest.mark.asyncio
async def test_unreachable_backend_falls_back_to_local(local_api: LocalApi, session: SessionState) -> None:
    backend = FakeBackend(down=True)
    api = _dispatcher(backend, local_api, session)
    try:
        assert (await api.signup("Ada", "ada@x.io", "secret1")).success
        assert api.mode == MODE_LOCAL
    finally:
        await api.aclose()


@pytest.mark.asyncio
async def test_remote_failures_trigger_reprobe(local_api: LocalApi, session: SessionState) -> None:
    backend = FakeBackend(routes={"GET /tasks/stats": {"success": True, "data": {"total": 1}}})
    api = _dispatcher(backend, local_api, session, reprobe_after_failures=2)
    try:
        assert (await api.stats()).success
        assert api.mode == MODE_REMOTE

        # Backend dies after the probe: calls fail, they are not replayed locally.
        backend.down = True
        first = await api.stats()
        assert not first.success
        assert first.message == BACKEND_UNAVAILABLE
        assert api.mode == MODE_REMOTE
        assert api.state.consecutive_failures == 1

        await api.stats()
        assert api.mode == MODE_UNKNOWN

        # Next call probes again and settles on the local store.
        env = await api.signup("Ada", "ada@x.io", "secret1")
        assert env.success
        assert api.mode == MODE_LOCAL
        assert len(backend.calls("/health")) == 2
    finally:
        await api.aclose()


@pytest.mark.asyncio
async def test_reprobe_on_demand(local_api: LocalApi, session: SessionState) -> None:
    backend = FakeBackend(healthy=False)
    api = _dispatcher(backend, local_api, session)
    try:
        await api.stats()
        assert api.mode == MODE_LOCAL

        backend.healthy = True
        assert await api.reprobe() == MODE_REMOTE
        assert len(backend.calls("/health")) == 2
    finally:
        await api.aclose()


def test_connection_state_policy() -> None:
    state = ConnectionState(reprobe_after_failures=0)
    state.set_probe_result(True)
    for _ in range(10):
        assert state.record_remote_failure() is False
    assert state.reachable is True

    state = ConnectionState(reprobe_after_failures=2)
    state.set_probe_result(True)
    assert state.record_remote_failure() is False
    state.record_remote_success()
    assert state.record_remote_failure() is False
    assert state.record_remote_failure() is True
    assert state.needs_probe()


@pytest.mark.asyncio
async def test_probe_timeout_falls_back_to_local(local_api: LocalApi, session: SessionState) -> None:
    backend = FakeBackend(slow=True)
    api = _dispatcher(backend, local_api, session)
    try:
        env = await api.signup("Ada", "ada@x.io", "secret1")
        assert env.success
        assert api.mode == MODE_LOCAL

        await api.create_task({"title": "offline"})
        listed = await api.list_tasks()
        assert [t["title"] for t in listed.data["data"]] == ["offline"]
        assert len(backend.requests) == 1
    finally:
        await api.aclose()


@pytest.mark.asyncio
async def test_unexpected_remote_error_becomes_envelope(local_api: LocalApi, session: SessionState) -> None:
    def broken(request):
        raise RuntimeError("handler bug")

    backend = FakeBackend(routes={"GET /tasks/stats": broken})
    api = _dispatcher(backend, local_api, session)
    try:
        env = await api.stats()
        assert not env.success
        assert env.message == INTERNAL_ERROR
        # Not a transport failure: routing stays on the backend.
        assert api.mode == MODE_REMOTE
        assert api.state.consecutive_failures == 0
    finally:
        await api.aclose()
