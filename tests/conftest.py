# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.api.local import LocalApi
from taskpad.auth.service import AuthService
from taskpad.cli.bootstrap import build_dispatcher
from taskpad.core.state import AppState
from taskpad.storage.session import SessionState
from taskpad.storage.store import KeyValueStore
from taskpad.tasks.task_repository import TaskRepository

from .fakes import FakeCodec


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        # Paths (tmp per test run)
        data_dir=tmp_path,
        store_db_path=tmp_path / "store.sqlite3",
        # No backend: everything goes to the local store
        api_base_url="",
        health_path="/health",
        probe_timeout_seconds=0.5,
        request_timeout_seconds=1.0,
        reprobe_after_failures=3,
        # Local fallback
        local_delay_seconds=0.0,
        credential_codec="base64",
        strict_email=False,
        seed_samples=False,
        console_enabled=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> KeyValueStore:
    return KeyValueStore(settings.store_db_path)


@pytest.fixture()
def session(store: KeyValueStore) -> SessionState:
    return SessionState(store)


@pytest.fixture()
def repo(store: KeyValueStore) -> TaskRepository:
    return TaskRepository(store)


@pytest.fixture()
def codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture()
def auth(store: KeyValueStore, codec: FakeCodec, session: SessionState, repo: TaskRepository) -> AuthService:
    return AuthService(store, codec, session, repo)


@pytest.fixture()
def local_api(auth: AuthService, repo: TaskRepository) -> LocalApi:
    return LocalApi(auth, repo, delay_seconds=0)


@pytest.fixture()
def state(settings: SimpleNamespace, store: KeyValueStore, session: SessionState, codec: FakeCodec) -> AppState:
    """
    AppState wired for the local store only.

    NOTE: We keep the real SQLite store here because its correctness is part
    of what we want to test.
    """
    return AppState(
        settings=settings,
        store=store,
        session=session,
        api=build_dispatcher(settings, store, session, codec=codec),
    )
