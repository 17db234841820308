# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store, session, credential codec and services together,
- builds the Dispatcher over the remote backend and the local fallback.
"""

from __future__ import annotations

import logging

from ..api.connection import ConnectionState
from ..api.dispatcher import Dispatcher
from ..api.local import LocalApi
from ..api.remote import RemoteApi
from ..auth.codec import make_codec
from ..auth.service import AuthService
from ..config import get_settings
from ..core.ports import CredentialCodec
from ..core.state import AppState
from ..storage.session import SessionState
from ..storage.store import KeyValueStore
from ..tasks.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_dispatcher(
    settings,
    store: KeyValueStore,
    session: SessionState,
    *,
    codec: CredentialCodec | None = None,
    remote: RemoteApi | None = None,
) -> Dispatcher:
    """Wire local services + remote client into a Dispatcher."""
    if codec is None:
        codec = make_codec(getattr(settings, "credential_codec", "base64"))

    tasks = TaskRepository(store)
    auth = AuthService(
        store,
        codec,
        session,
        tasks,
        strict_email=bool(getattr(settings, "strict_email", False)),
    )
    delay = float(getattr(settings, "local_delay_seconds", 0.0))
    logger.info("Local fallback: codec=%s delay=%.3fs", codec.name, delay)
    local = LocalApi(
        auth,
        tasks,
        delay_seconds=delay,
        seed_samples=bool(getattr(settings, "seed_samples", False)),
    )

    if remote is None:
        base_url = str(getattr(settings, "api_base_url", "") or "").strip()
        if base_url:
            remote = RemoteApi(
                base_url,
                session,
                health_path=getattr(settings, "health_path", "/health"),
                probe_timeout_seconds=float(getattr(settings, "probe_timeout_seconds", 2.0)),
                request_timeout_seconds=float(getattr(settings, "request_timeout_seconds", 10.0)),
            )
        else:
            logger.info("No API base URL configured; local store only.")

    state = ConnectionState(reprobe_after_failures=int(getattr(settings, "reprobe_after_failures", 3)))
    return Dispatcher(local, remote, state)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = KeyValueStore(settings.store_db_path)
    session = SessionState(store)

    return AppState(
        settings=settings,
        store=store,
        session=session,
        api=build_dispatcher(settings, store, session),
    )
