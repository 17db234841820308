# src/taskpad/storage/session.py

from __future__ import annotations

import logging
from typing import Any

from .store import SESSION, KeyValueStore

logger = logging.getLogger(__name__)

_CREDENTIAL_FIELDS = ("password",)


def public_user(user: dict[str, Any]) -> dict[str, Any]:
    """Copy of a user record without any credential field."""
    return {k: v for k, v in user.items() if k not in _CREDENTIAL_FIELDS}


class SessionState:
    """
    The single active login: an opaque bearer token plus a snapshot of the user.

    The snapshot is a cache of the Store's user record, not a source of truth;
    AuthService refreshes it after every mutation. The record lives in the
    Store's "session" collection so it survives restarts.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def _read(self) -> dict[str, Any] | None:
        records = self._store.load(SESSION)
        if not records:
            return None
        rec = records[0]
        if not rec.get("token") or not isinstance(rec.get("user"), dict):
            return None
        return rec

    def begin(self, user: dict[str, Any], token: str) -> None:
        if not token:
            raise ValueError("token is required")
        snapshot = public_user(user)
        self._store.save(SESSION, [{"token": token, "user": snapshot}])
        logger.info("Session started user_id=%s", snapshot.get("_id"))

    def current(self) -> dict[str, Any] | None:
        rec = self._read()
        return dict(rec["user"]) if rec else None

    def token(self) -> str | None:
        rec = self._read()
        return str(rec["token"]) if rec else None

    def is_active(self) -> bool:
        return self._read() is not None

    def end(self) -> None:
        had_session = self.is_active()
        self._store.remove(SESSION)
        if had_session:
            logger.info("Session ended")

    def update_current_user(self, patch: dict[str, Any]) -> dict[str, Any] | None:
        """Merge patch into the cached user. No-op (None) without a session."""
        rec = self._read()
        if rec is None:
            return None
        user = {**rec["user"], **public_user(patch)}
        self._store.save(SESSION, [{"token": rec["token"], "user": user}])
        return dict(user)
