# tests/test_session.py

from __future__ import annotations

import pytest

from taskpad.storage.session import SessionState, public_user
from taskpad.storage.store import KeyValueStore


def test_session_begin_current_end(session: SessionState) -> None:
    assert session.current() is None
    assert session.token() is None
    assert not session.is_active()

    session.begin({"_id": "u1", "name": "Ada", "password": "secret"}, "tok-1")

    assert session.is_active()
    assert session.token() == "tok-1"
    # Credentials never end up in the cached user.
    assert session.current() == {"_id": "u1", "name": "Ada"}

    session.end()
    assert session.current() is None
    assert session.token() is None


def test_session_survives_restart(store: KeyValueStore) -> None:
    SessionState(store).begin({"_id": "u1", "name": "Ada"}, "tok-1")
    again = SessionState(KeyValueStore(store.db_path))
    assert again.token() == "tok-1"
    assert again.current() == {"_id": "u1", "name": "Ada"}


def test_session_requires_token(session: SessionState) -> None:
    with pytest.raises(ValueError):
        session.begin({"_id": "u1"}, "")
    assert not session.is_active()


def test_session_update_current_user(session: SessionState) -> None:
    assert session.update_current_user({"name": "Nobody"}) is None

    session.begin({"_id": "u1", "name": "Ada", "email": "ada@x.io"}, "tok-1")
    merged = session.update_current_user({"name": "Ada L.", "password": "leak"})

    assert merged == {"_id": "u1", "name": "Ada L.", "email": "ada@x.io"}
    assert session.current() == merged
    assert session.token() == "tok-1"


def test_public_user_drops_password() -> None:
    assert public_user({"_id": "u1", "password": "x"}) == {"_id": "u1"}
