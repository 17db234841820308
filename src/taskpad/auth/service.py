# src/taskpad/auth/service.py

from __future__ import annotations

import logging
import secrets
from typing import Any

from ..core.ports import CredentialCodec
from ..core.validation import parse_input
from ..errors import Conflict, Unauthorized
from ..storage.session import SessionState
from ..storage.store import USERS, KeyValueStore
from ..tasks.task_models import generate_id, utc_now_iso
from ..tasks.task_repository import TaskRepository
from .schemas import LoginRequest, PasswordChange, ProfileUpdate, SignupRequest
from .user_models import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
WRONG_CURRENT_PASSWORD = "Current password is incorrect"


def new_token() -> str:
    return secrets.token_urlsafe(32)


class AuthService:
    """
    Local account operations: signup, login, profile, password, deletion.

    The Store holds the truth about users; SessionState only caches the
    logged-in user and is refreshed from the Store after every mutation.

    strict_email:
    - False (default): update_profile accepts an email already used by another account,
      which is what the browser demo did.
    - True: such an update fails with Conflict.
    """

    def __init__(
        self,
        store: KeyValueStore,
        codec: CredentialCodec,
        session: SessionState,
        tasks: TaskRepository,
        *,
        strict_email: bool = False,
    ) -> None:
        self._store = store
        self._codec = codec
        self._session = session
        self._tasks = tasks
        self._strict_email = strict_email

    # ---- low-level helpers ----

    def _load_users(self) -> list[User]:
        return [User.from_record(r) for r in self._store.load(USERS)]

    def _save_users(self, users: list[User]) -> None:
        self._store.save(USERS, [u.to_record() for u in users])

    @staticmethod
    def _find_by_email(users: list[User], email: str) -> User | None:
        email = email.lower()
        for u in users:
            if u.email.lower() == email:
                return u
        return None

    def _start_session(self, user: User) -> dict[str, Any]:
        token = new_token()
        public = user.to_public()
        self._session.begin(public, token)
        return {"token": token, "user": public}

    def _require_user(self, users: list[User] | None = None) -> tuple[User, list[User]]:
        """Resolve the session user against the Store; a dangling session is ended."""
        current = self._session.current()
        if current is None:
            raise Unauthorized()
        if users is None:
            users = self._load_users()
        for u in users:
            if u.id == current.get("_id"):
                return u, users
        logger.warning("Session refers to missing user_id=%s; ending it", current.get("_id"))
        self._session.end()
        raise Unauthorized()

    # ---- public API ----

    def signup(self, name: str, email: str, password: str) -> dict[str, Any]:
        req = parse_input(SignupRequest, {"name": name, "email": email, "password": password})

        users = self._load_users()
        if self._find_by_email(users, req.email) is not None:
            logger.info("Signup rejected: email already registered")
            raise Conflict("Email already registered")

        user = User(
            id=generate_id(),
            name=req.name,
            email=req.email,
            password=self._codec.encode(req.password),
            created_at=utc_now_iso(),
        )
        users.append(user)
        self._save_users(users)
        logger.info("User registered user_id=%s", user.id)
        return self._start_session(user)

    def login(self, email: str, password: str) -> dict[str, Any]:
        req = parse_input(LoginRequest, {"email": email, "password": password})

        user = self._find_by_email(self._load_users(), req.email)
        if user is None or not self._codec.matches(req.password, user.password):
            logger.info("Login failed")
            raise Unauthorized(INVALID_CREDENTIALS)

        logger.info("Login ok user_id=%s", user.id)
        return self._start_session(user)

    def me(self) -> dict[str, Any]:
        user, _ = self._require_user()
        return user.to_public()

    def update_profile(self, patch: dict[str, Any] | None) -> dict[str, Any]:
        user, users = self._require_user()
        changes = parse_input(ProfileUpdate, patch).changes()

        new_email = changes.get("email")
        if self._strict_email and new_email:
            other = self._find_by_email([u for u in users if u.id != user.id], new_email)
            if other is not None:
                raise Conflict("Email already registered")

        if "name" in changes:
            user.name = changes["name"]
        if new_email:
            user.email = new_email
        self._save_users(users)

        public = user.to_public()
        self._session.update_current_user(public)
        logger.info("Profile updated user_id=%s fields=%s", user.id, sorted(changes))
        return public

    def change_password(self, current: str, new: str) -> None:
        user, users = self._require_user()
        req = parse_input(PasswordChange, {"currentPassword": current, "newPassword": new})

        if not self._codec.matches(req.current_password, user.password):
            logger.info("Password change rejected user_id=%s", user.id)
            raise Unauthorized(WRONG_CURRENT_PASSWORD)

        user.password = self._codec.encode(req.new_password)
        self._save_users(users)
        self._session.update_current_user(user.to_public())
        logger.info("Password changed user_id=%s", user.id)

    def delete_account(self) -> None:
        user, users = self._require_user()

        self._save_users([u for u in users if u.id != user.id])
        removed = self._tasks.delete_all_for_user(user.id)
        self._session.end()
        logger.info("Account deleted user_id=%s tasks_removed=%d", user.id, removed)

    def logout(self) -> None:
        self._session.end()

    def current_user_id(self) -> str:
        """Id of the logged-in user (Unauthorized when there is none)."""
        user, _ = self._require_user()
        return user.id
