# src/taskpad/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..api.dispatcher import Dispatcher
from ..storage.session import SessionState
from ..storage.store import KeyValueStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    store: KeyValueStore
    session: SessionState
    api: Dispatcher

    # Short-lived UI memory: last listed tasks, so commands can refer to them by number.
    last_listed: list[str] = field(default_factory=list)

    def resolve_task_ref(self, ref: str) -> str:
        """Accept either a task id or a 1-based index into the last /tasks listing."""
        if ref.isdigit():
            idx = int(ref) - 1
            if 0 <= idx < len(self.last_listed):
                return self.last_listed[idx]
        return ref
