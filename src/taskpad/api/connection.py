# src/taskpad/api/connection.py

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConnectionState:
    """
    Whether the remote backend is reachable, as last established by a probe.

    reachable:
    - None  -> unknown, the next call must probe
    - True  -> route to the remote backend
    - False -> route to the local fallback

    Re-probe policy: after `reprobe_after_failures` consecutive remote transport
    failures the state goes back to unknown (0 disables the policy).
    """

    reprobe_after_failures: int = 3
    reachable: bool | None = None
    consecutive_failures: int = 0
    probed_at: float | None = None

    def needs_probe(self) -> bool:
        return self.reachable is None

    def set_probe_result(self, reachable: bool) -> None:
        self.reachable = reachable
        self.consecutive_failures = 0
        self.probed_at = time.time()
        logger.info("Backend %s", "reachable: using remote API" if reachable else "unreachable: using local store")

    def record_remote_success(self) -> None:
        self.consecutive_failures = 0

    def record_remote_failure(self) -> bool:
        """Count a transport failure. Returns True when the state was reset to unknown."""
        self.consecutive_failures += 1
        limit = int(self.reprobe_after_failures)
        if limit > 0 and self.consecutive_failures >= limit:
            logger.info("Remote failed %d time(s) in a row; will re-probe", self.consecutive_failures)
            self.invalidate()
            return True
        return False

    def invalidate(self) -> None:
        self.reachable = None
        self.consecutive_failures = 0
