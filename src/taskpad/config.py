# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Tests build their own settings object instead of reading the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKPAD"

CODEC_BASE64 = "base64"
CODEC_BCRYPT = "bcrypt"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Real environment variables win over .env entries.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connectors ----
    console_enabled: bool

    # ---- Remote backend ----
    api_base_url: str
    health_path: str
    probe_timeout_seconds: float
    request_timeout_seconds: float
    reprobe_after_failures: int

    # ---- Local fallback ----
    data_dir: Path
    store_db_path: Path
    local_delay_ms: int
    credential_codec: str
    strict_email: bool
    seed_samples: bool

    @property
    def local_delay_seconds(self) -> float:
        return max(0, self.local_delay_ms) / 1000.0

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad") or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        api_base_url = _env(_k("API_BASE_URL"), "http://localhost:5000/api").rstrip("/")
        health_path = _env(_k("HEALTH_PATH"), "/health")
        probe_timeout_seconds = _env_float(_k("PROBE_TIMEOUT_SECONDS"), 2.0)
        request_timeout_seconds = _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0)
        reprobe_after_failures = _env_int(_k("REPROBE_AFTER_FAILURES"), 3)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        store_db_path = _env_path(_k("STORE_DB_PATH"), data_dir / "store.sqlite3")
        local_delay_ms = _env_int(_k("LOCAL_DELAY_MS"), 300)

        credential_codec = _env(_k("CREDENTIAL_CODEC"), CODEC_BASE64).strip().lower()
        if credential_codec not in (CODEC_BASE64, CODEC_BCRYPT):
            credential_codec = CODEC_BASE64

        strict_email = _env_bool(_k("STRICT_EMAIL"), False)
        seed_samples = _env_bool(_k("SEED_SAMPLES"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            api_base_url=api_base_url,
            health_path=health_path,
            probe_timeout_seconds=probe_timeout_seconds,
            request_timeout_seconds=request_timeout_seconds,
            reprobe_after_failures=reprobe_after_failures,
            data_dir=data_dir,
            store_db_path=store_db_path,
            local_delay_ms=local_delay_ms,
            credential_codec=credential_codec,
            strict_email=strict_email,
            seed_samples=seed_samples,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
