# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real credentials. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKPAD_APP_NAME": "App display name (default: taskpad).",
    "TASKPAD_LOG_LEVEL": "Console logging level (default: INFO).",
    # Connectors
    "TASKPAD_CONSOLE_ENABLED": "Enable console connector (true/false).",
    # Remote backend
    "TASKPAD_API_BASE_URL": (
        "REST backend base URL (default: http://localhost:5000/api). Empty => local store only."
    ),
    "TASKPAD_HEALTH_PATH": "Health endpoint probed before the first call (default: /health).",
    "TASKPAD_PROBE_TIMEOUT_SECONDS": "Health probe timeout (default: 2.0).",
    "TASKPAD_REQUEST_TIMEOUT_SECONDS": "Timeout for regular API requests (default: 10.0).",
    "TASKPAD_REPROBE_AFTER_FAILURES": (
        "Re-probe the backend after this many consecutive transport failures (0 => never; default: 3)."
    ),
    # Local fallback (gitignored)
    "TASKPAD_DATA_DIR": "Local data directory (default: .local/taskpad).",
    "TASKPAD_STORE_DB_PATH": "Key-value store SQLite path (default: <data_dir>/store.sqlite3).",
    "TASKPAD_LOCAL_DELAY_MS": "Artificial latency of the local fallback in ms (default: 300).",
    "TASKPAD_CREDENTIAL_CODEC": "Local password encoding: base64 | bcrypt (default: base64).",
    "TASKPAD_STRICT_EMAIL": "Reject profile email changes that collide with another user (default: false).",
    "TASKPAD_SEED_SAMPLES": "Create two welcome tasks on first local signup/login (default: false).",
}
