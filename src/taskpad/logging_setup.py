# src/taskpad/logging_setup.py

"""
Logging for the taskpad console.

The console shows routing decisions (remote vs local), auth events and errors
while the REPL is running. The store logs a line per save, which is only
useful in the log file, so the console sees it from WARNING up.
Everything at DEBUG goes to <data_dir>/taskpad.log.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskpad.log"

# Console threshold per logger prefix; the longest matching prefix wins.
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "taskpad": logging.NOTSET,
    "taskpad.storage": logging.WARNING,
    "py.warnings": logging.ERROR,
}

# Third-party clients log every request at INFO.
_QUIET_LIBRARIES = ("httpx", "httpcore")


class _ConsoleThresholds(logging.Filter):
    """Drop console records below the threshold of their logger prefix (ERROR for unknown loggers)."""

    def filter(self, record: logging.LogRecord) -> bool:
        threshold = logging.ERROR
        matched = ""
        for prefix, level in _CONSOLE_THRESHOLDS.items():
            if (record.name == prefix or record.name.startswith(prefix + ".")) and len(prefix) > len(matched):
                matched, threshold = prefix, level
        return record.levelno >= threshold


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpad",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """Install the console and file handlers on the root logger. Returns the log file path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleThresholds())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
