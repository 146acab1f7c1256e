"""Process-wide logging for the eventcal CLI and notification loop."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 2 * 1024 * 1024
LOG_FILE_BACKUPS = 5
QUIET_LOGGERS = ("httpx", "httpcore", "apscheduler")


def _level_from_env() -> int:
    name = os.getenv("LOG_LEVEL", "").strip().upper() or "INFO"
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


def _rotating_handler(log_file: str) -> logging.Handler | None:
    path = Path(log_file)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
    except OSError as exc:
        logging.getLogger(__name__).warning("Log file unavailable: path=%s error=%s", path, exc)
        return None


def configure_logging(*, level: int | None = None, log_file: str | None = None) -> None:
    """Install stderr (and optional rotating file) handlers on the root logger.

    ``level`` defaults to LOG_LEVEL, ``log_file`` to LOG_FILE. Calling it again
    replaces the handlers installed before.
    """
    resolved_level = _level_from_env() if level is None else level
    resolved_file = os.getenv("LOG_FILE", "").strip() if log_file is None else log_file

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(resolved_level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if resolved_file:
        file_handler = _rotating_handler(resolved_file)
        if file_handler is not None:
            handlers.append(file_handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
