"""Structured logging utilities for directory-manager."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "directory_manager"

_LOG_FORMAT = "%(message)s"
_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5
_LOG_DIR_NAME = ".directory_manager/logs"


def _sanitize(value: str) -> str:
    """Replace the home directory prefix of *value* with ``~/``."""

    home_str = str(Path.home())
    if not value.startswith(home_str):
        return value
    remainder = value[len(home_str):]
    if not remainder:
        return "~"
    if remainder[0] not in ("/", "\\"):
        # /home/alice2 is not inside /home/alice
        return value
    return f"~/{remainder[1:]}"


def next_log_path(prefix: str) -> Path:
    """Return a fresh timestamped log file path for a run named *prefix*."""

    stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    return Path.home() / _LOG_DIR_NAME / f"{prefix}-{stamp}.log"


def configure_logging(
    log_path: Path | None = None,
    *,
    level: int = logging.INFO,
    max_bytes: int = _MAX_BYTES,
    backup_count: int = _BACKUP_COUNT,
) -> logging.Logger:
    """Configure and return the package logger.

    Without *log_path* a stream handler is installed once and later calls only
    adjust its level. Passing *log_path* replaces existing handlers with a
    rotating file handler.
    """

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if logger.handlers:
        if log_path:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
        else:
            for handler in logger.handlers:
                handler.setLevel(level)
            return logger

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler()

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    return logger


def get_logger(name: str, logger: logging.Logger | None = None) -> logging.Logger:
    """Return *logger* or the component logger ``directory_manager.<name>``."""

    if logger is not None:
        return logger
    component = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        configure_logging()
    return component


def _prepare_payload(data: dict[str, Any]) -> dict[str, Any]:
    sanitized: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            sanitized[key] = _sanitize(value)
        elif isinstance(value, Path):
            sanitized[key] = _sanitize(str(value))
        elif isinstance(value, dict):
            sanitized[key] = _prepare_payload(value)
        elif isinstance(value, (list, tuple)):
            sanitized[key] = [
                _sanitize(str(item)) if isinstance(item, (str, Path)) else item for item in value
            ]
        else:
            sanitized[key] = value
    return sanitized


def log_event(
    logger: logging.Logger,
    *,
    level: int,
    action: str,
    message: str,
    duration_ms: float | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """Emit one JSON log line describing *action*."""

    if not logger.isEnabledFor(level):
        return

    payload: dict[str, Any] = {
        "ts": _utcnow_iso(),
        "level": logging.getLevelName(level),
        "action": action,
        "message": _sanitize(message),
    }
    if duration_ms is not None:
        payload["ms"] = round(duration_ms, 3)
    if extra:
        payload.update(_prepare_payload(extra))

    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["ROOT_LOGGER_NAME", "configure_logging", "get_logger", "log_event", "next_log_path"]
