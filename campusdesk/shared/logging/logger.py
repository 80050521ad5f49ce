"""loguru setup shared by the web app and the maintenance scripts."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_NO_REQUEST = "-"

_LINE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | req={extra[correlation_id]} | "
    "{name}:{line} | {message}"
)

_request_id: ContextVar[str] = ContextVar("campusdesk_request_id", default=_NO_REQUEST)

# Third-party loggers and the level they are capped at once routed into loguru.
_NOISY_LOGGERS = {"werkzeug": logging.INFO, "sqlalchemy": logging.WARNING}


class _ToLoguru(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        _logger.bind(correlation_id=_request_id.get()).opt(
            depth=depth, exception=record.exc_info
        ).log(level, record.getMessage())


class ContextualLogger:
    """Forwards to loguru with the current request id bound."""

    def __getattr__(self, name: str):
        return getattr(_logger.bind(correlation_id=_request_id.get()), name)


def set_correlation_id(value: str | None) -> None:
    _request_id.set(value or _NO_REQUEST)


def get_correlation_id() -> str:
    return _request_id.get()


def clear_correlation_id() -> None:
    _request_id.set(_NO_REQUEST)


def _resolve_level(level: str | None, debug_mode: bool) -> str:
    if level:
        return level.upper()
    return os.getenv("LOG_LEVEL", "DEBUG" if debug_mode else "INFO").upper()


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    resolved = _resolve_level(level, debug_mode)

    _logger.remove()
    _logger.configure(extra={"correlation_id": _NO_REQUEST}, patcher=sanitize_record)
    _logger.add(sys.stderr, level=resolved, format=_LINE_FORMAT, backtrace=False, diagnose=False)

    log_file = os.getenv("LOG_FILE")
    if log_file:
        Path(log_file).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            log_file,
            level=resolved,
            format=_LINE_FORMAT,
            rotation="10 MB",
            retention=5,
            enqueue=True,
            encoding="utf-8",
            diagnose=False,
        )

    logging.basicConfig(handlers=[_ToLoguru()], level=0, force=True)
    for name, cap in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)


logger = ContextualLogger()

__all__ = [
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
