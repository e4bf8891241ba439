"""Structured logging helpers and request context utilities."""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Final, Mapping

REQUEST_ID_CTX: Final[ContextVar[str | None]] = ContextVar("request_id", default=None)

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_STANDARD_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    logging.makeLogRecord({}).__dict__
) | {"message", "asctime", "request_id"}

_NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")

_LOGGING_CONFIGURED: bool = False


class JsonLogFormatter(logging.Formatter):
    """Render each record as one line of JSON with request context and extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            entry["request_id"] = request_id

        for key, value in record.__dict__.items():
            if key in _STANDARD_RECORD_ATTRS or key.startswith("_") or value is None:
                continue
            entry[key] = _jsonable(value)

        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info).replace("\n", " | ")
        if record.stack_info:
            entry["stack"] = self.formatStack(record.stack_info).replace("\n", " | ")

        return json.dumps(entry, ensure_ascii=True, separators=(",", ":"))


def _jsonable(value: object) -> object:
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        value = dict(value)
    if isinstance(value, (list, dict)):
        try:
            json.dumps(value)
        except TypeError:
            return str(value)
        return value
    return str(value)


def configure_logging(level_name: str) -> None:
    """Install the JSON formatter on the root logger. Later calls are no-ops."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLogFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(_resolve_level(level_name))

    # The upstream hooks already log every outbound call.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    _LOGGING_CONFIGURED = True


def _resolve_level(level_name: str) -> int:
    level_value = logging.getLevelName(str(level_name).upper())
    if isinstance(level_value, int):
        return level_value
    return logging.INFO


def log_problem(
    logger: logging.Logger,
    *,
    status: int,
    title: str | None,
    detail: str | None,
    exc: BaseException | None = None,
) -> None:
    """Log a problem payload at ERROR as ``ProblemDetail: title=... status=... detail=...``."""
    parts = ["ProblemDetail:"]
    if title:
        parts.append(f"title={title}")
    if status > 0:
        parts.append(f"status={status}")
    if detail:
        parts.append(f"detail={detail}")
    exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
    logger.error(" ".join(parts), exc_info=exc_info)


def log_status_code_error(logger: logging.Logger, message: str, error_code: int | None) -> None:
    """Log an HTTP status that could not be used, as ``errorCode=... message=...``."""
    parts: list[str] = []
    if error_code is not None:
        parts.append(f"errorCode={error_code}")
    if message and message.strip():
        parts.append(f"message={message.strip()}")
    logger.error(" ".join(parts), extra={"error_code": error_code})


def bind_request_id(request_id: str) -> Token[str | None]:
    """Bind a request_id to the current context."""
    return REQUEST_ID_CTX.set(request_id)


def get_request_id() -> str | None:
    return REQUEST_ID_CTX.get()


def reset_request_id(token: Token[str | None]) -> None:
    REQUEST_ID_CTX.reset(token)


__all__ = [
    "JsonLogFormatter",
    "bind_request_id",
    "configure_logging",
    "get_request_id",
    "log_problem",
    "log_status_code_error",
    "reset_request_id",
]
