from __future__ import annotations

import json
import logging
import sys
from types import ModuleType
from typing import Iterator

import pytest

from posts_gateway.core import logging as logging_module


@pytest.fixture()
def fresh_logging_module(monkeypatch: pytest.MonkeyPatch) -> Iterator[ModuleType]:
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    monkeypatch.setattr(logging_module, "_LOGGING_CONFIGURED", False)

    yield logging_module

    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)
    logging_module._LOGGING_CONFIGURED = False


def _make_record(
    msg: str,
    *,
    level: int = logging.INFO,
    extra: dict[str, object] | None = None,
    exc_info: object = None,
) -> logging.LogRecord:
    return logging.getLogger("test-json").makeRecord(
        name="test-json",
        level=level,
        fn="test_logging.py",
        lno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,  # type: ignore[arg-type]
        func="test",
        extra=extra,
    )


def test_configure_logging_installs_json_formatter(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("debug")

    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG
    assert any(
        isinstance(handler.formatter, logging_module.JsonLogFormatter)
        for handler in root_logger.handlers
    )
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_is_idempotent(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("info")
    root_logger = logging.getLogger()
    first_handlers = list(root_logger.handlers)

    fresh_logging_module.configure_logging("warning")

    assert list(root_logger.handlers) == first_handlers
    assert root_logger.level == logging.INFO


def test_configure_logging_falls_back_to_info(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO


def test_json_formatter_enriches_request_context() -> None:
    token = logging_module.bind_request_id("req-123")
    try:
        formatted = logging_module.JsonLogFormatter().format(
            _make_record(
                "payload ready",
                extra={
                    "http_method": "GET",
                    "http_path": "/posts",
                    "status_code": 200,
                    "duration_ms": 12.5,
                },
            )
        )
    finally:
        logging_module.reset_request_id(token)

    payload = json.loads(formatted)
    assert payload["message"] == "payload ready"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test-json"
    assert payload["request_id"] == "req-123"
    assert payload["http_method"] == "GET"
    assert payload["http_path"] == "/posts"
    assert payload["status_code"] == 200
    assert payload["duration_ms"] == 12.5


def test_json_formatter_serializes_structured_extras() -> None:
    record = _make_record(
        "Upstream response",
        extra={
            "response_headers": {"content-type": "application/json"},
            "non_serializable": object(),
            "skipped": None,
        },
    )

    payload = json.loads(logging_module.JsonLogFormatter().format(record))

    assert payload["response_headers"] == {"content-type": "application/json"}
    assert isinstance(payload["non_serializable"], str)
    assert "skipped" not in payload
    assert "request_id" not in payload


def test_json_formatter_keeps_exception_on_one_line() -> None:
    try:
        raise RuntimeError("kaboom")
    except RuntimeError:
        record = _make_record("failed", level=logging.ERROR, exc_info=sys.exc_info())

    formatted = logging_module.JsonLogFormatter().format(record)

    assert "\n" not in formatted
    assert "RuntimeError: kaboom" in json.loads(formatted)["exc_info"]


def test_log_problem_formats_problem_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("test-problem")
    caplog.set_level(logging.ERROR, logger="test-problem")
    error = ValueError("bad")

    logging_module.log_problem(logger, status=404, title="Not Found", detail="missing", exc=error)

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.getMessage() == "ProblemDetail: title=Not Found status=404 detail=missing"
    assert record.exc_info is not None
    assert record.exc_info[1] is error


def test_log_problem_skips_empty_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("test-problem")
    caplog.set_level(logging.ERROR, logger="test-problem")

    logging_module.log_problem(logger, status=0, title=None, detail="")

    assert caplog.records[-1].getMessage() == "ProblemDetail:"


def test_log_status_code_error_includes_code_and_message(
    caplog: pytest.LogCaptureFixture,
) -> None:
    logger = logging.getLogger("test-status")
    caplog.set_level(logging.ERROR, logger="test-status")

    logging_module.log_status_code_error(logger, "  unmapped status  ", 9999)

    record = caplog.records[-1]
    assert record.getMessage() == "errorCode=9999 message=unmapped status"
    assert getattr(record, "error_code", None) == 9999
