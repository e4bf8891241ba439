from __future__ import annotations

from typing import Any

import pytest

from posts_gateway import __main__ as entrypoint


def test_main_runs_uvicorn_with_configured_bind(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    def _record(*args: Any, **kwargs: Any) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(entrypoint.uvicorn, "run", _record)

    entrypoint.main()

    assert len(calls) == 1
    args, kwargs = calls[0]
    assert args == ("posts_gateway.main:app",)
    assert kwargs["host"] == entrypoint.settings.host
    assert kwargs["port"] == entrypoint.settings.port
    assert kwargs["log_level"] == entrypoint.settings.log_level.lower()
    assert kwargs["access_log"] is False
