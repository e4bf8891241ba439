from __future__ import annotations

import os
from typing import AsyncIterator, Final, cast

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.types import ASGIApp

_TEST_ENV_VARS: Final[dict[str, str]] = {
    "APP_ENV": "test",
    "LOG_LEVEL": "INFO",
    "UPSTREAM_BASE_URL": "http://upstream.test/",
}

for key, value in _TEST_ENV_VARS.items():
    os.environ.setdefault(key, value)

from posts_gateway.main import app  # noqa: E402


@pytest_asyncio.fixture()
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=cast(ASGIApp, app))
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
