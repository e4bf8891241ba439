"""Shared helpers for tests."""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

import httpx

from posts_gateway.integrations.upstream import UpstreamClient

UPSTREAM_BASE_URL = "http://upstream.test/"

UpstreamReply = httpx.Response | Callable[[httpx.Request], httpx.Response]

POSTS_PAYLOAD: list[dict[str, Any]] = [
    {"userId": 1, "id": 10, "title": "T1", "body": "B1"},
    {"userId": 2, "id": 11, "title": "T2", "body": "B2"},
]

COMMENTS_PAYLOAD: list[dict[str, Any]] = [
    {
        "postId": 9,
        "id": 41,
        "name": "first",
        "email": "first@example.com",
        "body": "nice post",
    },
    {
        "postId": 9,
        "id": 42,
        "name": "second",
        "email": "second@example.com",
        "body": "agreed",
    },
]


def json_reply(payload: object, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode())


class FakeUpstream:
    """MockTransport handler routing on ``path`` or ``path?query``; records every request."""

    def __init__(self, routes: Mapping[str, UpstreamReply]) -> None:
        self.routes = dict(routes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = request.url.path
        if request.url.query:
            key = f"{key}?{request.url.query.decode()}"
        reply = self.routes.get(key)
        if reply is None:
            return httpx.Response(404)
        if callable(reply):
            return reply(request)
        return reply

    def client(self, *, event_hooks: Mapping[str, list[Any]] | None = None) -> UpstreamClient:
        return UpstreamClient(
            UPSTREAM_BASE_URL,
            transport=httpx.MockTransport(self),
            event_hooks=event_hooks,
        )
