"""HTTP client for the upstream posts/comments API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Awaitable, Callable, Final, Mapping, TypeVar

import httpx
from pydantic import TypeAdapter

from posts_gateway.core.errors import DEFAULT_TITLE, ApplicationError
from posts_gateway.core.logging import get_request_id
from posts_gateway.schemas.post import Comment, Post

logger = logging.getLogger("posts_gateway.upstream")

NO_POSTS_FOUND: Final[str] = "Cannot find any Posts"
NO_POST_FOUND: Final[str] = "Cannot find a Post with id: "
NO_COMMENTS_FOR_POST: Final[str] = "Cannot find Comments with post id: "

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"

RequestHook = Callable[[httpx.Request], Awaitable[None]]
ResponseHook = Callable[[httpx.Response], Awaitable[None]]

T = TypeVar("T")

_POST: Final[TypeAdapter[Post | None]] = TypeAdapter(Post | None)
_POST_LIST: Final[TypeAdapter[list[Post] | None]] = TypeAdapter(list[Post] | None)
_COMMENT_LIST: Final[TypeAdapter[list[Comment] | None]] = TypeAdapter(list[Comment] | None)


async def propagate_request_id(request: httpx.Request) -> None:
    """Forward the inbound request id so upstream logs can be correlated."""
    request_id = get_request_id()
    if request_id and REQUEST_ID_HEADER not in request.headers:
        request.headers[REQUEST_ID_HEADER] = request_id


async def log_upstream_request(request: httpx.Request) -> None:
    if not logger.isEnabledFor(logging.INFO):
        return
    logger.info(
        "Upstream request",
        extra={
            "http_method": request.method,
            "upstream_url": str(request.url),
            "request_headers": dict(request.headers),
        },
    )


async def log_upstream_response(response: httpx.Response) -> None:
    if not logger.isEnabledFor(logging.INFO):
        return
    await response.aread()
    logger.info(
        "Upstream response",
        extra={
            "upstream_url": str(response.request.url),
            "status_code": response.status_code,
            "response_headers": dict(response.headers),
            "response_body": response.text,
        },
    )


def default_event_hooks() -> dict[str, list[Any]]:
    """Return the ordered request/response hooks applied to every upstream call."""
    request_hooks: list[RequestHook] = [propagate_request_id, log_upstream_request]
    response_hooks: list[ResponseHook] = [log_upstream_response]
    return {"request": request_hooks, "response": response_hooks}


def describe_upstream_error(response: httpx.Response) -> str:
    """Render an upstream failure as ``404 Not Found: "<body>"``."""
    reason = response.reason_phrase or _reason_phrase(response.status_code)
    body = response.text
    rendered_body = f'"{body}"' if body else "[no body]"
    return f"{response.status_code} {reason}: {rendered_body}"


def translate_status_error(exc: httpx.HTTPStatusError, not_found_detail: str) -> ApplicationError:
    """
    Convert an upstream 4xx/5xx into an ApplicationError.

    A 404 uses ``not_found_detail``; every other status keeps the upstream
    error message, which embeds the response body.
    """
    status_code = exc.response.status_code
    if status_code == HTTPStatus.NOT_FOUND:
        detail = not_found_detail
    else:
        detail = str(exc)
    return ApplicationError(detail, title=_reason_phrase(status_code), status_code=status_code)


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return DEFAULT_TITLE


class UpstreamClient:
    """
    Fetch posts and comments from the configured upstream API.

    Each call opens its own ``httpx.AsyncClient`` and performs a single GET,
    without retries. Upstream 4xx/5xx responses surface as ApplicationError;
    an empty 2xx body is returned as ``None``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        event_hooks: Mapping[str, list[Any]] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout_seconds = timeout_seconds
        self.transport = transport
        self.event_hooks = dict(event_hooks) if event_hooks is not None else default_event_hooks()

    async def get_posts(self) -> list[Post] | None:
        """GET ``posts``."""
        response = await self._get("posts", not_found_detail=NO_POSTS_FOUND)
        return _decode(response, _POST_LIST)

    async def get_post_by_id(self, post_id: str) -> Post | None:
        """GET ``posts/{post_id}``."""
        response = await self._get(f"posts/{post_id}", not_found_detail=NO_POST_FOUND + post_id)
        return _decode(response, _POST)

    async def get_comments_by_post_id(self, post_id: str) -> list[Comment] | None:
        """GET ``posts/{post_id}/comments`` (nested resource route)."""
        response = await self._get(
            f"posts/{post_id}/comments",
            not_found_detail=NO_COMMENTS_FOR_POST + post_id,
        )
        return _decode(response, _COMMENT_LIST)

    async def get_comments_for_post(self, post_id: str) -> list[Comment] | None:
        """GET ``comments?postId={post_id}`` (query route)."""
        response = await self._get(
            "comments",
            params={"postId": post_id},
            not_found_detail=NO_COMMENTS_FOR_POST + post_id,
        )
        return _decode(response, _COMMENT_LIST)

    async def _get(
        self,
        path: str,
        *,
        not_found_detail: str,
        params: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self.transport,
            event_hooks=self.event_hooks,
            follow_redirects=True,
        ) as client:
            response = await client.get(path, params=params)

        if response.is_client_error or response.is_server_error:
            error = httpx.HTTPStatusError(
                describe_upstream_error(response),
                request=response.request,
                response=response,
            )
            raise translate_status_error(error, not_found_detail) from error
        return response


def _decode(response: httpx.Response, adapter: TypeAdapter[T]) -> T | None:
    if not response.content.strip():
        return None
    return adapter.validate_json(response.content)


__all__ = [
    "NO_COMMENTS_FOR_POST",
    "NO_POSTS_FOUND",
    "NO_POST_FOUND",
    "UpstreamClient",
    "default_event_hooks",
    "describe_upstream_error",
    "log_upstream_request",
    "log_upstream_response",
    "propagate_request_id",
    "translate_status_error",
]
