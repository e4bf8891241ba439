"""Application error type and the FastAPI exception handlers that render problems."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Awaitable, Callable, Final, Sequence, cast

import httpx
from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from posts_gateway.core.logging import log_problem, log_status_code_error
from posts_gateway.schemas.problem import ProblemResponse

ExceptionHandlerCallable = Callable[[Request, Exception], Awaitable[Response]]

logger = logging.getLogger("posts_gateway.errors")

DEFAULT_TITLE: Final[str] = "API Error Occurred"
DEFAULT_MESSAGE: Final[str] = "API Error occurred. Please contact support or administrator."
PROBLEM_MEDIA_TYPE: Final[str] = "application/problem+json"

_UNMAPPED_STATUS_MESSAGE: Final[str] = (
    "Error Code from Exception could not be mapped to a valid HttpStatus Code"
)
_MIN_HTTP_STATUS: Final[int] = 100
_MAX_HTTP_STATUS: Final[int] = 599


class ApplicationError(Exception):
    """
    Failure raised when a call on behalf of the client cannot be completed.

    Carries the status the response should have, a short title and a
    human-readable detail. The underlying cause, when any, is chained with
    ``raise ApplicationError(...) from exc``.
    """

    def __init__(
        self,
        detail: str,
        *,
        title: str = DEFAULT_TITLE,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.title = title
        self.status_code = status_code


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the global exception handlers to the FastAPI app."""

    app.add_exception_handler(
        ApplicationError,
        cast(ExceptionHandlerCallable, application_error_handler),
    )
    app.add_exception_handler(
        RequestValidationError,
        cast(ExceptionHandlerCallable, request_validation_exception_handler),
    )
    app.add_exception_handler(
        httpx.HTTPStatusError,
        cast(ExceptionHandlerCallable, upstream_status_error_handler),
    )
    app.add_exception_handler(
        StarletteHTTPException,
        cast(ExceptionHandlerCallable, http_exception_handler),
    )
    app.add_exception_handler(
        Exception,
        cast(ExceptionHandlerCallable, unexpected_exception_handler),
    )


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    return problem_response(
        status_code=resolve_status_code(exc.status_code),
        title=exc.title if exc.title and exc.title.strip() else DEFAULT_TITLE,
        detail=message_from_exception(exc),
    )


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return problem_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        title=HTTPStatus.BAD_REQUEST.phrase,
        detail=_format_validation_errors(exc) or DEFAULT_MESSAGE,
    )


async def upstream_status_error_handler(
    request: Request,
    exc: httpx.HTTPStatusError,
) -> JSONResponse:
    """Render an upstream status error that escaped the client untranslated."""
    upstream_status = exc.response.status_code
    if not 400 <= upstream_status < 500:
        return await unexpected_exception_handler(request, exc)
    return problem_response(
        status_code=upstream_status,
        title=DEFAULT_TITLE,
        detail=message_from_exception(exc),
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else None
    response = problem_response(
        status_code=resolve_status_code(exc.status_code),
        title=DEFAULT_TITLE,
        detail=detail if detail and detail.strip() else DEFAULT_MESSAGE,
    )
    if exc.headers:
        # Keeps the Allow header on 405 responses.
        response.headers.update(exc.headers)
    return response


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    detail = message_from_exception(exc)
    log_problem(
        logger,
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        title=DEFAULT_TITLE,
        detail=detail,
        exc=exc,
    )
    return problem_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        title=DEFAULT_TITLE,
        detail=detail,
    )


def problem_response(*, status_code: int, title: str, detail: str) -> JSONResponse:
    """Return a JSONResponse carrying the problem payload."""
    body = ProblemResponse(status=status_code, title=title, detail=detail)
    return JSONResponse(
        content=jsonable_encoder(body),
        status_code=status_code,
        media_type=PROBLEM_MEDIA_TYPE,
    )


def resolve_status_code(status_code: object) -> int:
    """
    Return ``status_code`` when it is a usable HTTP status, otherwise 500.

    The fallback is logged with the offending value so the mapping problem
    is visible server-side.
    """
    if (
        isinstance(status_code, int)
        and not isinstance(status_code, bool)
        and _MIN_HTTP_STATUS <= status_code <= _MAX_HTTP_STATUS
    ):
        return status_code
    log_status_code_error(
        logger,
        f"{_UNMAPPED_STATUS_MESSAGE} - {status_code}",
        status_code if isinstance(status_code, int) else None,
    )
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def message_from_exception(exc: BaseException) -> str:
    message = str(exc)
    if message.strip():
        return message
    return DEFAULT_MESSAGE


def _format_validation_errors(exc: RequestValidationError) -> str:
    formatted: dict[str, str] = {}
    for error in exc.errors():
        field = _format_error_location(error.get("loc") or ())
        message = error.get("msg", "Invalid value")
        if field in formatted:
            formatted[field] = f"{formatted[field]}; {message}"
        else:
            formatted[field] = message
    return "; ".join(f"{field}: {message}" for field, message in formatted.items())


def _format_error_location(location: Sequence[object]) -> str:
    filtered = [
        str(part)
        for part in location
        if part not in {"body", "query", "path"}  # hide transport-specific prefixes
    ]
    if not filtered:
        filtered = [str(part) for part in location]
    return ".".join(filtered) if filtered else "_schema"


__all__ = [
    "DEFAULT_MESSAGE",
    "DEFAULT_TITLE",
    "ApplicationError",
    "application_error_handler",
    "http_exception_handler",
    "message_from_exception",
    "problem_response",
    "register_exception_handlers",
    "request_validation_exception_handler",
    "resolve_status_code",
    "unexpected_exception_handler",
    "upstream_status_error_handler",
]
