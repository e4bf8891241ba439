"""Inbound middlewares: request correlation, access logging and response headers."""

from __future__ import annotations

import logging
import time
from typing import Final, Mapping
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from posts_gateway.core.errors import unexpected_exception_handler
from posts_gateway.core.logging import bind_request_id, reset_request_id

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"

SECURITY_HEADERS: Final[Mapping[str, str]] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "same-origin",
    "Permissions-Policy": "camera=(), microphone=()",
}
HSTS_VALUE: Final[str] = "max-age=31536000; includeSubDomains"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Give every request an id, reusing the caller's ``X-Request-ID`` when sent.

    The id is bound to the logging context for the duration of the request,
    forwarded to the upstream by the client hooks, and echoed on the response.
    """

    header_name = REQUEST_ID_HEADER

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self.header_name) or uuid4().hex

        request.state.request_id = request_id
        token = bind_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)

        response.headers[self.header_name] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Emit one structured access log entry per request."""

    def __init__(self, app: ASGIApp, logger_name: str = "posts_gateway.access") -> None:
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            self._log(request, status_code, (time.perf_counter() - start) * 1000)

    def _log(self, request: Request, status_code: int, duration_ms: float) -> None:
        self.logger.info(
            "access",
            extra={
                "event": "access",
                "http_method": request.method,
                "http_path": request.url.path,
                "http_query": request.url.query or None,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent"),
            },
        )


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """
    Render exceptions no handler claimed as the 500 problem response.

    Must be the innermost middleware so request id, access log and security
    headers still apply to the error response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await unexpected_exception_handler(request, exc)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add baseline security headers without overwriting ones already set.

    HSTS is opt-in so local development over plain HTTP keeps working.
    """

    def __init__(self, app: ASGIApp, enable_hsts: bool = False) -> None:
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        if self.enable_hsts:
            response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)

        return response


__all__ = [
    "AccessLogMiddleware",
    "REQUEST_ID_HEADER",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "UnhandledErrorMiddleware",
]
