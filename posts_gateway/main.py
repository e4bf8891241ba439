"""FastAPI application factory and entrypoint."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from posts_gateway.api.routes import api_router, root_router
from posts_gateway.core.config import Settings, settings
from posts_gateway.core.errors import register_exception_handlers
from posts_gateway.core.logging import configure_logging
from posts_gateway.core.metrics import setup_metrics
from posts_gateway.core.middleware import (
    REQUEST_ID_HEADER,
    AccessLogMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
)
from posts_gateway.core.version import APP_VERSION

ALLOWED_METHODS = ["GET", "OPTIONS"]
ALLOWED_HEADERS = ["Accept", "Content-Type", REQUEST_ID_HEADER]

configure_logging(settings.log_level)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build and configure the FastAPI application."""

    application = FastAPI(
        title=app_settings.project_name,
        debug=app_settings.debug,
        version=APP_VERSION,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
    )

    register_exception_handlers(application)
    # Innermost, so the 500 problem response still passes the middlewares below.
    application.add_middleware(UnhandledErrorMiddleware)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=86400,
    )

    setup_metrics(application)

    # Added last runs first: request id -> access log -> security headers.
    application.add_middleware(
        SecurityHeadersMiddleware,
        enable_hsts=app_settings.enable_hsts,
    )
    application.add_middleware(AccessLogMiddleware)
    application.add_middleware(RequestIDMiddleware)

    application.include_router(root_router)
    application.include_router(api_router)

    return application


app = create_app()

__all__ = ["app", "create_app"]
