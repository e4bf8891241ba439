"""Run the gateway with uvicorn: ``python -m posts_gateway`` or ``posts-gateway``."""

from __future__ import annotations

import uvicorn

from posts_gateway.core.config import settings


def main() -> None:
    uvicorn.run(
        "posts_gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        # Request logging is handled by AccessLogMiddleware.
        access_log=False,
    )


if __name__ == "__main__":
    main()
