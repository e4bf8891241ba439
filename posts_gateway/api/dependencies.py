"""Shared FastAPI dependency builders."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from posts_gateway.core.config import settings
from posts_gateway.integrations.upstream import UpstreamClient
from posts_gateway.services.post import PostService

_upstream_client = UpstreamClient(
    settings.upstream_base_url,
    timeout_seconds=settings.upstream_timeout_seconds,
)


def get_upstream_client() -> UpstreamClient:
    """Return the process-wide upstream client."""
    return _upstream_client


def get_post_service(
    client: Annotated[UpstreamClient, Depends(get_upstream_client)],
) -> PostService:
    return PostService(client)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]

__all__ = ["PostServiceDep", "get_post_service", "get_upstream_client"]
