"""Endpoint relaying comments through the upstream query route."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response

from posts_gateway.api.dependencies import PostServiceDep
from posts_gateway.api.routes.posts import POST_ID_PATTERN, empty_response
from posts_gateway.schemas.post import Comment

router = APIRouter(tags=["comments"])


@router.get(
    "/comments",
    response_model=list[Comment],
    summary="List the comments of a post (query route)",
)
async def list_comments_for_post(
    post_id: Annotated[
        str,
        Query(
            alias="postId",
            pattern=POST_ID_PATTERN,
            description="Post identifier: a positive integer without leading zeros.",
        ),
    ],
    service: PostServiceDep,
) -> list[Comment] | Response:
    comments = await service.get_comments_for_post(post_id)
    if comments is None:
        return empty_response()
    return comments


__all__ = ["router"]
