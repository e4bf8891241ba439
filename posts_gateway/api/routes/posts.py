"""Endpoints relaying posts and their comments from the upstream API."""

from __future__ import annotations

from typing import Annotated, Final

from fastapi import APIRouter, Path, Query, Response, status

from posts_gateway.api.dependencies import PostServiceDep
from posts_gateway.schemas.post import Comment, Post

router = APIRouter(tags=["posts"])

POST_ID_PATTERN: Final[str] = r"^[1-9][0-9]*$"

PostIdPath = Annotated[
    str,
    Path(
        pattern=POST_ID_PATTERN,
        description="Post identifier: a positive integer without leading zeros.",
    ),
]


def empty_response() -> Response:
    """200 with no body, used when the upstream answered without content."""
    return Response(status_code=status.HTTP_200_OK)


def filter_by_user(posts: list[Post], user_id: int) -> list[Post]:
    """Keep the posts owned by ``user_id``, in their original order."""
    return [post for post in posts if post.user_id == user_id]


@router.get(
    "/posts",
    response_model=list[Post],
    summary="List posts, optionally for a single user",
)
async def list_posts(
    service: PostServiceDep,
    user_id: Annotated[
        int | None,
        Query(alias="userId", gt=0, description="Only return posts owned by this user."),
    ] = None,
) -> list[Post] | Response:
    posts = await service.get_posts()
    if posts is None:
        return empty_response()
    if user_id is not None:
        return filter_by_user(posts, user_id)
    return posts


@router.get(
    "/posts/{id}",
    response_model=Post,
    summary="Fetch a single post",
)
async def get_post(id: PostIdPath, service: PostServiceDep) -> Post | Response:  # noqa: A002
    post = await service.get_post_by_id(id)
    if post is None:
        return empty_response()
    return post


@router.get(
    "/posts/{id}/comments",
    response_model=list[Comment],
    summary="List the comments of a post (nested resource route)",
)
async def list_post_comments(
    id: PostIdPath,  # noqa: A002
    service: PostServiceDep,
) -> list[Comment] | Response:
    comments = await service.get_comments_by_post_id(id)
    if comments is None:
        return empty_response()
    return comments


__all__ = ["empty_response", "filter_by_user", "router"]
