"""Service layer for posts and comments."""

from __future__ import annotations

from posts_gateway.integrations.upstream import UpstreamClient
from posts_gateway.schemas.post import Comment, Post


class PostService:
    """
    Read operations over posts and comments.

    Every call delegates to the upstream client and returns its result
    unchanged, ``None`` and ApplicationError included. Business rules that
    apply to posts or comments belong here rather than in the routers.
    """

    def __init__(self, client: UpstreamClient) -> None:
        self.client = client

    async def get_posts(self) -> list[Post] | None:
        return await self.client.get_posts()

    async def get_post_by_id(self, post_id: str) -> Post | None:
        return await self.client.get_post_by_id(post_id)

    async def get_comments_by_post_id(self, post_id: str) -> list[Comment] | None:
        """Comments through the nested ``posts/{id}/comments`` route."""
        return await self.client.get_comments_by_post_id(post_id)

    async def get_comments_for_post(self, post_id: str) -> list[Comment] | None:
        """Comments through the ``comments?postId=`` query route."""
        return await self.client.get_comments_for_post(post_id)


__all__ = ["PostService"]
