"""Business logic services sitting between the routers and the upstream client."""

from posts_gateway.services.post import PostService

__all__ = ["PostService"]
