"""Router aggregation for the public endpoints."""

from fastapi import APIRouter

from posts_gateway.api.routes import comments, health, posts

# Operational endpoints
root_router = APIRouter()
root_router.include_router(health.router)

# Proxied resources
api_router = APIRouter()
api_router.include_router(posts.router)
api_router.include_router(comments.router)

__all__ = ["api_router", "root_router"]
