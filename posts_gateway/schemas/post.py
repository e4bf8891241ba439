"""Schemas for posts and comments relayed from the upstream API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UpstreamRecord(BaseModel):
    """Base for records deserialized from the upstream JSON API."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )


class Post(UpstreamRecord):
    """A post as published by the upstream API."""

    user_id: int = Field(alias="userId")
    id: int
    title: str
    body: str


class Comment(UpstreamRecord):
    """A comment attached to a post."""

    post_id: int = Field(alias="postId")
    id: int
    name: str
    email: str
    body: str


__all__ = ["Comment", "Post", "UpstreamRecord"]
