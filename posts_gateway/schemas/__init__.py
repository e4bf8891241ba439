"""Public exports for Pydantic schemas."""

from __future__ import annotations

from .post import Comment, Post
from .problem import ProblemResponse

__all__ = ["Comment", "Post", "ProblemResponse"]
