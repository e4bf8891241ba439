"""Problem payload returned for every failed request."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProblemResponse(BaseModel):
    """Body of every non-2xx response."""

    model_config = ConfigDict(frozen=True)

    status: int = Field(description="HTTP status code of the response.")
    title: str = Field(description="Short, human-readable summary of the problem type.")
    detail: str = Field(description="Explanation specific to this occurrence.")


__all__ = ["ProblemResponse"]
