"""
Configuration module for the Posts Gateway service.

The Settings object centralizes environment-driven configuration with strict
typing and validation rules so that the rest of the codebase can rely on a
single, read-only source of truth.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_UPSTREAM_BASE_URL = "https://jsonplaceholder.typicode.com/"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    project_name: str = Field(default="Posts Gateway", alias="PROJECT_NAME")
    environment: Literal["local", "test", "staging", "production"] = Field(
        default="local",
        alias="APP_ENV",
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    upstream_base_url: str = Field(
        default=DEFAULT_UPSTREAM_BASE_URL,
        alias="UPSTREAM_BASE_URL",
        description="Base URL of the proxied posts/comments API.",
    )
    upstream_timeout_seconds: float = Field(
        default=10.0,
        alias="UPSTREAM_TIMEOUT_SECONDS",
        description="Connect/read timeout applied to every upstream call.",
    )

    host: str = Field(default="0.0.0.0", alias="APP_HOST")
    port: int = Field(default=8000, alias="APP_PORT", ge=1, le=65535)

    raw_backend_cors_origins: str | None = Field(
        default=None,
        alias="BACKEND_CORS_ORIGINS",
        description="Comma-separated list or JSON array of allowed origins.",
    )

    @field_validator("upstream_base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("UPSTREAM_BASE_URL must be provided.")
        trimmed = str(value).strip()
        if not trimmed:
            raise ValueError("UPSTREAM_BASE_URL must not be empty.")
        if not (trimmed.startswith("http://") or trimmed.startswith("https://")):
            raise ValueError("UPSTREAM_BASE_URL must use the http or https scheme.")
        # Relative upstream paths are joined onto the base, which needs a trailing slash.
        return trimmed.rstrip("/") + "/"

    @field_validator("upstream_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("UPSTREAM_TIMEOUT_SECONDS must be positive.")
        return value

    @computed_field(return_type=list[str])
    def cors_origins(self) -> list[str]:
        """Return the normalized list of allowed CORS origins."""
        return self.parse_cors_origins(self.raw_backend_cors_origins)

    @staticmethod
    def parse_cors_origins(value: str | None) -> list[str]:
        """
        Normalize the BACKEND_CORS_ORIGINS value into a list of origins.

        Accepts either a comma-separated string or a JSON array string.
        """
        if value is None:
            return []
        normalized = value.strip()
        if not normalized:
            return []
        if normalized.startswith("["):
            try:
                parsed = json.loads(normalized)
                if isinstance(parsed, list):
                    return [
                        str(origin).strip().rstrip("/") for origin in parsed if str(origin).strip()
                    ]
            except json.JSONDecodeError:
                pass
        return [origin.strip().rstrip("/") for origin in normalized.split(",") if origin.strip()]

    @property
    def enable_hsts(self) -> bool:
        return self.environment in {"staging", "production"}


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance so configuration is evaluated once."""
    return Settings()


settings = get_settings()

__all__ = ["DEFAULT_UPSTREAM_BASE_URL", "Settings", "get_settings", "settings"]
