"""Resolve the version reported by /health and the OpenAPI document."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Final

import tomllib

DISTRIBUTION_NAME: Final[str] = "posts-gateway"
FALLBACK_VERSION: Final[str] = "0.0.0"


def _read_pyproject_version(pyproject_path: Path | None = None) -> str | None:
    """Read ``project.version`` from pyproject.toml for source checkouts."""
    path = pyproject_path or Path(__file__).resolve().parents[2] / "pyproject.toml"
    if not path.exists():
        return None

    with path.open("rb") as fp:
        project = tomllib.load(fp).get("project")

    if isinstance(project, dict) and isinstance(project.get("version"), str):
        return project["version"]
    return None


def _resolve_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return _read_pyproject_version() or FALLBACK_VERSION


APP_VERSION: Final[str] = _resolve_version()

__all__ = ["APP_VERSION", "DISTRIBUTION_NAME"]
