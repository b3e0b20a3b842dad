"""
Project metadata used to stamp log records (service name, version).

The installed distribution wins in containers; a source checkout falls back to
the nearest pyproject.toml.
"""

import tomllib
from functools import lru_cache
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

DEFAULT_PROJECT_NAME = "personal-library-api"
SEARCH_DEPTH = 5


def find_pyproject(start: Path, max_up: int = SEARCH_DEPTH) -> Path | None:
    for directory in [start, *start.parents][:max_up]:
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


@lru_cache(maxsize=8)
def _read_pyproject(path: Path) -> dict:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def get_pyproject_value(key: str, start: str | Path | None = None, default: Any = None) -> Any:
    """Look up a dotted key ("project.version") in the nearest pyproject.toml."""
    origin = Path(start).resolve() if start is not None else Path(__file__).resolve().parent
    path = find_pyproject(origin)
    if path is None:
        return default

    try:
        node: Any = _read_pyproject(path)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def get_project_name(start: str | Path | None = None) -> str:
    return get_pyproject_value("project.name", start=start, default=DEFAULT_PROJECT_NAME)


def get_project_version(start: str | Path | None = None, default: str = "unknown") -> str:
    try:
        return importlib_metadata.version(DEFAULT_PROJECT_NAME)
    except importlib_metadata.PackageNotFoundError:
        return get_pyproject_value("project.version", start=start, default=default)


__all__ = [
    "DEFAULT_PROJECT_NAME",
    "find_pyproject",
    "get_pyproject_value",
    "get_project_name",
    "get_project_version",
]
