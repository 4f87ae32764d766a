"""
Project metadata helpers used by the log formatters.

The installed distribution metadata is the source of truth; when the package
runs from a source checkout without being installed, the nearest
`pyproject.toml` is read instead.
"""

from pathlib import Path
from importlib import metadata as importlib_metadata
from typing import Any
import tomllib

DISTRIBUTION_NAME = "todo-service"

# --------------------
# Find pyproject.toml
# --------------------


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    p = start
    for _ in range(max_up):
        candidate = p / "pyproject.toml"
        if candidate.exists():
            return candidate
        if p.parent == p:
            break
        p = p.parent
    return None


def get_pyproject_value(
    key: str,
    start: str | Path | None = None,
    max_up: int = 5,
    default: Any = None,
) -> Any:
    """
    Return the value for `key` from the nearest pyproject.toml.

    - `key` is dot-separated for nested keys, e.g. "project.version".
    - `start` is the directory to start searching from. Defaults to this module's folder.
    - returns `default` if the file isn't found, can't be parsed, or the key is missing.
    """
    start_path = Path(start).resolve() if start is not None else Path(__file__).resolve().parent

    pyproject = find_pyproject(start=start_path, max_up=max_up)
    if not pyproject or not key:
        return default

    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    cur = data
    for part in key.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur


def get_project_version(default: str = "unknown") -> str:
    """
    Installed distribution version, else project.version from pyproject.toml,
    else `default`.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        value = get_pyproject_value("project.version", max_up=6, default=None)
        return value if value is not None else default


__all__ = [
    "find_pyproject",
    "get_pyproject_value",
    "get_project_version",
]
