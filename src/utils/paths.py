"""Path utilities."""

import os
from pathlib import Path
from typing import Optional


def resolve_path(
    path: str,
    base_path: Optional[str] = None,
    must_exist: bool = False
) -> Path:
    """
    Resolve a path, handling relative paths and environment variables.

    Args:
        path: Path to resolve
        base_path: Base path for relative paths
        must_exist: Raise error if path doesn't exist

    Returns:
        Resolved Path object
    """
    path = os.path.expanduser(os.path.expandvars(str(path)))
    resolved = Path(path)

    if not resolved.is_absolute() and base_path:
        resolved = Path(base_path) / resolved

    resolved = resolved.resolve()

    if must_exist and not resolved.exists():
        raise FileNotFoundError(f"Path does not exist: {resolved}")

    return resolved


def find_repo_root(start: Path) -> Path:
    """Walk upwards from ``start`` to the directory holding pyproject.toml."""
    for candidate in [start, *start.parents]:
        if (candidate / "pyproject.toml").exists():
            return candidate
    return start
