"""Base path utilities that don't depend on settings.

Only the project root lookup lives here so that ``settings`` can locate
``config.yaml`` and ``.env`` without importing anything else.
"""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

__all__ = [
    "PROJECT_ROOT",
    "find_project_root",
]

_ROOT_MARKERS = (".git", "pyproject.toml", "config.yaml")


@lru_cache(maxsize=1)
def find_project_root() -> Path:
    """Find the project root directory.

    Walks upwards from the package until a marker file is found. Falls back
    to the parent of the package directory when the package is installed
    somewhere without markers (e.g. site-packages).
    """
    package_parent = Path(os.path.abspath(__file__)).parent.parent.parent
    current_dir = package_parent
    while current_dir != current_dir.parent:
        if any((current_dir / marker).exists() for marker in _ROOT_MARKERS):
            return current_dir
        current_dir = current_dir.parent
    return package_parent


PROJECT_ROOT = find_project_root()
