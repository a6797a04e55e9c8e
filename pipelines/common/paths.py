"""Project and build directory helpers."""

from __future__ import annotations

import os
from pathlib import Path

BUILD_DIR_NAME = ".build"


def project_root() -> Path:
    """Return the project root, honouring ``README_ANY_ROOT`` for tests."""
    override = os.getenv("README_ANY_ROOT")
    if override:
        return Path(override).resolve()
    return Path.cwd()


def default_build_root(root: Path) -> Path:
    return root / BUILD_DIR_NAME


def is_within(path: Path, parent: Path) -> bool:
    """Return True when ``path`` sits strictly below ``parent``."""
    resolved = path.resolve()
    base = parent.resolve()
    return resolved != base and base in resolved.parents
