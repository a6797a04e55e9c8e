"""Per-run state shared by the build runner and its plugins."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, List, TypeVar

from pipelines.common.files import FileSet  # type: ignore[import]

T = TypeVar("T")


def main_module_from_dist_name(dist_name: str) -> str:
    """Map ``Foo-Bar`` to ``lib/Foo/Bar.pm``."""

    parts = [part for part in dist_name.split("-") if part]
    if not parts:
        raise ValueError("distribution name is empty")
    return str(PurePosixPath("lib", *parts[:-1], f"{parts[-1]}.pm"))


@dataclass(slots=True)
class BuildContext:
    """Everything one build run owns: files, plugins and shared state."""

    root: Path
    main_module_name: str
    files: FileSet = field(default_factory=FileSet)
    plugins: List[Any] = field(default_factory=list)
    build_root: Path | None = None
    _shared: Dict[str, Any] = field(default_factory=dict)

    def shared_state(self, key: str, factory: Callable[[], T]) -> T:
        """Return the run-scoped object stored under ``key``.

        The object is created with ``factory`` on first use and lives as
        long as this context, so nothing leaks into the next run.
        """

        if key not in self._shared:
            self._shared[key] = factory()
        return self._shared[key]


__all__ = ["BuildContext", "main_module_from_dist_name"]
