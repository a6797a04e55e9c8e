"""Lifecycle roles a build plugin may implement."""

from __future__ import annotations

from typing import (
    Any,
    Iterator,
    List,
    Protocol,
    Type,
    TypeVar,
    runtime_checkable,
)

R = TypeVar("R")


@runtime_checkable
class FileGatherer(Protocol):
    def gather_files(self) -> None: ...


@runtime_checkable
class FilePruner(Protocol):
    def prune_files(self) -> None: ...


@runtime_checkable
class FileMunger(Protocol):
    def munge_files(self) -> None: ...


@runtime_checkable
class InstallerSetup(Protocol):
    def setup_installer(self) -> None: ...


@runtime_checkable
class AfterBuild(Protocol):
    def after_build(self) -> None: ...


@runtime_checkable
class AfterRelease(Protocol):
    def after_release(self) -> None: ...


def plugins_with(plugins: List[Any], role: Type[R]) -> Iterator[R]:
    """Yield the plugins implementing ``role`` in declaration order."""

    for plugin in plugins:
        if isinstance(plugin, role):
            yield plugin


__all__ = [
    "AfterBuild",
    "AfterRelease",
    "FileGatherer",
    "FileMunger",
    "FilePruner",
    "InstallerSetup",
    "plugins_with",
]
