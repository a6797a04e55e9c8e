"""Exceptions raised while resolving and generating README artifacts."""

from __future__ import annotations


class ReadmeError(Exception):
    """Base class for fatal README generation failures."""


class InvalidConfiguration(ReadmeError):
    """Raised when explicit plugin settings contradict each other."""


class UnknownFormat(ReadmeError):
    """Raised when a README type is not one of the registered formats."""

    def __init__(self, format_id: str, known: frozenset[str]) -> None:
        super().__init__(
            f"Unknown README type {format_id!r};"
            f" expected one of: {', '.join(sorted(known))}"
        )
        self.format_id = format_id


class SourceNotFound(ReadmeError):
    """Raised when the POD source file is absent from the build files."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            f"Could not find source file {filename} during the build"
            " - did another plugin prune or rename it?"
        )
        self.filename = filename


class TargetFileMissing(ReadmeError):
    """Raised when the README placeholder disappeared from the build."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            f"Could not find a {filename} file during the build"
            " - did you prune it away with a PruneFiles block?"
        )
        self.filename = filename


class UnknownEncoding(ReadmeError):
    """Raised when a file declares an encoding Python does not know."""

    def __init__(self, encoding: str, filename: str) -> None:
        super().__init__(
            f"Unknown encoding {encoding!r} declared for {filename}"
        )
        self.encoding = encoding
        self.filename = filename


__all__ = [
    "InvalidConfiguration",
    "ReadmeError",
    "SourceNotFound",
    "TargetFileMissing",
    "UnknownEncoding",
    "UnknownFormat",
]
