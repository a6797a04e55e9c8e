"""In-memory build files and the file set plugins operate on."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, List, Optional

from pipelines.common.encoding import (  # type: ignore[import]
    DEFAULT_ENCODING,
    decode_content,
    encode_content,
)

ContentWatcher = Callable[["InMemoryFile"], None]


class InMemoryFile:
    """A build file whose content can be edited and watched."""

    def __init__(
        self,
        name: str,
        content: str = "",
        *,
        encoding: str | None = DEFAULT_ENCODING,
        added_by: str | None = None,
    ) -> None:
        self.name = name
        self._content = content
        self.encoding = encoding
        self.added_by = added_by
        self._watchers: List[ContentWatcher] = []

    def __repr__(self) -> str:
        return f"InMemoryFile(name={self.name!r}, added_by={self.added_by!r})"

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, value: str) -> None:
        previous = self._content
        self._content = value
        if value == previous:
            return
        for watcher in list(self._watchers):
            watcher(self)

    def watch(self, watcher: ContentWatcher) -> None:
        """Call ``watcher`` every time the content changes from now on."""

        self._watchers.append(watcher)

    def encoded_content(self) -> bytes:
        return encode_content(self._content, self.encoding)

    @classmethod
    def from_path(
        cls, path: Path, name: str, *, added_by: str | None = None
    ) -> "InMemoryFile":
        """Load ``path`` from disk as a build file called ``name``."""

        content, encoding = decode_content(path.read_bytes())
        return cls(name, content, encoding=encoding, added_by=added_by)


class FileSet:
    """Ordered collection of build files, unique by name."""

    def __init__(self, files: Optional[List[InMemoryFile]] = None) -> None:
        self._files: List[InMemoryFile] = []
        for file in files or []:
            self.insert(file)

    def __iter__(self) -> Iterator[InMemoryFile]:
        return iter(list(self._files))

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, name: object) -> bool:
        return self.find(str(name)) is not None

    def list(self) -> List[InMemoryFile]:
        return list(self._files)

    def names(self) -> List[str]:
        return [file.name for file in self._files]

    def find(self, name: str) -> InMemoryFile | None:
        """Return the file called ``name``, or None."""

        for file in self._files:
            if file.name == name:
                return file
        return None

    def insert(self, file: InMemoryFile) -> None:
        if self.find(file.name) is not None:
            raise ValueError(f"attempted to add {file.name} multiple times")
        self._files.append(file)

    def remove(self, file: InMemoryFile) -> None:
        try:
            self._files.remove(file)
        except ValueError:
            raise ValueError(f"{file.name} is not in the build") from None


__all__ = ["ContentWatcher", "FileSet", "InMemoryFile"]
