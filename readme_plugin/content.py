"""Extract POD from module source and render it into README content."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from pipelines.common.encoding import encode_content  # type: ignore[import]

from .errors import SourceNotFound, UnknownEncoding
from .models import FormatSpec, SourceSnapshot

LINE_SPLIT_RE = re.compile(r"\r{1,2}\n|\r|\n")
POD_START_RE = re.compile(r"=[a-zA-Z]")
POD_LEADER_RE = re.compile(r"=pod\b")
POD_CUT_RE = re.compile(r"=cut\b")
DATA_MARKER_RE = re.compile(r"__DATA__\s*\Z")


def find_pod_regions(source_content: str) -> List[List[str]]:
    """Return the lines of each POD region in ``source_content``.

    A region opens on a line starting with ``=`` and a letter, and closes
    after the next ``=cut`` line or at the end of the file. Nothing after
    ``__DATA__`` is scanned.
    """

    regions: List[List[str]] = []
    current: Optional[List[str]] = None
    for line in LINE_SPLIT_RE.split(source_content):
        if current is None:
            if DATA_MARKER_RE.match(line):
                break
            if not POD_START_RE.match(line):
                continue
            current = []
        current.append(line)
        if POD_CUT_RE.match(line):
            regions.append(current)
            current = None
    if current is not None:
        regions.append(current)
    return regions


def merge_pod_regions(regions: Iterable[List[str]]) -> str:
    """Join POD regions into one document wrapped in ``=pod``/``=cut``."""

    region_list = [list(lines) for lines in regions]
    if not region_list:
        return ""
    sections: List[List[str]] = [["=pod"]]
    for lines in region_list:
        if lines and POD_LEADER_RE.match(lines[0]):
            lines.pop(0)
        if lines and POD_CUT_RE.match(lines[-1]):
            lines.pop()
        while lines and lines[0] == "":
            lines.pop(0)
        while lines and lines[-1] == "":
            lines.pop()
        if lines:
            sections.append(lines)
    sections.append(["=cut"])
    return "\n".join("\n".join(lines) + "\n" for lines in sections)


def locate_source(files: Iterable, filename: str):
    """Return the build file called ``filename`` or raise SourceNotFound."""

    for file in files:
        if file.name == filename:
            return file
    raise SourceNotFound(filename)


class ContentPipeline:
    """Turns source text into README content for one plugin instance."""

    def __init__(self, snapshot: SourceSnapshot | None = None) -> None:
        self.snapshot = snapshot if snapshot is not None else SourceSnapshot()

    def extract_markup(self, source_content: str) -> str:
        """Record ``source_content`` and return its merged POD."""

        self.snapshot.last_seen_content = source_content
        return merge_pod_regions(find_pod_regions(source_content))

    def render_text(self, markup: str, format_spec: FormatSpec) -> str:
        """Convert ``markup`` for sinks that encode on their own."""

        return format_spec.convert(markup)

    def render(
        self,
        markup: str,
        format_spec: FormatSpec,
        encoding: str | None = None,
        source_name: str = "<source>",
    ) -> bytes:
        """Convert ``markup`` and encode it for writing to disk."""

        text = self.render_text(markup, format_spec)
        try:
            return encode_content(text, encoding)
        except LookupError as exc:
            raise UnknownEncoding(str(encoding), source_name) from exc


__all__ = [
    "ContentPipeline",
    "find_pod_regions",
    "locate_source",
    "merge_pod_regions",
]
