"""Read-only table of supported README formats."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .errors import UnknownFormat
from .formats import html as html_format
from .formats import markdown as markdown_format
from .formats import pod as pod_format
from .formats import text as text_format
from .models import FormatSpec

FORMATS: Mapping[str, FormatSpec] = MappingProxyType(
    {
        spec.id: spec
        for spec in (
            FormatSpec("pod", "README.pod", pod_format.convert),
            FormatSpec("text", "README", text_format.convert),
            FormatSpec("markdown", "README.mkdn", markdown_format.convert),
            FormatSpec("gfm", "README.md", markdown_format.convert_github),
            FormatSpec("html", "README.html", html_format.convert),
        )
    }
)


def all_format_ids() -> frozenset[str]:
    """Return every registered format id."""

    return frozenset(FORMATS)


def lookup(format_id: str) -> FormatSpec:
    """Return the format registered as ``format_id``."""

    try:
        return FORMATS[format_id]
    except KeyError:
        raise UnknownFormat(format_id, all_format_ids()) from None


__all__ = ["FORMATS", "all_format_ids", "lookup"]
