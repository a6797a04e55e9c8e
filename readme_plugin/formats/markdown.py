"""Markdown and GitHub-flavoured Markdown README rendering."""

from __future__ import annotations

import re

try:
    from markdownify import MarkdownConverter  # type: ignore[import]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'markdownify'. Install with pip install"
        " markdownify"
    ) from exc

from .pod import RAW_ATTR, render_html

EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")


class PodMarkdownConverter(MarkdownConverter):
    """markdownify converter that leaves =begin/=for blocks untouched."""

    def convert_pre(self, el, text, *args, **kwargs):
        if el.has_attr(RAW_ATTR):
            return f"\n\n{el.get_text()}\n\n"
        return super().convert_pre(el, text, *args, **kwargs)


def md(fragment: str, **options) -> str:
    return PodMarkdownConverter(**options).convert(fragment)


def _tidy(markdown_text: str) -> str:
    """Trim trailing spaces and collapse runs of blank lines."""

    lines = [line.rstrip() for line in markdown_text.split("\n")]
    collapsed = EXTRA_BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()
    return collapsed + "\n" if collapsed else ""


def convert(pod_text: str) -> str:
    """Render POD as Markdown with ATX headings."""

    fragment = render_html(pod_text, raw_formats=("html", "markdown"))
    return _tidy(md(fragment, heading_style="ATX", bullets="*"))


def convert_github(pod_text: str) -> str:
    """Render POD as GitHub-flavoured Markdown with fenced Perl code."""

    fragment = render_html(pod_text, raw_formats=("html", "markdown", "gfm"))
    return _tidy(
        md(
            fragment,
            heading_style="ATX",
            bullets="-",
            code_language="perl",
            escape_underscores=False,
        )
    )


__all__ = ["PodMarkdownConverter", "convert", "convert_github"]
