"""Plain-text README rendering."""

from __future__ import annotations

import re
import textwrap
from typing import Any, List

try:
    from bs4 import BeautifulSoup, NavigableString, Tag  # type: ignore[import]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4 lxml"
    ) from exc

from .pod import RAW_ATTR, render_html

WRAP_WIDTH = 76
BODY_INDENT = 4
HEADING_INDENT = {1: 0, 2: 2, 3: 4, 4: 4, 5: 4, 6: 4}
SPACE_RUN_RE = re.compile(r"[ \t\n\r]+")


def convert(pod_text: str) -> str:
    """Render POD as indented, wrapped plain text."""

    fragment = render_html(pod_text, raw_formats=("text",))
    if not fragment.strip():
        return ""
    soup = BeautifulSoup(fragment, "lxml")
    container: Any = soup.body or soup
    blocks: List[str] = []
    for child in container.children:
        blocks.extend(_render_block(child, BODY_INDENT))
    if not blocks:
        return ""
    return "\n\n".join(blocks).rstrip() + "\n"


def extract_inline_text(element: Any) -> str:
    """Return the inline text of ``element`` with links spelled out."""

    if isinstance(element, NavigableString):
        return str(element)
    parts: List[str] = []
    for child in element.children:
        if isinstance(child, Tag) and child.name == "a":
            label = extract_inline_text(child)
            href = child.get("href", "")
            if href.startswith(("http://", "https://")) and label != href:
                parts.append(f"{label} <{href}>")
            else:
                parts.append(label)
        else:
            parts.append(extract_inline_text(child))
    return "".join(parts)


def _wrap(text: str, indent: int, first_prefix: str = "") -> str:
    collapsed = SPACE_RUN_RE.sub(" ", text).strip()
    padding = " " * indent
    wrapped = textwrap.fill(
        collapsed,
        width=WRAP_WIDTH,
        initial_indent=padding + first_prefix,
        subsequent_indent=padding + " " * len(first_prefix),
        break_long_words=False,
        break_on_hyphens=False,
    )
    return wrapped.replace("\xa0", " ")


def _render_block(element: Any, indent: int) -> List[str]:
    if isinstance(element, NavigableString):
        text = str(element).strip()
        return [_wrap(text, indent)] if text else []
    if not isinstance(element, Tag):
        return []

    name = element.name
    if name and re.fullmatch(r"h[1-6]", name):
        level = int(name[1])
        return [_wrap(extract_inline_text(element), HEADING_INDENT[level])]
    if name == "p":
        text = extract_inline_text(element)
        return [_wrap(text, indent)] if text.strip() else []
    if name == "pre" and element.has_attr(RAW_ATTR):
        return [element.get_text().strip("\n")]
    if name == "pre":
        padding = " " * indent
        lines = element.get_text().rstrip("\n").split("\n")
        return ["\n".join((padding + line).rstrip() for line in lines)]
    if name in ("ul", "ol"):
        return _render_list(element, indent, ordered=name == "ol")
    if name == "dl":
        return _render_definitions(element, indent)
    if name == "blockquote":
        return _render_children(element, indent + BODY_INDENT)
    return _render_children(element, indent)


def _render_children(element: Tag, indent: int) -> List[str]:
    blocks: List[str] = []
    for child in element.children:
        blocks.extend(_render_block(child, indent))
    return blocks


def _render_list(element: Tag, indent: int, *, ordered: bool) -> List[str]:
    blocks: List[str] = []
    items = element.find_all("li", recursive=False)
    for number, item in enumerate(items, start=1):
        marker = f"{number}." if ordered else "*"
        marker = marker.ljust(BODY_INDENT)
        body = _render_children(item, indent + BODY_INDENT)
        if not body:
            blocks.append(" " * indent + marker.rstrip())
            continue
        # Hang the marker off the first paragraph of the item.
        first = body[0]
        blocks.append(" " * indent + marker + first[indent + BODY_INDENT:])
        blocks.extend(body[1:])
    return blocks


def _render_definitions(element: Tag, indent: int) -> List[str]:
    blocks: List[str] = []
    for child in element.find_all(["dt", "dd"], recursive=False):
        if child.name == "dt":
            blocks.append(_wrap(extract_inline_text(child), indent))
        else:
            blocks.extend(_render_children(child, indent + BODY_INDENT))
    return blocks


__all__ = ["convert", "extract_inline_text"]
