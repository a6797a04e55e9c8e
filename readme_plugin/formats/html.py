"""Standalone HTML README rendering."""

from __future__ import annotations

import html
from typing import Any

try:
    from bs4 import BeautifulSoup  # type: ignore[import]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4 lxml"
    ) from exc

from .pod import render_html

DOCUMENT_TEMPLATE = """<html>
<head>
<title>{title}</title>
<meta http-equiv="Content-Type" content="text/html; charset=utf-8">
</head>
<body>
{body}
</body>
</html>
"""


def document_title(fragment: str) -> str:
    """Return the first paragraph under the NAME heading, if any."""

    if not fragment.strip():
        return ""
    soup = BeautifulSoup(fragment, "lxml")
    for heading in soup.find_all("h1"):
        if heading.get_text(strip=True).upper() != "NAME":
            continue
        paragraph: Any = heading.find_next_sibling()
        if paragraph is not None and paragraph.name == "p":
            return " ".join(paragraph.get_text().split())
    return ""


def convert(pod_text: str) -> str:
    """Render POD as a complete HTML document."""

    fragment = render_html(pod_text, raw_formats=("html",))
    return DOCUMENT_TEMPLATE.format(
        title=html.escape(document_title(fragment), quote=False),
        body=fragment,
    )


__all__ = ["convert", "document_title"]
