"""Parse POD into HTML; the ``pod`` README format itself is the identity."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Union

PERLDOC_URL_PREFIX = "https://metacpan.org/pod/"

PARAGRAPH_SPLIT_RE = re.compile(r"\n(?:[ \t]*\n)+")
COMMAND_RE = re.compile(
    r"\A=([a-zA-Z][a-zA-Z0-9]*)(?:[ \t\n]+(.*))?\Z", re.DOTALL
)
CODE_OPEN_RE = re.compile(r"([A-Z])(<+)")
URL_RE = re.compile(r"\A[a-zA-Z][\w+.-]*:[^:\s]\S*\Z")
ITEM_BULLET_RE = re.compile(r"\A[*-](?:\s+(.*))?\Z", re.DOTALL)
ITEM_NUMBER_RE = re.compile(r"\A(\d+)\.?(?:\s+(.*))?\Z", re.DOTALL)
ANCHOR_STRIP_RE = re.compile(r"[^\w-]+")
# Marks =begin/=for content that is not HTML and must not be reinterpreted.
RAW_ATTR = "data-raw"


def convert(pod_text: str) -> str:
    """Return ``pod_text`` unchanged; README.pod is the POD itself."""

    return pod_text


@dataclass(slots=True)
class _Code:
    letter: str
    raw: str
    children: List["_Node"] = field(default_factory=list)


_Node = Union[str, _Code]


def parse_formatting_codes(text: str) -> list[_Node]:
    """Split ``text`` into plain strings and nested formatting codes."""

    root: list[_Node] = []
    # (code, closing delimiter, content start offset)
    stack: list[tuple[_Code, str, int]] = []
    buffer: list[str] = []
    pos = 0

    def current() -> list[_Node]:
        return stack[-1][0].children if stack else root

    def flush() -> None:
        if buffer:
            current().append("".join(buffer))
            buffer.clear()

    while pos < len(text):
        if stack:
            code, closer, start = stack[-1]
            if closer == ">":
                closed = text.startswith(">", pos)
                end = pos + 1
            else:
                match = re.compile(r"\s+" + re.escape(closer)).match(text, pos)
                closed = match is not None
                end = match.end() if match else pos
            if closed:
                flush()
                code.raw = text[start:pos]
                stack.pop()
                pos = end
                continue

        match = CODE_OPEN_RE.match(text, pos)
        if match:
            brackets = match.group(2)
            if len(brackets) == 1:
                flush()
                code = _Code(match.group(1), "")
                current().append(code)
                stack.append((code, ">", match.end()))
                pos = match.end()
                continue
            spacing = re.compile(r"\s+").match(text, match.end())
            if spacing:
                flush()
                code = _Code(match.group(1), "")
                current().append(code)
                stack.append((code, ">" * len(brackets), spacing.end()))
                pos = spacing.end()
                continue

        buffer.append(text[pos])
        pos += 1

    flush()
    # Unterminated codes keep whatever content they collected.
    while stack:
        code, _, start = stack.pop()
        code.raw = text[start:]
    return root


def plain_text(nodes: Iterable[_Node]) -> str:
    """Return the visible text of parsed nodes without markup."""

    parts: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
        elif node.letter == "E":
            parts.append(_entity(node.raw))
        elif node.letter in ("X", "Z"):
            continue
        elif node.letter == "L":
            parts.append(_link_parts(node.raw)[1])
        else:
            parts.append(plain_text(node.children))
    return "".join(parts)


def anchor_for(text: str) -> str:
    """Return the fragment id used for a heading with ``text``."""

    return ANCHOR_STRIP_RE.sub("-", text.strip()).strip("-")


def render_inline(text: str) -> str:
    """Render POD paragraph text, formatting codes included, as HTML."""

    return _render_nodes(parse_formatting_codes(text))


def _render_nodes(nodes: Iterable[_Node]) -> str:
    return "".join(_render_node(node) for node in nodes)


def _render_node(node: _Node) -> str:
    if isinstance(node, str):
        return html.escape(node, quote=False)
    letter = node.letter
    inner = _render_nodes(node.children)
    if letter == "B":
        return f"<strong>{inner}</strong>"
    if letter == "I" or letter == "F":
        return f"<em>{inner}</em>"
    if letter == "C":
        return f"<code>{inner}</code>"
    if letter == "S":
        return inner.replace(" ", "&nbsp;")
    if letter == "E":
        return html.escape(_entity(node.raw), quote=False)
    if letter in ("X", "Z"):
        return ""
    if letter == "L":
        href, label, label_raw = _link_parts(node.raw)
        rendered = render_inline(label_raw) if label_raw else html.escape(
            label, quote=False
        )
        return f'<a href="{html.escape(href)}">{rendered}</a>'
    return inner


def _entity(name: str) -> str:
    name = name.strip()
    if name == "verbar":
        return "|"
    if name == "sol":
        return "/"
    try:
        if name.lower().startswith("0x"):
            return chr(int(name, 16))
        if name.startswith("0") and name.isdigit():
            return chr(int(name, 8))
        if name.isdigit():
            return chr(int(name))
    except (ValueError, OverflowError):
        return name
    decoded = html.unescape(f"&{name};")
    return name if decoded == f"&{name};" else decoded


def _link_parts(raw: str) -> tuple[str, str, str | None]:
    """Return (href, plain label, raw POD label or None) for ``L<raw>``."""

    label_raw: str | None = None
    target = raw
    if "|" in raw:
        label_raw, target = raw.split("|", 1)
    target = target.strip()

    if URL_RE.match(target):
        label = (
            plain_text(parse_formatting_codes(label_raw))
            if label_raw
            else target
        )
        return target, label, label_raw

    if target.startswith('"') and target.endswith('"'):
        page, section = "", target
    else:
        page, _, section = target.partition("/")
    section = section.strip().strip('"')
    page = page.strip()

    if page and section:
        href = f"{PERLDOC_URL_PREFIX}{page}#{anchor_for(section)}"
        default_label = f'"{section}" in {page}'
    elif page:
        href = f"{PERLDOC_URL_PREFIX}{page}"
        default_label = page
    else:
        href = f"#{anchor_for(section)}"
        default_label = f'"{section}"'

    if label_raw:
        return href, plain_text(parse_formatting_codes(label_raw)), label_raw
    return href, default_label, None


@dataclass(slots=True)
class _OpenList:
    kind: str | None = None
    item_open: bool = False


@dataclass(slots=True)
class _HtmlRenderer:
    raw_formats: frozenset[str]
    out: list[str] = field(default_factory=list)
    lists: list[_OpenList] = field(default_factory=list)
    verbatim: list[str] = field(default_factory=list)
    # Open =begin block: (identifier, body kept, body parsed as POD).
    region: tuple[str, bool, bool] | None = None

    def feed(self, paragraph: str) -> None:
        command = COMMAND_RE.match(paragraph)
        if self.region is not None:
            self._feed_region(paragraph, command)
            return
        if command:
            self._flush_verbatim()
            self._command(command.group(1), (command.group(2) or "").strip())
        elif paragraph[:1] in (" ", "\t"):
            self.verbatim.append(paragraph)
        else:
            self._flush_verbatim()
            self._paragraph(render_inline(" ".join(paragraph.split("\n"))))

    def finish(self) -> str:
        self._flush_verbatim()
        while self.lists:
            self._close_list()
        return "\n".join(self.out)

    def _feed_region(
        self, paragraph: str, command: re.Match[str] | None
    ) -> None:
        name, keep, as_pod = self.region  # type: ignore[misc]
        if command and command.group(1) == "end":
            ended = (command.group(2) or "").strip()
            if not ended or ended == name:
                self.region = None
                return
        if not keep:
            return
        if as_pod:
            self.region = None
            self.feed(paragraph)
            self.region = (name, keep, as_pod)
        else:
            self._raw(name.lower(), paragraph)

    def _raw(self, fmt: str, content: str) -> None:
        if fmt == "html":
            self.out.append(content)
            return
        # Other targets are copied out verbatim by their renderers.
        escaped = html.escape(content, quote=False)
        self.out.append(f'<pre {RAW_ATTR}="{fmt}">{escaped}</pre>')

    def _command(self, name: str, body: str) -> None:
        if name.startswith("head") and name[4:].isdigit():
            level = min(max(int(name[4:]), 1), 6)
            rendered = render_inline(body)
            anchor = anchor_for(plain_text(parse_formatting_codes(body)))
            while self.lists:
                self._close_list()
            self.out.append(
                f'<h{level} id="{html.escape(anchor)}">{rendered}</h{level}>'
            )
        elif name == "over":
            self.lists.append(_OpenList())
        elif name == "item":
            self._item(body)
        elif name == "back":
            if self.lists:
                self._close_list()
        elif name == "begin":
            identifier = body.split(None, 1)[0] if body else ""
            as_pod = identifier.startswith(":")
            fmt = identifier.lstrip(":").lower()
            self.region = (identifier, fmt in self.raw_formats, as_pod)
        elif name == "for":
            identifier, _, content = body.partition(" ")
            if "\n" in identifier:
                identifier, _, rest = identifier.partition("\n")
                content = f"{rest} {content}" if content else rest
            fmt = identifier.lstrip(":").lower()
            if fmt in self.raw_formats and content.strip():
                if identifier.startswith(":"):
                    self._paragraph(render_inline(content.strip()))
                else:
                    self._raw(fmt, content.strip())
        # =pod, =cut, =encoding and unknown commands produce no output.

    def _item(self, body: str) -> None:
        if not self.lists:
            self.lists.append(_OpenList())
        current = self.lists[-1]
        bullet = ITEM_BULLET_RE.match(body) if body else None
        number = ITEM_NUMBER_RE.match(body) if body else None
        if current.kind is None:
            if not body or bullet:
                current.kind = "ul"
            elif number:
                current.kind = "ol"
            else:
                current.kind = "dl"
            self.out.append(f"<{current.kind}>")
        self._close_item(current)

        if current.kind == "dl":
            self.out.append(f"<dt>{render_inline(body)}</dt>")
            self.out.append("<dd>")
        else:
            if current.kind == "ul":
                text = (bullet.group(1) if bullet else body) or ""
            else:
                text = (number.group(2) if number else body) or ""
            self.out.append("<li>")
            if text.strip():
                self.out.append(f"<p>{render_inline(text.strip())}</p>")
        current.item_open = True

    def _paragraph(self, rendered: str) -> None:
        if self.lists and self.lists[-1].kind is None:
            self.lists[-1].kind = "blockquote"
            self.out.append("<blockquote>")
        self.out.append(f"<p>{rendered}</p>")

    def _flush_verbatim(self) -> None:
        if not self.verbatim:
            return
        block = "\n\n".join(self.verbatim)
        self.verbatim.clear()
        if self.lists and self.lists[-1].kind is None:
            self.lists[-1].kind = "blockquote"
            self.out.append("<blockquote>")
        escaped = html.escape(block, quote=False)
        self.out.append(f"<pre><code>{escaped}</code></pre>")

    def _close_item(self, current: _OpenList) -> None:
        if not current.item_open:
            return
        self.out.append("</dd>" if current.kind == "dl" else "</li>")
        current.item_open = False

    def _close_list(self) -> None:
        current = self.lists.pop()
        self._close_item(current)
        if current.kind is not None:
            self.out.append(f"</{current.kind}>")


def paragraphs(pod_text: str) -> list[str]:
    """Return the POD paragraphs of ``pod_text``, skipping non-POD text."""

    normalized = pod_text.replace("\r\n", "\n").replace("\r", "\n")
    result: list[str] = []
    in_pod = False
    for paragraph in PARAGRAPH_SPLIT_RE.split(normalized):
        paragraph = paragraph.rstrip("\n")
        if not paragraph.strip():
            continue
        command = COMMAND_RE.match(paragraph)
        if command:
            in_pod = command.group(1) != "cut"
            if not in_pod:
                continue
        if in_pod:
            result.append(paragraph)
    return result


def render_html(
    pod_text: str, *, raw_formats: Iterable[str] = ("html",)
) -> str:
    """Render ``pod_text`` as an HTML fragment.

    ``=begin``/``=for`` regions are kept only for the formats named in
    ``raw_formats``; everything else in such regions is dropped.
    """

    renderer = _HtmlRenderer(
        raw_formats=frozenset(f.lower() for f in raw_formats)
    )
    for paragraph in paragraphs(pod_text):
        renderer.feed(paragraph)
    return renderer.finish()


__all__ = [
    "PERLDOC_URL_PREFIX",
    "RAW_ATTR",
    "anchor_for",
    "convert",
    "paragraphs",
    "parse_formatting_codes",
    "plain_text",
    "render_html",
    "render_inline",
]
