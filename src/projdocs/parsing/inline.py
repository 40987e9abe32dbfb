"""Inline formatting codes and module reference resolution.

Running text may contain formatting codes of the form X<...>: B<bold>,
I<italic>, C<code>, F<file>, S<no break>, E<escape>, L<link>, X<index> and
Z<>. Codes nest, and C<< ... >> with doubled (or more) brackets allows
literal ">" inside. An unterminated code is closed at the end of its
paragraph.
"""

import html
import re
from dataclasses import dataclass, field
from html.entities import name2codepoint
from pathlib import Path
from typing import Mapping, Optional, Pattern, Union

from projdocs.constants import MODULE_TOKEN_RE, POD_ESCAPES, URL_TARGET_RE
from projdocs.parsing.anchors import slugify
from projdocs.repo.paths import relative_url

FORMAT_CODES = frozenset("BCEFILSXZ")

_CODE_OPEN_RE = re.compile(r"([A-Z])(<+)")
_SINGLE_CLOSER = re.compile(r">")
_NBSP_RE = re.compile(r" (?![^<]*>)")


@dataclass
class FormatCode:
    """A parsed formatting code.

    Attributes:
        code: The code letter, e.g. "B".
        children: Parsed content.
        raw: Unparsed content between the delimiters.
    """

    code: str
    children: list["Node"] = field(default_factory=list)
    raw: str = ""


Node = Union[str, FormatCode]


def parse_inline(text: str) -> list[Node]:
    """Parse text into plain strings and FormatCode nodes."""
    nodes, _, _ = _parse(text, 0, None)
    return nodes


def _multi_closer(brackets: int) -> Pattern[str]:
    return re.compile(r"(?:\s+|(?<=\s))" + ">" * brackets)


def _parse(
    text: str, pos: int, closer: Optional[Pattern[str]]
) -> tuple[list[Node], int, int]:
    """Parse from pos until closer matches or text ends.

    Returns:
        Tuple of (nodes, position after the closer, position where the
        content ended).
    """
    nodes: list[Node] = []
    buffer: list[str] = []
    length = len(text)

    def flush() -> None:
        if buffer:
            nodes.append("".join(buffer))
            buffer.clear()

    while pos < length:
        if closer is not None:
            end = closer.match(text, pos)
            if end:
                flush()
                return nodes, end.end(), pos

        opener = _CODE_OPEN_RE.match(text, pos)
        if opener and opener.group(1) in FORMAT_CODES:
            brackets = len(opener.group(2))
            start = opener.end()
            if brackets > 1 and start < length and text[start].isspace():
                while start < length and text[start].isspace():
                    start += 1
                inner_closer = _multi_closer(brackets)
            else:
                start = pos + 2
                inner_closer = _SINGLE_CLOSER
            flush()
            children, pos, content_end = _parse(text, start, inner_closer)
            nodes.append(FormatCode(opener.group(1), children, text[start:content_end]))
            continue

        buffer.append(text[pos])
        pos += 1

    flush()
    return nodes, pos, pos


def _code_point(digits: str, base: int) -> Optional[str]:
    """The character numbered digits, None for surrogates and out-of-range values."""
    try:
        value = int(digits, base)
        if 0xD800 <= value <= 0xDFFF:
            return None
        return chr(value)
    except (ValueError, OverflowError):
        return None


def _escape_char(raw: str) -> Optional[str]:
    """Resolve the content of an E<...> code to a character."""
    name = raw.strip()
    if name in POD_ESCAPES:
        return POD_ESCAPES[name]
    if re.fullmatch(r"0[xX][0-9a-fA-F]+", name):
        return _code_point(name, 16)
    if re.fullmatch(r"0[0-7]+", name):
        return _code_point(name, 8)
    if re.fullmatch(r"[0-9]+", name):
        return _code_point(name, 10)
    if name in name2codepoint:
        return chr(name2codepoint[name])
    return None


def _split_link(raw: str) -> tuple[str, bool, str]:
    """Split L<> content at the first "|" outside nested codes.

    Returns:
        Tuple of (label, has_label, target).
    """
    depth = 0
    index = 0
    while index < len(raw):
        char = raw[index]
        if char == "<" and index > 0 and raw[index - 1] in FORMAT_CODES:
            depth += 1
        elif char == ">" and depth:
            depth -= 1
        elif char == "|" and depth == 0:
            return raw[:index], True, raw[index + 1 :]
        index += 1
    return "", False, raw


def _split_target(target: str) -> tuple[str, str]:
    """Split a link target into (module name, section)."""
    target = target.strip()
    if len(target) >= 2 and target.startswith('"') and target.endswith('"'):
        return "", target[1:-1]
    if target.startswith("/"):
        return "", target[1:].strip().strip('"')
    if "/" in target:
        name, section = target.split("/", 1)
        return name.strip(), section.strip().strip('"')
    return target, ""


def strip_formatting(text: str) -> str:
    """Reduce marked-up text to plain text."""
    return _plain(parse_inline(text))


def _plain(nodes: list[Node]) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
        elif node.code in ("X", "Z"):
            continue
        elif node.code == "E":
            char = _escape_char(node.raw)
            parts.append(char if char is not None else f"E<{node.raw}>")
        elif node.code == "L":
            label, has_label, target = _split_link(node.raw)
            if has_label:
                parts.append(strip_formatting(label))
            else:
                name, section = _split_target(target)
                if URL_TARGET_RE.match(target.strip()):
                    parts.append(target.strip())
                elif name and section:
                    parts.append(f'"{section}" in {name}')
                elif section:
                    parts.append(f'"{section}"')
                else:
                    parts.append(name)
        else:
            parts.append(_plain(node.children))
    return "".join(parts)


class InlineFormatter:
    """Renders marked-up text to HTML, resolving module references.

    A module reference (L<Foo::Bar>, C<Foo::Bar> or a bare Foo::Bar or Foo
    token in running text) is looked up in the reference map. A hit becomes a
    link relative to the current page; a miss becomes inline code, never a
    broken link. A bare single-word miss stays plain text.
    """

    def __init__(
        self,
        reference_map: Optional[Mapping[str, Path]] = None,
        current_path: Optional[Path] = None,
    ):
        """Initialize the formatter.

        Args:
            reference_map: Module name to absolute output path.
            current_path: Absolute output path of the page being rendered.
        """
        self.reference_map: Mapping[str, Path] = reference_map or {}
        self.current_path = current_path

    def module_url(self, name: str) -> Optional[str]:
        """URL of a module's page relative to the current page, None if unknown."""
        target = self.reference_map.get(name)
        if target is None:
            return None
        if self.current_path is None:
            return target.as_posix()
        return relative_url(target, self.current_path)

    def format(self, text: str, links: bool = True) -> str:
        """Render text to HTML.

        Args:
            text: Text with formatting codes.
            links: If False, no hyperlinks are produced (for headings, table
                of contents entries and definition terms).

        Returns:
            HTML fragment.
        """
        return self._render_nodes(parse_inline(text), links)

    def _render_nodes(self, nodes: list[Node], links: bool, in_code: bool = False) -> str:
        return "".join(self._render_node(node, links, in_code) for node in nodes)

    def _render_node(self, node: Node, links: bool, in_code: bool) -> str:
        if isinstance(node, str):
            if in_code:
                return html.escape(node)
            return self._render_text(node, links)

        code = node.code
        if code == "B":
            return f"<strong>{self._render_nodes(node.children, links, in_code)}</strong>"
        if code == "I":
            return f"<em>{self._render_nodes(node.children, links, in_code)}</em>"
        if code == "F":
            return f'<em class="file">{self._render_nodes(node.children, links, in_code)}</em>'
        if code == "C":
            inner = f"<code>{self._render_nodes(node.children, False, True)}</code>"
            url = self.module_url(node.raw.strip()) if links else None
            if url:
                return f'<a href="{html.escape(url)}">{inner}</a>'
            return inner
        if code == "S":
            return _NBSP_RE.sub("&nbsp;", self._render_nodes(node.children, links, in_code))
        if code == "E":
            char = _escape_char(node.raw)
            return html.escape(char if char is not None else f"E<{node.raw}>")
        if code == "L":
            return self._render_link(node, links)
        # X<> index entries and Z<> produce nothing
        return ""

    def _render_text(self, text: str, links: bool) -> str:
        if not links:
            return html.escape(text)

        parts: list[str] = []
        last = 0
        for match in MODULE_TOKEN_RE.finditer(text):
            parts.append(html.escape(text[last : match.start()]))
            name = match.group(1)
            url = self.module_url(name)
            if url:
                parts.append(f'<a href="{html.escape(url)}">{html.escape(name)}</a>')
            elif "::" in name:
                parts.append(f"<code>{html.escape(name)}</code>")
            else:
                parts.append(html.escape(name))
            last = match.end()
        parts.append(html.escape(text[last:]))
        return "".join(parts)

    def _render_link(self, node: FormatCode, links: bool) -> str:
        label, has_label, target = _split_link(node.raw)
        target = target.strip()
        label_html = self.format(label, links=False) if has_label else None

        if URL_TARGET_RE.match(target):
            text = label_html or html.escape(target)
            if not links:
                return text
            return f'<a href="{html.escape(target)}">{text}</a>'

        name, section = _split_target(target)
        fragment = "#" + slugify(strip_formatting(section)) if section else ""

        if not name and not section:
            return label_html or ""

        if not name:
            text = label_html or html.escape(f'"{section}"')
            if not links:
                return text
            return f'<a href="{html.escape(fragment)}">{text}</a>'

        if section:
            default_text = html.escape(f'"{section}" in {name}')
        else:
            default_text = html.escape(name)

        url = self.module_url(name) if links else None
        if url:
            return f'<a href="{html.escape(url + fragment)}">{label_html or default_text}</a>'
        if label_html is not None:
            return label_html
        return f"<code>{default_text}</code>"
