"""HTML rendering of parsed documents."""

import html
from dataclasses import dataclass
from typing import Optional

from projdocs.constants import TOP_ANCHOR
from projdocs.parsing.inline import InlineFormatter
from projdocs.parsing.models import (
    Block,
    DefinitionList,
    HeadingNode,
    ListBlock,
    Paragraph,
    ParsedDocument,
    RawHtml,
    Verbatim,
)


@dataclass(frozen=True)
class PageContext:
    """Everything a page needs besides its own markup.

    URLs are relative to the page being rendered.
    """

    name: str
    title: str
    group_description: str
    project_title: str
    project_description: str
    language: str
    stylesheet_url: str
    index_url: str
    arrow_url: str
    source_url: Optional[str] = None
    metadata: str = ""


def _e(text: str) -> str:
    return html.escape(text, quote=True)


class HtmlRenderer:
    """Renders a ParsedDocument to a complete HTML page."""

    def __init__(self, formatter: InlineFormatter):
        """Initialize the renderer.

        Args:
            formatter: Inline formatter bound to the page's reference context.
        """
        self.formatter = formatter

    def render_page(self, parsed: ParsedDocument, page: PageContext) -> str:
        """Render the full page: header, TOC, definitions index, body, footer."""
        parts = [
            "<!DOCTYPE html>",
            page.metadata.rstrip("\n"),
            f'<html xml:lang="{_e(page.language)}" lang="{_e(page.language)}">',
            "<head>",
            '<meta http-equiv="Content-Type" content="text/html; charset=utf-8" />',
            f"<title>{_e(page.title)}</title>",
            f'<link rel="stylesheet" href="{_e(page.stylesheet_url)}" type="text/css" />',
            "</head>",
            "<body>",
            f'<a name="{TOP_ANCHOR}" id="{TOP_ANCHOR}"></a>',
            self.render_byline(page),
            self.render_toc(parsed.root),
            self.render_definitions(parsed),
            '<div class="pod">',
            self.render_body(parsed.root, page.arrow_url),
            "</div>",
            '<div class="footer">generated by projdocs</div>',
            "</body>",
            "</html>",
        ]
        return "\n".join(part for part in parts if part) + "\n"

    def render_byline(self, page: PageContext) -> str:
        """Project header, breadcrumb and source link."""
        lines = ['<div class="box">']
        lines.append(f'<h1 class="t1">{_e(page.project_title)}</h1>')
        if page.project_description:
            lines.append(f'<div class="t2">{_e(page.project_description)}</div>')
        lines.append("</div>")
        lines.append(
            f'<div class="path"><a href="{_e(page.index_url)}">'
            f"{_e(page.project_title or 'Index')}</a> &gt; "
            f"{_e(page.group_description)} &gt; {_e(page.name)}</div>"
        )
        if page.source_url:
            lines.append(f'<div class="source"><a href="{_e(page.source_url)}">Source</a></div>')
        return "\n".join(lines)

    def render_toc(self, root: HeadingNode) -> str:
        """Nested list of links mirroring the heading tree; empty if no headings."""
        if not root.children:
            return ""
        return '<div class="toc">\n' + self._toc_list(root.children) + "\n</div>"

    def _toc_list(self, nodes: list[HeadingNode]) -> str:
        lines = ["<ul>"]
        for node in nodes:
            title = self.formatter.format(node.title, links=False)
            entry = f'<li><a href="#{_e(node.anchor)}">{title}</a>'
            if node.children:
                entry += "\n" + self._toc_list(node.children) + "\n"
            lines.append(entry + "</li>")
        lines.append("</ul>")
        return "\n".join(lines)

    def render_definitions(self, parsed: ParsedDocument) -> str:
        """Index of extracted definitions; empty if there are none."""
        if not parsed.definitions:
            return ""
        lines = ['<div class="definitions">', "<h2>Methods</h2>", "<ul>"]
        for definition in parsed.definitions:
            lines.append(
                f'<li><a href="#{_e(definition.anchor)}">{_e(definition.name)}</a></li>'
            )
        lines.extend(["</ul>", "</div>"])
        return "\n".join(lines)

    def render_body(self, root: HeadingNode, arrow_url: str = "") -> str:
        """Render the root's blocks followed by every heading section."""
        parts = [self.render_blocks(root.blocks)]
        for child in root.children:
            parts.append(self._render_section(child, arrow_url))
        return "\n".join(part for part in parts if part)

    def _render_section(self, node: HeadingNode, arrow_url: str) -> str:
        tag = f"h{node.level}"
        title = self.formatter.format(node.title, links=False)
        anchor = _e(node.anchor)
        heading = f'<{tag} id="{anchor}"><a name="{anchor}"></a>{title}'
        if node.level == 1 and arrow_url:
            heading += (
                f' <a href="#{TOP_ANCHOR}" class="toplink">'
                f'<img alt="^" src="{_e(arrow_url)}" /></a>'
            )
        parts = [heading + f"</{tag}>", self.render_blocks(node.blocks)]
        for child in node.children:
            parts.append(self._render_section(child, arrow_url))
        return "\n".join(part for part in parts if part)

    def render_blocks(self, blocks: list[Block]) -> str:
        return "\n".join(self.render_block(block) for block in blocks)

    def render_block(self, block: Block) -> str:
        """Render one block."""
        if isinstance(block, Paragraph):
            return f"<p>{self.formatter.format(block.text)}</p>"
        if isinstance(block, Verbatim):
            return f"<pre>{html.escape(block.text, quote=False)}</pre>"
        if isinstance(block, RawHtml):
            return block.text
        if isinstance(block, ListBlock):
            tag = "ol" if block.ordered else "ul"
            items = [f"<li>{self.render_blocks(item.blocks)}</li>" for item in block.items]
            return f"<{tag}>\n" + "\n".join(items) + f"\n</{tag}>"
        if isinstance(block, DefinitionList):
            lines = ["<dl>"]
            for entry in block.entries:
                term = self.formatter.format(entry.term, links=False)
                anchor = _e(entry.anchor)
                lines.append(f'<dt id="{anchor}"><a name="{anchor}"></a>{term}</dt>')
                lines.append(f"<dd>{self.render_blocks(entry.blocks)}</dd>")
            lines.append("</dl>")
            return "\n".join(lines)
        raise TypeError(f"Unknown block type: {type(block).__name__}")
