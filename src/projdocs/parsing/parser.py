"""Markup parser: source text to heading tree to HTML page.

Parsing never fails. Whatever the input, parse() returns a tree and
render() returns a page; malformed constructs degrade to best-effort
structure.
"""

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Optional

from projdocs.config import Config, ConfigError
from projdocs.constants import (
    ARROW_IMAGE_NAME,
    INDEX_PAGE_NAME,
    NAME_SECTION,
    STYLESHEET_NAME,
)
from projdocs.generation.frontmatter import build_page_metadata
from projdocs.parsing.anchors import AnchorRegistry
from projdocs.parsing.html import HtmlRenderer, PageContext
from projdocs.parsing.inline import InlineFormatter, strip_formatting
from projdocs.parsing.models import (
    Block,
    Definition,
    DefinitionList,
    HeadingNode,
    ListBlock,
    Paragraph,
    ParsedDocument,
)
from projdocs.parsing.tokenizer import decode_source, tokenize
from projdocs.parsing.tree import build_tree
from projdocs.repo.paths import relative_url

if TYPE_CHECKING:
    from projdocs.documents.document import Document

logger = logging.getLogger(__name__)


def extract_title(root: HeadingNode) -> Optional[str]:
    """Find a document's title in its heading tree.

    The title is the first level-1 heading. When that heading is the
    conventional NAME section, the first paragraph below it is used instead
    ("Foo::Bar - does things").

    Returns:
        Plain-text title, or None if the document has no level-1 heading.
    """
    first = next((node for node in root.walk() if node.level == 1), None)
    if first is None:
        return None

    heading = " ".join(strip_formatting(first.title).split())
    if heading.upper() == NAME_SECTION:
        paragraph = next((b for b in first.blocks if isinstance(b, Paragraph)), None)
        if paragraph is None:
            return None
        return " ".join(strip_formatting(paragraph.text).split()) or None
    return heading or None


def extract_definitions(root: HeadingNode, pattern: re.Pattern[str]) -> list[Definition]:
    """Collect identifiers matching pattern, in document order, first occurrence wins.

    The pattern is searched in the plain text of headings of level 2 and
    deeper and of definition-list terms. Its first capture group, if it has
    one, is the identifier; otherwise the whole match is.
    """
    definitions: list[Definition] = []
    seen: set[str] = set()

    def consider(text: str, anchor: str) -> None:
        plain = " ".join(strip_formatting(text).split())
        match = pattern.search(plain)
        if not match:
            return
        identifier = match.group(1) if pattern.groups and match.group(1) else match.group(0)
        if identifier and identifier not in seen:
            seen.add(identifier)
            definitions.append(Definition(name=identifier, anchor=anchor))

    def visit_blocks(blocks: list[Block]) -> None:
        for block in blocks:
            if isinstance(block, DefinitionList):
                for entry in block.entries:
                    consider(entry.term, entry.anchor)
                    visit_blocks(entry.blocks)
            elif isinstance(block, ListBlock):
                for item in block.items:
                    visit_blocks(item.blocks)

    def visit(node: HeadingNode) -> None:
        if node.level >= 2:
            consider(node.title, node.anchor)
        visit_blocks(node.blocks)
        for child in node.children:
            visit(child)

    visit(root)
    return definitions


class Parser:
    """Parses and renders the documents of one suffix group.

    Attributes:
        config: Build configuration (project metadata, output root).
        definition_pattern: Compiled pattern for the definitions index, or None.
    """

    def __init__(self, config: Config, definition_pattern: Optional[str] = None):
        """Initialize the parser.

        Args:
            config: Build configuration.
            definition_pattern: Regular expression for definition extraction.

        Raises:
            ConfigError: If definition_pattern is not a valid regular expression.
        """
        self.config = config
        try:
            self.definition_pattern = (
                re.compile(definition_pattern) if definition_pattern else None
            )
        except re.error as e:
            raise ConfigError(f"Invalid definition pattern {definition_pattern!r}: {e}") from e

    def parse(self, text: str, encoding: str = "utf-8") -> ParsedDocument:
        """Parse decoded markup text."""
        tokens = tokenize(text)
        root = build_tree(tokens, AnchorRegistry())
        definitions = (
            extract_definitions(root, self.definition_pattern) if self.definition_pattern else []
        )
        return ParsedDocument(
            root=root,
            title=extract_title(root),
            definitions=definitions,
            encoding=encoding,
        )

    def parse_source(self, data: bytes) -> ParsedDocument:
        """Decode raw source bytes and parse them."""
        text, encoding = decode_source(data)
        return self.parse(text, encoding)

    def extract_title(self, document: "Document") -> str:
        """Parse a document only to find its title; sets and returns it."""
        parsed = self.parse_source(document.read_source())
        document.title = parsed.title or document.name
        return document.title

    def render(
        self,
        document: "Document",
        reference_map: Mapping[str, Path],
        description: str = "",
        source_copy: Optional[Path] = None,
    ) -> str:
        """Render a document to a complete HTML page.

        Sets document.title as a side effect.

        Args:
            document: Document to render.
            reference_map: Module name to absolute output path, fully
                populated before any document is rendered.
            description: Description of the document's group, for the byline.
            source_copy: Path of the mirrored source, linked from the page if given.

        Returns:
            The page as a string.
        """
        parsed = self.parse_source(document.read_source())
        document.title = parsed.title or document.name

        output_path = document.output_path
        output_root = self.config.output_root
        page = PageContext(
            name=document.name,
            title=document.title,
            group_description=description,
            project_title=self.config.title,
            project_description=self.config.description,
            language=self.config.language,
            stylesheet_url=relative_url(output_root / STYLESHEET_NAME, output_path),
            index_url=relative_url(output_root / INDEX_PAGE_NAME, output_path),
            arrow_url=relative_url(output_root / ARROW_IMAGE_NAME, output_path),
            source_url=relative_url(source_copy, output_path) if source_copy else None,
            metadata=build_page_metadata(
                {
                    "name": document.name,
                    "title": document.title,
                    "source": document.relative_path,
                    "group": description,
                }
            ),
        )
        formatter = InlineFormatter(reference_map, current_path=output_path)
        logger.debug(f"Rendering {document.relative_path} ({len(parsed.headings)} headings)")
        return HtmlRenderer(formatter).render_page(parsed, page)
