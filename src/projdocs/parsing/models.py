"""Data models for markup parsing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class TokenKind(Enum):
    """Kinds of markup paragraphs."""

    COMMAND = "command"  # =head1, =over, =item, ...
    VERBATIM = "verbatim"  # Indented literal text
    TEXT = "text"  # Ordinary paragraph with inline formatting


@dataclass
class Token:
    """One paragraph of markup.

    Attributes:
        kind: Paragraph kind.
        text: For commands, the argument text after the command name;
            otherwise the paragraph text with lines joined by newlines.
        command: Command name without "=", e.g. "head1"; None for non-commands.
        line: 1-based source line the paragraph starts on.
        blank_lines: Number of blank lines preceding the paragraph.
    """

    kind: TokenKind
    text: str
    command: Optional[str] = None
    line: int = 0
    blank_lines: int = 0


@dataclass
class Paragraph:
    """Running text with inline formatting codes (not yet rendered)."""

    text: str


@dataclass
class Verbatim:
    """Literal text rendered as-is inside <pre>."""

    text: str


@dataclass
class RawHtml:
    """Content of an =begin html region, passed through untouched."""

    text: str


@dataclass
class ListItem:
    """One entry of an ordered or unordered list."""

    blocks: list["Block"] = field(default_factory=list)


@dataclass
class ListBlock:
    """An ordered or unordered list."""

    ordered: bool
    items: list[ListItem] = field(default_factory=list)


@dataclass
class DefinitionEntry:
    """A term and the blocks describing it."""

    term: str
    anchor: str
    blocks: list["Block"] = field(default_factory=list)


@dataclass
class DefinitionList:
    """A list of term/body pairs (=item with free-text labels)."""

    entries: list[DefinitionEntry] = field(default_factory=list)


Block = Union[Paragraph, Verbatim, RawHtml, ListBlock, DefinitionList]


@dataclass
class HeadingNode:
    """A heading and everything up to the next heading of equal or lower level.

    The root of every tree is a synthetic node with level 0, an empty title
    and an empty anchor; it holds content that precedes the first heading.
    """

    level: int
    title: str
    anchor: str
    blocks: list[Block] = field(default_factory=list)
    children: list["HeadingNode"] = field(default_factory=list)

    def walk(self):
        """Yield this node's descendants in document order (self excluded)."""
        for child in self.children:
            yield child
            yield from child.walk()


@dataclass(frozen=True)
class Definition:
    """An identifier extracted for the page's definitions index."""

    name: str
    anchor: str


@dataclass
class ParsedDocument:
    """Result of parsing one document's markup.

    Attributes:
        root: Synthetic level-0 heading holding the whole tree.
        title: Plain-text title extracted from the markup, None if absent.
        definitions: Ordered, unique identifiers for the definitions index.
        encoding: Codec the source was decoded with.
    """

    root: HeadingNode
    title: Optional[str] = None
    definitions: list[Definition] = field(default_factory=list)
    encoding: str = "utf-8"

    @property
    def headings(self) -> list[HeadingNode]:
        return list(self.root.walk())
