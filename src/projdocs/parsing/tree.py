"""Build the heading tree from a token stream.

Headings nest by level: a heading of level L becomes a child of the most
recent heading whose level is below L, or of the synthetic root. Every
other token becomes a Block attached to the innermost open container: the
current list item or definition entry if a list is open, else the current
heading.

Malformed structure is repaired, never reported as an error: lists left
open are closed at the next heading or at end of input, as are =begin
regions; a stray =back is ignored.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from projdocs.constants import MAX_HEADING_LEVEL
from projdocs.parsing.anchors import AnchorRegistry
from projdocs.parsing.inline import strip_formatting
from projdocs.parsing.models import (
    Block,
    DefinitionEntry,
    DefinitionList,
    HeadingNode,
    ListBlock,
    ListItem,
    Paragraph,
    RawHtml,
    Token,
    TokenKind,
    Verbatim,
)

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^head(\d+)$")
_BULLET_RE = re.compile(r"^\*\s*(.*)\Z", re.DOTALL)
_NUMBER_RE = re.compile(r"^(\d+)\.?(?:\s+(.*))?\Z", re.DOTALL)

_IGNORED_COMMANDS = frozenset({"pod", "encoding"})


@dataclass
class _OpenList:
    """A list between =over and =back."""

    parent: list[Block]
    block: Optional[Union[ListBlock, DefinitionList]] = None
    # Blocks of the current item or entry; before the first =item, blocks
    # go straight to the parent container.
    current: Optional[list[Block]] = None

    @property
    def container(self) -> list[Block]:
        return self.current if self.current is not None else self.parent


@dataclass
class _RawRegion:
    """An =begin region awaiting its =end."""

    format: str
    parts: list[str] = field(default_factory=list)


class TreeBuilder:
    """Consumes tokens and produces a HeadingNode tree."""

    def __init__(self, anchors: Optional[AnchorRegistry] = None):
        """Initialize the builder.

        Args:
            anchors: Registry used for heading and term anchors. A fresh one
                is created if not given.
        """
        self.anchors = anchors or AnchorRegistry()
        self.root = HeadingNode(level=0, title="", anchor="")
        self._headings: list[HeadingNode] = [self.root]
        self._lists: list[_OpenList] = []
        self._raw: Optional[_RawRegion] = None

    def build(self, tokens: list[Token]) -> HeadingNode:
        """Feed all tokens and return the root of the tree."""
        for token in tokens:
            self.feed(token)
        self.close()
        return self.root

    @property
    def _container(self) -> list[Block]:
        if self._lists:
            return self._lists[-1].container
        return self._headings[-1].blocks

    def feed(self, token: Token) -> None:
        """Process one token."""
        if self._raw is not None:
            if token.kind is TokenKind.COMMAND and token.command == "end":
                self._close_raw()
                return
            if token.kind is TokenKind.COMMAND and _HEADING_RE.match(token.command or ""):
                logger.debug(f"Line {token.line}: unterminated =begin closed by heading")
                self._close_raw()
            else:
                self._raw.parts.append(self._token_source(token))
                return

        if token.kind is TokenKind.VERBATIM:
            self._add_verbatim(token)
        elif token.kind is TokenKind.TEXT:
            self._container.append(Paragraph(token.text))
        else:
            self._command(token)

    def close(self) -> None:
        """Close everything left open at end of input."""
        if self._raw is not None:
            logger.debug("Unterminated =begin closed at end of input")
            self._close_raw()
        if self._lists:
            logger.debug(f"{len(self._lists)} unterminated =over closed at end of input")
        self._close_lists()

    def _command(self, token: Token) -> None:
        command = token.command or ""
        heading = _HEADING_RE.match(command)

        if heading:
            self._add_heading(int(heading.group(1)), token.text)
        elif command == "over":
            self._lists.append(_OpenList(parent=self._container))
        elif command == "item":
            self._add_item(token.text)
        elif command == "back":
            if self._lists:
                self._lists.pop()
            else:
                logger.debug(f"Line {token.line}: =back without =over ignored")
        elif command == "begin":
            self._raw = _RawRegion(format=token.text.split()[0].lower() if token.text else "")
        elif command == "for":
            format_name, _, content = token.text.partition(" ")
            if format_name.lower() == "html" and content.strip():
                self._container.append(RawHtml(content.strip()))
        elif command == "end":
            logger.debug(f"Line {token.line}: =end without =begin ignored")
        elif command not in _IGNORED_COMMANDS:
            logger.debug(f"Line {token.line}: unknown command ={command} ignored")

    def _add_heading(self, level: int, title: str) -> None:
        if self._lists:
            logger.debug(f"Unterminated =over closed by heading {title!r}")
        self._close_lists()
        level = max(1, min(level, MAX_HEADING_LEVEL))

        while self._headings[-1].level >= level:
            self._headings.pop()

        node = HeadingNode(
            level=level,
            title=title,
            anchor=self.anchors.allocate(strip_formatting(title)),
        )
        self._headings[-1].children.append(node)
        self._headings.append(node)

    def _add_item(self, text: str) -> None:
        if not self._lists:
            # =item outside =over: open an implicit list
            self._lists.append(_OpenList(parent=self._container))
        open_list = self._lists[-1]

        bullet = _BULLET_RE.match(text)
        number = None if bullet else _NUMBER_RE.match(text)

        if open_list.block is None:
            if bullet:
                open_list.block = ListBlock(ordered=False)
            elif number:
                open_list.block = ListBlock(ordered=True)
            else:
                open_list.block = DefinitionList()
            open_list.parent.append(open_list.block)

        if bullet:
            label = bullet.group(1).strip()
        elif number:
            label = (number.group(2) or "").strip()
        else:
            label = text.strip()

        block = open_list.block
        if isinstance(block, ListBlock):
            item = ListItem()
            if label:
                item.blocks.append(Paragraph(label))
            block.items.append(item)
            open_list.current = item.blocks
        else:
            # A bullet or number in a definition list keeps its marker as the term
            term = text.strip() or label
            entry = DefinitionEntry(
                term=term,
                anchor=self.anchors.allocate(strip_formatting(term)),
            )
            block.entries.append(entry)
            open_list.current = entry.blocks

    def _add_verbatim(self, token: Token) -> None:
        container = self._container
        if container and isinstance(container[-1], Verbatim):
            gap = "\n" * (max(token.blank_lines, 1) + 1)
            container[-1].text += gap + token.text
        else:
            container.append(Verbatim(token.text))

    def _close_lists(self) -> None:
        self._lists.clear()

    def _close_raw(self) -> None:
        region = self._raw
        self._raw = None
        if region is not None and region.format == "html" and region.parts:
            self._container.append(RawHtml("\n\n".join(region.parts)))

    @staticmethod
    def _token_source(token: Token) -> str:
        if token.kind is TokenKind.COMMAND:
            return f"={token.command} {token.text}".rstrip()
        return token.text


def build_tree(tokens: list[Token], anchors: Optional[AnchorRegistry] = None) -> HeadingNode:
    """Build a heading tree from tokens."""
    return TreeBuilder(anchors).build(tokens)
