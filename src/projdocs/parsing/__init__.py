"""Markup parsing and HTML rendering."""

from projdocs.parsing.models import (
    Block,
    Definition,
    DefinitionEntry,
    DefinitionList,
    HeadingNode,
    ListBlock,
    ListItem,
    Paragraph,
    ParsedDocument,
    RawHtml,
    Token,
    TokenKind,
    Verbatim,
)
from projdocs.parsing.anchors import AnchorRegistry, slugify
from projdocs.parsing.inline import InlineFormatter, parse_inline, strip_formatting
from projdocs.parsing.tokenizer import decode_source, tokenize
from projdocs.parsing.tree import build_tree
from projdocs.parsing.html import HtmlRenderer, PageContext
from projdocs.parsing.parser import Parser, extract_definitions, extract_title

__all__ = [
    "Block",
    "Definition",
    "DefinitionEntry",
    "DefinitionList",
    "HeadingNode",
    "ListBlock",
    "ListItem",
    "Paragraph",
    "ParsedDocument",
    "RawHtml",
    "Token",
    "TokenKind",
    "Verbatim",
    "AnchorRegistry",
    "slugify",
    "InlineFormatter",
    "parse_inline",
    "strip_formatting",
    "decode_source",
    "tokenize",
    "build_tree",
    "HtmlRenderer",
    "PageContext",
    "Parser",
    "extract_definitions",
    "extract_title",
]
