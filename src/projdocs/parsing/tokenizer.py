"""Line-oriented scanner splitting source text into markup paragraphs.

Markup lives in regions that start with a command line ("=head1 ...",
"=pod", ...) and end at "=cut"; everything outside those regions is source
code and ignored. Inside a region, paragraphs are separated by blank lines
and classified by their first character.
"""

import codecs
import logging
import re

from projdocs.parsing.models import Token, TokenKind

logger = logging.getLogger(__name__)

_COMMAND_START_RE = re.compile(r"^=[A-Za-z]")
_COMMAND_RE = re.compile(r"^=([A-Za-z][\w-]*)[ \t]*(.*)\Z", re.DOTALL)
_ENCODING_RE = re.compile(rb"^=encoding[ \t]+([\w.:-]+)", re.MULTILINE)

DEFAULT_ENCODING = "utf-8"


def detect_encoding(data: bytes) -> str:
    """Find the codec named by an =encoding command.

    Args:
        data: Raw source bytes.

    Returns:
        A codec name Python knows, or "utf-8" if none is declared or the
        declared one is unknown.
    """
    match = _ENCODING_RE.search(data)
    if not match:
        return DEFAULT_ENCODING
    name = match.group(1).decode("ascii", errors="ignore")
    try:
        return codecs.lookup(name).name
    except LookupError:
        logger.debug(f"Unknown =encoding {name!r}, falling back to {DEFAULT_ENCODING}")
        return DEFAULT_ENCODING


def decode_source(data: bytes) -> tuple[str, str]:
    """Decode source bytes using the declared encoding.

    Returns:
        Tuple of (text, encoding). Undecodable bytes are replaced.
    """
    encoding = detect_encoding(data)
    try:
        text = data.decode(encoding, errors="replace")
    except (LookupError, UnicodeError) as e:
        # Binary transforms (hex, zlib, ...) and codecs without "replace"
        logger.debug(f"Cannot decode with {encoding!r} ({e}), falling back to {DEFAULT_ENCODING}")
        encoding = DEFAULT_ENCODING
        text = data.decode(encoding, errors="replace")
    if text.startswith("\ufeff"):
        text = text[1:]
    return text, encoding


def tokenize(text: str) -> list[Token]:
    """Split text into markup paragraphs.

    Args:
        text: Decoded source text.

    Returns:
        Tokens in source order. "=cut" and "=pod" are consumed here and never
        appear in the result.
    """
    tokens: list[Token] = []
    in_markup = False
    paragraph: list[str] = []
    start_line = 0
    blank_lines = 0

    def flush() -> None:
        nonlocal in_markup, paragraph, blank_lines
        if not paragraph:
            return
        token = _classify(paragraph, start_line, blank_lines)
        paragraph = []
        blank_lines = 0
        if token.kind is TokenKind.COMMAND:
            if token.command == "cut":
                in_markup = False
                return
            if token.command == "pod" and not token.text:
                return
        tokens.append(token)

    for number, line in enumerate(text.splitlines(), start=1):
        if not in_markup:
            if not _COMMAND_START_RE.match(line) or line.startswith("=cut"):
                continue
            in_markup = True
            blank_lines = 0

        if not line.strip():
            if paragraph:
                flush()
            # flush() may have left the markup region
            if in_markup:
                blank_lines += 1
            continue

        if not paragraph:
            start_line = number
        paragraph.append(line)

    flush()
    return tokens


def _classify(lines: list[str], line: int, blank_lines: int) -> Token:
    """Turn the lines of one paragraph into a Token."""
    first = lines[0]
    if first.startswith("="):
        match = _COMMAND_RE.match("\n".join(lines))
        if match:
            argument = match.group(2).strip()
            return Token(
                kind=TokenKind.COMMAND,
                text=argument,
                command=match.group(1),
                line=line,
                blank_lines=blank_lines,
            )
    if first[:1] in (" ", "\t"):
        return Token(
            kind=TokenKind.VERBATIM,
            text="\n".join(row.rstrip() for row in lines),
            line=line,
            blank_lines=blank_lines,
        )
    return Token(
        kind=TokenKind.TEXT,
        text="\n".join(lines),
        line=line,
        blank_lines=blank_lines,
    )
