"""Utilities for building and parsing the metadata block of rendered pages.

Every rendered page carries a YAML metadata block inside its first HTML
comment:

    <!--projdocs
    "name": "Foo::Bar"
    "title": "Foo::Bar - does things"
    "source": "Foo/Bar.pm"
    "group": "Perl Modules"
    -->

Pages that are up to date are not re-rendered, so this is how a build
recovers their title for the index without parsing the source again.
"""

from pathlib import Path
from typing import Any, Optional

import yaml

from projdocs.constants import METADATA_MARKER, METADATA_SCAN_BYTES

_OPEN = f"<!--{METADATA_MARKER}\n"
_CLOSE = "\n-->"


def build_page_metadata(metadata: dict[str, Any]) -> str:
    """Build the metadata comment for a page.

    Args:
        metadata: Flat mapping of string keys to scalar values; key order
            is preserved.

    Returns:
        Comment string starting with "<!--projdocs" and ending with "-->"
        followed by a newline.
    """
    # Double-quoted scalars so "--" can be escaped, which an HTML comment
    # must not contain
    body = yaml.safe_dump(
        metadata,
        default_style='"',
        allow_unicode=True,
        sort_keys=False,
        width=10_000,
    ).rstrip("\n")
    body = body.replace("--", "-\\x2D")
    return _OPEN + body + _CLOSE + "\n"


def parse_page_metadata(content: str) -> tuple[dict | None, str]:
    """Parse the metadata comment from page content.

    The comment may be preceded by a doctype line.

    Args:
        content: Page content, or its beginning.

    Returns:
        Tuple of (metadata_dict, remaining_content).
        If no valid metadata is found, returns (None, original_content).
    """
    start = content.find(_OPEN)
    if start == -1 or content[:start].strip() not in ("", "<!DOCTYPE html>"):
        return None, content

    body_start = start + len(_OPEN)
    end = content.find(_CLOSE, body_start)
    if end == -1:
        return None, content

    try:
        metadata = yaml.safe_load(content[body_start:end])
    except yaml.YAMLError:
        return None, content
    if not isinstance(metadata, dict):
        return None, content

    remaining_start = end + len(_CLOSE)
    if remaining_start < len(content) and content[remaining_start] == "\n":
        remaining_start += 1
    return metadata, content[remaining_start:]


def read_page_metadata(path: Path) -> Optional[dict]:
    """Read the metadata of an existing page.

    Only the beginning of the file is read.

    Returns:
        The metadata dict, or None if the page is missing, unreadable or
        has no valid metadata block.
    """
    try:
        with open(path, "rb") as f:
            head = f.read(METADATA_SCAN_BYTES)
    except OSError:
        return None
    metadata, _ = parse_page_metadata(head.decode("utf-8", errors="replace"))
    return metadata
