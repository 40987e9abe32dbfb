"""Anchor generation for headings and definition terms."""

import re

from projdocs.constants import EMPTY_ANCHOR

_NON_ALNUM_RE = re.compile(r"[^0-9a-z]+")


def slugify(text: str) -> str:
    """Derive an anchor slug from plain text.

    Lower-cases the text, collapses every run of non-alphanumeric characters
    into a single "-" and trims separators from both ends.

    Args:
        text: Plain heading text (formatting codes already removed).

    Returns:
        The slug, or "section" if nothing alphanumeric remains.
    """
    slug = _NON_ALNUM_RE.sub("-", text.lower()).strip("-")
    return slug or EMPTY_ANCHOR


class AnchorRegistry:
    """Hands out anchors that are unique within one document.

    The first use of a slug gets it unchanged; later uses get "-2", "-3", ...
    in the order they are requested. A suffixed candidate that is already
    taken (e.g. by a heading literally titled "Topic 2") is skipped.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._used: set[str] = set()
        self._next_suffix: dict[str, int] = {}

    def __contains__(self, anchor: str) -> bool:
        return anchor in self._used

    def allocate(self, text: str) -> str:
        """Allocate a unique anchor for text.

        Args:
            text: Plain text to derive the anchor from.

        Returns:
            A slug not handed out before by this registry.
        """
        base = slugify(text)
        anchor = base
        if anchor in self._used:
            suffix = self._next_suffix.get(base, 2)
            while f"{base}-{suffix}" in self._used:
                suffix += 1
            anchor = f"{base}-{suffix}"
            self._next_suffix[base] = suffix + 1
        self._used.add(anchor)
        return anchor
