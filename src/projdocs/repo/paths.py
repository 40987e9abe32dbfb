"""Path utilities for the output tree."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath


def to_posix(relative: str | os.PathLike[str]) -> str:
    """Normalize a relative path to forward-slash form."""
    return PurePosixPath(*Path(relative).parts).as_posix()


def safe_join(root: Path, relative: str) -> Path:
    """
    Join a relative path onto root without escaping it.

    Args:
        root: Absolute directory the result must stay inside.
        relative: Library-relative path in POSIX form.

    Returns:
        The joined, normalized path.

    Raises:
        ValueError: If relative is absolute, contains ".." segments, or
            resolves outside root.
    """
    if not relative or relative.startswith("/") or Path(relative).is_absolute():
        raise ValueError(f"Invalid relative path: {relative!r}")

    parts = PurePosixPath(relative).parts
    if ".." in parts:
        raise ValueError(f"Relative path escapes output root: {relative!r}")

    joined = Path(os.path.normpath(root.joinpath(*parts)))
    normalized_root = Path(os.path.normpath(root))
    if joined != normalized_root and normalized_root not in joined.parents:
        raise ValueError(f"Relative path escapes output root: {relative!r}")
    return joined


def relative_url(target: Path, current: Path) -> str:
    """
    URL of target as seen from the page at current.

    Both arguments are absolute file paths; the result is computed purely from
    them, so it is valid wherever the output tree is later served from.

    Args:
        target: Absolute path of the linked file.
        current: Absolute path of the page containing the link.

    Returns:
        Relative URL using forward slashes, e.g. "../Foo/Bar.pm.html".
    """
    relative = os.path.relpath(target, current.parent)
    return relative.replace(os.sep, "/")
