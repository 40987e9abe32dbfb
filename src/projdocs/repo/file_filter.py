"""File filtering with exclusion patterns and a deterministic tree walk."""

import fnmatch
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Pattern, Union

from projdocs.repo.paths import to_posix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkEntry:
    """A readable file found under a library root."""

    path: Path
    relative: str  # POSIX form, relative to the library root


class FileFilter:
    """Decide which library-relative paths are excluded from the build."""

    def __init__(self, patterns: Iterable[Union[str, Pattern[str]]] = ()):
        """Initialize file filter.

        Args:
            patterns: Exclusion patterns. Strings are glob patterns matched
                against path components or, when they contain "/", against
                the path itself. Compiled regular expressions are searched
                anywhere in the relative path.
        """
        self.globs: list[str] = []
        self.regexes: list[Pattern[str]] = []
        for pattern in patterns:
            if isinstance(pattern, re.Pattern):
                self.regexes.append(pattern)
            else:
                self.globs.append(str(pattern))

    def __bool__(self) -> bool:
        return bool(self.globs or self.regexes)

    def is_excluded(self, path: str) -> bool:
        """Check if path matches any exclude pattern.

        Args:
            path: Relative file path in POSIX form.

        Returns:
            True if path should be excluded.
        """
        for regex in self.regexes:
            if regex.search(path):
                return True

        parts = path.split("/")

        for pattern in self.globs:
            # Trailing slash means directory: "t/" matches any path under a "t" dir
            if pattern.endswith("/"):
                dir_pattern = pattern.rstrip("/")
                for part in parts[:-1]:
                    if fnmatch.fnmatchcase(part, dir_pattern):
                        return True
            # Patterns containing "/" match as path prefixes or full-path globs
            elif "/" in pattern:
                if path.startswith(pattern + "/") or path == pattern:
                    return True
                if fnmatch.fnmatchcase(path, pattern) or fnmatch.fnmatchcase(
                    path, pattern + "/*"
                ):
                    return True
            else:
                for part in parts:
                    if fnmatch.fnmatchcase(part, pattern):
                        return True

        return False


def walk_files(root: Path, file_filter: Optional[FileFilter] = None) -> Iterator[WalkEntry]:
    """Walk root depth-first, yielding readable files in a stable order.

    Entries of each directory are visited in lexicographic order of their
    names. Excluded directories are not descended into. Symbolic-link cycles,
    unreadable directories and unreadable files are skipped with a warning.

    Args:
        root: Absolute library root.
        file_filter: Optional exclusion filter.

    Yields:
        WalkEntry for every file that passed the filter.
    """
    visited: set[tuple[int, int]] = set()
    yield from _walk(root, root, file_filter, visited)


def _walk(
    root: Path,
    directory: Path,
    file_filter: Optional[FileFilter],
    visited: set[tuple[int, int]],
) -> Iterator[WalkEntry]:
    try:
        stat = directory.stat()
    except OSError as e:
        logger.warning(f"Skipping unreadable directory {directory}: {e}")
        return

    key = (stat.st_dev, stat.st_ino)
    if key in visited:
        logger.warning(f"Skipping already visited directory (symlink cycle?): {directory}")
        return
    visited.add(key)

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logger.warning(f"Skipping unreadable directory {directory}: {e}")
        return

    for entry in entries:
        path = Path(entry.path)
        relative = to_posix(path.relative_to(root))

        if file_filter and file_filter.is_excluded(relative):
            continue

        try:
            is_dir = entry.is_dir()
            is_file = not is_dir and entry.is_file()
        except OSError as e:
            logger.warning(f"Skipping unreadable entry {path}: {e}")
            continue

        if is_dir:
            if file_filter and file_filter.is_excluded(relative + "/"):
                continue
            yield from _walk(root, path, file_filter, visited)
        elif is_file:
            if not os.access(path, os.R_OK):
                logger.warning(f"Skipping unreadable file {path}")
                continue
            yield WalkEntry(path=path, relative=relative)
