"""Source tree discovery and output path utilities."""

from projdocs.repo.file_filter import FileFilter, WalkEntry, walk_files
from projdocs.repo.paths import relative_url, safe_join, to_posix

__all__ = [
    "FileFilter",
    "WalkEntry",
    "walk_files",
    "relative_url",
    "safe_join",
    "to_posix",
]
