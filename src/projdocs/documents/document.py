"""Source documents: metadata, staleness and publishing.

A Document knows where its source lives, where its rendered page goes and
whether that page is out of date. It never parses anything itself; the
orchestrator hands its text to the group's parser and the resulting HTML
back to publish().
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from projdocs.config import Config, ProjDocsError
from projdocs.constants import HTML_SUFFIX, MODULE_SEPARATOR
from projdocs.documents.models import DocumentKind, SuffixGroup
from projdocs.repo.paths import safe_join, to_posix

logger = logging.getLogger(__name__)


class PublishError(ProjDocsError):
    """Raised when an output file or directory cannot be written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


def write_file(path: Path, data: bytes) -> None:
    """Write data to path, truncating existing content.

    Creates parent directories as needed. Not crash-atomic: an interrupted
    write leaves a partial file behind.

    Raises:
        PublishError: If the directory or the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise PublishError(path, e.strerror or str(e)) from e


def write_if_changed(path: Path, data: bytes) -> bool:
    """Write data unless path already holds exactly these bytes.

    Returns:
        True if the file was written.
    """
    try:
        if path.is_file() and path.read_bytes() == data:
            return False
    except OSError:
        pass
    write_file(path, data)
    return True


@dataclass
class Document:
    """A source file discovered under a library root.

    Attributes:
        config: Build configuration.
        group: Suffix group the file belongs to.
        library_root: Absolute library root the file was found under.
        source_path: Absolute path of the source file.
        relative_path: Path relative to library_root, POSIX form, suffix kept.
        title: Page title; set while rendering or restored from an existing page.
    """

    config: Config
    group: SuffixGroup
    library_root: Path
    source_path: Path
    relative_path: str
    title: Optional[str] = None

    @property
    def kind(self) -> DocumentKind:
        return self.group.kind

    @property
    def name(self) -> str:
        """Module name: relative path without suffix, "/" replaced by "::"."""
        stem = PurePosixPath(self.relative_path)
        return MODULE_SEPARATOR.join(stem.with_suffix("").parts)

    @property
    def display_title(self) -> str:
        return self.title or self.name

    @property
    def output_path(self) -> Path:
        """Absolute path of the rendered page inside the output root."""
        return safe_join(self.config.output_root, self.relative_path + HTML_SUFFIX)

    @property
    def output_relative_path(self) -> str:
        """Output path relative to the output root, POSIX form."""
        return to_posix(self.output_path.relative_to(self.config.output_root))

    @property
    def source_copy_path(self) -> Optional[Path]:
        """Where copy_source() mirrors the raw source, None if not exposed."""
        if not self.group.expose_source:
            return None
        return safe_join(self.config.source_root, self.relative_path)

    @property
    def source_mtime(self) -> int:
        """Source modification time in nanoseconds."""
        return self.source_path.stat().st_mtime_ns

    def read_source(self) -> bytes:
        return self.source_path.read_bytes()

    def is_stale(self) -> bool:
        """Check whether the rendered page needs to be (re)generated.

        True when regeneration is forced, when the page does not exist, or
        when the source is strictly newer than the page.
        """
        if self.config.force_regenerate:
            return True
        try:
            output_mtime = os.stat(self.output_path).st_mtime_ns
        except FileNotFoundError:
            return True
        return self.source_mtime > output_mtime

    def copy_source(self) -> Optional[Path]:
        """Mirror the raw source under the output's src/ tree.

        Returns:
            The written path, or None if the group does not expose sources.
        """
        target = self.source_copy_path
        if target is None:
            return None
        write_file(target, self.read_source())
        return target

    def publish(self, data: Union[bytes, str]) -> Path:
        """Write the rendered page, replacing any previous content.

        Args:
            data: Page content; str is encoded as UTF-8.

        Returns:
            The output path.

        Raises:
            PublishError: If the page cannot be written.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        path = self.output_path
        write_file(path, data)
        logger.info(f"Published {self.output_relative_path}")
        return path


@dataclass
class BinaryDocument(Document):
    """A binary-like file that is copied into the output tree unchanged."""

    @property
    def name(self) -> str:
        return self.relative_path

    @property
    def output_path(self) -> Path:
        return safe_join(self.config.output_root, self.relative_path)

    def copy_source(self) -> Optional[Path]:
        # The published file already is the source
        return None

    def publish(self, data: Union[bytes, str, None] = None) -> Path:
        """Copy the source bytes to the output path (data overrides them)."""
        if data is None:
            data = self.read_source()
        return super().publish(data)


def create_document(
    config: Config,
    group: SuffixGroup,
    library_root: Path,
    source_path: Path,
    relative_path: str,
) -> Document:
    """Build the Document implementation matching the group's kind."""
    document_class = BinaryDocument if group.is_binary else Document
    return document_class(
        config=config,
        group=group,
        library_root=library_root,
        source_path=source_path,
        relative_path=relative_path,
    )
