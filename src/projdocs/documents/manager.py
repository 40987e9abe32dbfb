"""Discovery of the documents belonging to one suffix group."""

import logging
from pathlib import PurePosixPath
from typing import Iterator, Optional

from projdocs.config import Config, ConfigError
from projdocs.documents.document import Document, create_document
from projdocs.documents.models import SuffixGroup
from projdocs.documents.registry import GroupRegistry
from projdocs.parsing.parser import Parser
from projdocs.repo.file_filter import FileFilter, walk_files

logger = logging.getLogger(__name__)


class DocumentSet:
    """The documents of one suffix group across all library roots.

    Discovery walks the library roots once, on first access, and caches the
    result; iterating the set again replays the same documents in the same
    order without touching the filesystem.

    Attributes:
        config: Build configuration.
        group: The suffix group this set collects.
        parser: Parser shared by every document of the group.
    """

    def __init__(
        self,
        config: Config,
        group: SuffixGroup,
        registry: Optional[GroupRegistry] = None,
        parser: Optional[Parser] = None,
    ):
        """Initialize the set.

        Args:
            config: Build configuration (library roots, exclusions).
            group: Suffix group to collect.
            registry: Registry used to resolve suffix ownership; a file is only
                collected if the registry assigns it to this group. If None,
                the group owns all of its suffixes.
            parser: Parser for the group. If None, one is built from the
                group's options.
        """
        self.config = config
        self.group = group
        self.registry = registry
        self.parser = parser or Parser(config, definition_pattern=group.definition_pattern)
        self._file_filter = FileFilter(config.exclude_patterns)
        self._docs: Optional[list[Document]] = None

    @property
    def description(self) -> str:
        return self.group.description

    @property
    def docs(self) -> list[Document]:
        """All documents of the group, discovered on first access."""
        if self._docs is None:
            self._docs = self._discover()
        return self._docs

    def __iter__(self) -> Iterator[Document]:
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)

    def owns(self, relative_path: str) -> bool:
        """Check whether a library-relative path belongs to this group."""
        if self.registry is not None:
            return self.registry.group_for(relative_path) is self.group
        suffix = PurePosixPath(relative_path).suffix[1:]
        return bool(suffix) and suffix in self.group.suffixes

    def _discover(self) -> list[Document]:
        """Walk every library root and build the group's documents.

        Raises:
            ConfigError: If a library root has disappeared since the
                configuration was resolved.
        """
        docs: list[Document] = []
        for root in self.config.library_roots:
            if not root.is_dir():
                raise ConfigError(f"Library root does not exist or is not a directory: {root}")
            for entry in walk_files(root, self._file_filter):
                if not self.owns(entry.relative):
                    continue
                docs.append(
                    create_document(
                        self.config,
                        self.group,
                        library_root=root,
                        source_path=entry.path,
                        relative_path=entry.relative,
                    )
                )
        logger.debug(f"Discovered {len(docs)} documents for {self.description}")
        return docs
