# src/projdocs/generation/orchestrator.py
"""Build orchestrator for the documentation pipeline.

This module provides the ProjectDocs class that coordinates a build:

1. Setup - Create the output root and write the static assets
2. References - Walk every reference-providing group and map module names
   to output paths, without rendering anything
3. Render - Parse and publish every stale document, passing the complete
   reference map to the parser
4. Index - Aggregate navigation records and write the index page

Rendering starts only once the reference map is complete, so a module can
link to one discovered after it.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from projdocs.config import Config
from projdocs.constants import DEFAULT_GROUPS, MODULE_DEFINITION_PATTERN
from projdocs.documents.document import Document
from projdocs.documents.manager import DocumentSet
from projdocs.documents.models import DocumentKind, SuffixGroup
from projdocs.documents.registry import GroupRegistry
from projdocs.generation.assets import publish_assets
from projdocs.generation.frontmatter import read_page_metadata
from projdocs.generation.index import IndexAggregator, NavigationGroup, publish_index
from projdocs.workspace import initialize_output_root

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Result from running the build.

    Attributes:
        published: Documents whose pages were written in this run.
        skipped: Documents whose pages were up to date and left untouched.
        reference_map: Module name to output path, as used for rendering.
        navigation: Navigation groups handed to the index page.
        index_written: Whether index.html was (re)written.
    """

    published: list[Document] = field(default_factory=list)
    skipped: list[Document] = field(default_factory=list)
    reference_map: Mapping[str, Path] = field(default_factory=dict)
    navigation: list[NavigationGroup] = field(default_factory=list)
    index_written: bool = False


def default_groups() -> list[SuffixGroup]:
    """The standard groups: manuals, modules and scripts, in that order."""
    groups = []
    for description, suffixes, kind in DEFAULT_GROUPS:
        kind = DocumentKind(kind)
        groups.append(
            SuffixGroup(
                description=description,
                suffixes=suffixes,
                kind=kind,
                definition_pattern=(
                    MODULE_DEFINITION_PATTERN if kind is DocumentKind.MODULE else None
                ),
            )
        )
    return groups


class ProjectDocs:
    """Generates a documentation tree for a project.

    Attributes:
        config: Build configuration.
        registry: Suffix ownership across groups.
        managers: Document sets in registration order.
    """

    def __init__(self, config: Config, groups: Optional[Iterable[SuffixGroup]] = None):
        """Initialize the generator.

        Args:
            config: Build configuration.
            groups: Groups to register, in order. If None, the default
                manuals/modules/scripts groups are registered.
        """
        self.config = config
        self.registry = GroupRegistry()
        self.managers: list[DocumentSet] = []
        for group in default_groups() if groups is None else groups:
            self.add_group(group)

    def reset_managers(self) -> None:
        """Forget every registered group."""
        self.registry.clear()
        self.managers = []

    def add_group(self, group: SuffixGroup) -> DocumentSet:
        """Register a group; earlier groups keep suffixes they already own."""
        self.registry.register(group)
        manager = DocumentSet(self.config, group, registry=self.registry)
        self.managers.append(manager)
        return manager

    def add_manager(
        self,
        description: str,
        suffixes: str | Iterable[str],
        kind: DocumentKind = DocumentKind.MODULE,
        **options,
    ) -> DocumentSet:
        """Register a group from its parts.

        Args:
            description: Group description, e.g. "Perl Modules".
            suffixes: One suffix or several, without the leading dot.
            kind: Document kind.
            **options: Other SuffixGroup fields.
        """
        suffix_tuple = (suffixes,) if isinstance(suffixes, str) else tuple(suffixes)
        group = SuffixGroup(description=description, suffixes=suffix_tuple, kind=kind, **options)
        return self.add_group(group)

    def collect_references(self) -> Mapping[str, Path]:
        """Phase 1: map every linkable module name to its output path.

        Returns:
            Read-only mapping; nothing is parsed or written.
        """
        references: dict[str, Path] = {}
        for manager in self.managers:
            if not manager.group.provides_references:
                continue
            for doc in manager:
                references[doc.name] = doc.output_path
        logger.info(f"Collected {len(references)} module references")
        return MappingProxyType(references)

    def gen(self) -> GenerationResult:
        """Run the full build.

        Returns:
            GenerationResult describing what was written.

        Raises:
            ConfigError: If a library root is missing.
            PublishError: If the output root or an output file cannot be written.
        """
        initialize_output_root(self.config)
        publish_assets(self.config)

        result = GenerationResult(reference_map=self.collect_references())

        for manager in self.managers:
            for doc in manager:
                if doc.is_stale():
                    self._publish_document(manager, doc, result.reference_map)
                    result.published.append(doc)
                else:
                    self._restore_title(manager, doc)
                    result.skipped.append(doc)

        logger.info(
            f"Published {len(result.published)} pages, "
            f"{len(result.skipped)} up to date"
        )

        result.navigation = IndexAggregator(self.managers).collect()
        result.index_written = publish_index(self.config, result.navigation) is not None
        return result

    def _publish_document(
        self, manager: DocumentSet, doc: Document, reference_map: Mapping[str, Path]
    ) -> None:
        """Phase 2 for one stale document: copy source, render, publish."""
        if manager.group.is_binary:
            doc.title = doc.name
            doc.publish()
            return
        source_copy = doc.copy_source()
        html = manager.parser.render(
            doc,
            reference_map,
            description=manager.description,
            source_copy=source_copy,
        )
        doc.publish(html)

    def _restore_title(self, manager: DocumentSet, doc: Document) -> None:
        """Recover the title of an up-to-date page without re-rendering it."""
        if manager.group.is_binary:
            doc.title = doc.name
            return
        metadata = read_page_metadata(doc.output_path)
        title = metadata.get("title") if metadata else None
        if isinstance(title, str) and title:
            doc.title = title
            return
        logger.debug(f"No page metadata in {doc.output_relative_path}, re-reading title")
        manager.parser.extract_title(doc)
