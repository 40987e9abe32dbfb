"""Data models for documents and the groups they belong to."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DocumentKind(Enum):
    """Kinds of source documents."""

    MODULE = "module"
    MANUAL = "manual"
    SCRIPT = "script"
    BINARY = "binary"  # Copied verbatim, never parsed


@dataclass(frozen=True)
class SuffixGroup:
    """A named class of source files sharing suffixes and rendering options.

    Attributes:
        description: Human-readable group name, e.g. "Perl Modules".
        suffixes: File extensions without the leading dot; matched exactly.
        kind: Document kind of every file in the group.
        provides_references: Whether documents are linkable targets for
            module references. Defaults to True for modules only.
        expose_source: Whether raw sources are mirrored under src/.
            Defaults to False for binary groups.
        definition_pattern: Optional regex used to build the per-page index
            of definitions (methods, functions).
    """

    description: str
    suffixes: tuple[str, ...]
    kind: DocumentKind = DocumentKind.MODULE
    provides_references: Optional[bool] = None
    expose_source: Optional[bool] = None
    definition_pattern: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        """Normalize suffixes and fill kind-dependent defaults."""
        suffixes = (self.suffixes,) if isinstance(self.suffixes, str) else self.suffixes
        object.__setattr__(self, "suffixes", tuple(s.lstrip(".") for s in suffixes))
        if self.provides_references is None:
            object.__setattr__(self, "provides_references", self.kind is DocumentKind.MODULE)
        if self.expose_source is None:
            object.__setattr__(self, "expose_source", self.kind is not DocumentKind.BINARY)

    @property
    def is_binary(self) -> bool:
        return self.kind is DocumentKind.BINARY
