"""projdocs: cross-linked HTML documentation for POD-documented source trees."""

from projdocs.config import Config, ConfigError, ProjDocsError, load_config
from projdocs.documents import (
    Document,
    DocumentKind,
    DocumentSet,
    PublishError,
    SuffixGroup,
)
from projdocs.generation.orchestrator import GenerationResult, ProjectDocs

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigError",
    "ProjDocsError",
    "PublishError",
    "load_config",
    "Document",
    "DocumentKind",
    "DocumentSet",
    "SuffixGroup",
    "GenerationResult",
    "ProjectDocs",
]
