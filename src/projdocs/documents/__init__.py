"""Source documents, suffix groups and discovery."""

from projdocs.documents.models import DocumentKind, SuffixGroup
from projdocs.documents.registry import GroupRegistry
from projdocs.documents.document import (
    BinaryDocument,
    Document,
    PublishError,
    create_document,
    write_file,
    write_if_changed,
)
from projdocs.documents.manager import DocumentSet

__all__ = [
    "DocumentKind",
    "SuffixGroup",
    "GroupRegistry",
    "Document",
    "BinaryDocument",
    "PublishError",
    "create_document",
    "write_file",
    "write_if_changed",
    "DocumentSet",
]
