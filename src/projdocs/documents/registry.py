"""Registry deciding which group owns a file suffix."""

from pathlib import PurePath
from typing import Optional

from projdocs.documents.models import SuffixGroup


class GroupRegistry:
    """Ordered registry of suffix groups.

    Groups are consulted in registration order, so when two groups declare
    the same suffix the earlier one owns it and the later one never sees
    those files.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._groups: list[SuffixGroup] = []

    def register(self, group: SuffixGroup) -> SuffixGroup:
        """Append a group; returns it for chaining."""
        self._groups.append(group)
        return group

    def clear(self) -> None:
        self._groups.clear()

    @property
    def groups(self) -> list[SuffixGroup]:
        return list(self._groups)

    def group_for_suffix(self, suffix: str) -> Optional[SuffixGroup]:
        """Get the group owning a suffix.

        Args:
            suffix: Extension without the leading dot; case-sensitive.

        Returns:
            The first registered group declaring the suffix, or None.
        """
        for group in self._groups:
            if suffix in group.suffixes:
                return group
        return None

    def group_for(self, path: str | PurePath) -> Optional[SuffixGroup]:
        """Get the group owning a file path, by its last extension."""
        suffix = PurePath(path).suffix
        if not suffix:
            return None
        return self.group_for_suffix(suffix[1:])
