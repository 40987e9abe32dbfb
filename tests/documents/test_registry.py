"""Suffix group and registry tests."""

from projdocs.documents.models import DocumentKind, SuffixGroup
from projdocs.documents.registry import GroupRegistry


class TestSuffixGroup:
    """Normalization and kind-dependent defaults."""

    def test_single_suffix_string_becomes_tuple(self):
        group = SuffixGroup("Modules", ".pm")

        assert group.suffixes == ("pm",)

    def test_module_groups_provide_references(self):
        """Only module groups are linkable by default."""
        assert SuffixGroup("Modules", ("pm",)).provides_references is True
        assert SuffixGroup("Manuals", ("pod",), kind=DocumentKind.MANUAL).provides_references is False

    def test_binary_groups_do_not_expose_source(self):
        """Binary files are published as-is, so there is no separate source copy."""
        binary = SuffixGroup("Images", ("png",), kind=DocumentKind.BINARY)

        assert binary.is_binary
        assert binary.expose_source is False
        assert SuffixGroup("Scripts", ("pl",), kind=DocumentKind.SCRIPT).expose_source is True

    def test_explicit_options_win(self):
        group = SuffixGroup("Manuals", ("pod",), kind=DocumentKind.MANUAL, provides_references=True)

        assert group.provides_references is True


class TestGroupRegistry:
    """Suffix ownership across groups."""

    def test_first_registered_group_wins(self):
        """When two groups declare a suffix, the earlier one owns it."""
        registry = GroupRegistry()
        first = registry.register(SuffixGroup("Scripts", ("pl", "cgi")))
        registry.register(SuffixGroup("Perl", ("pl", "pm")))

        assert registry.group_for_suffix("pl") is first
        assert registry.group_for("bin/run.pl") is first

    def test_later_group_keeps_unclaimed_suffixes(self):
        registry = GroupRegistry()
        registry.register(SuffixGroup("Scripts", ("pl",)))
        second = registry.register(SuffixGroup("Perl", ("pl", "pm")))

        assert registry.group_for("Foo/Bar.pm") is second

    def test_last_extension_decides(self):
        """Only the final extension is considered, case-sensitively."""
        registry = GroupRegistry()
        registry.register(SuffixGroup("Modules", ("pm",)))

        assert registry.group_for("Foo/Bar.pm.bak") is None
        assert registry.group_for("Foo/Bar.PM") is None
        assert registry.group_for("Makefile") is None

    def test_clear(self):
        registry = GroupRegistry()
        registry.register(SuffixGroup("Modules", ("pm",)))

        registry.clear()

        assert registry.groups == []
        assert registry.group_for("Foo.pm") is None
