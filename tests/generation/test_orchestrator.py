"""Tests for the two-phase build."""

import os
import re
import shutil
from pathlib import Path
from types import MappingProxyType

import pytest

from projdocs.config import Config, ConfigError
from projdocs.documents.document import PublishError
from projdocs.documents.models import DocumentKind, SuffixGroup
from projdocs.generation.index import navigation_json
from projdocs.generation.orchestrator import ProjectDocs, default_groups


def snapshot(root: Path) -> dict[str, tuple[bytes, int]]:
    """Map every file under root to its content and mtime."""
    return {
        path.relative_to(root).as_posix(): (path.read_bytes(), path.stat().st_mtime_ns)
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def page(output_root: Path, relative: str) -> str:
    return (output_root / relative).read_text(encoding="utf-8")


# =============================================================================
# Setup
# =============================================================================


def test_default_groups_order():
    """Manuals, then modules, then scripts."""
    groups = default_groups()

    assert [g.description for g in groups] == ["Perl Manuals", "Perl Modules", "Trigger Scripts"]
    assert groups[2].suffixes == ("cgi", "pl")
    assert groups[1].definition_pattern is not None
    assert [g.provides_references for g in groups] == [False, True, False]


def test_first_build_publishes_everything(config: Config, output_root: Path):
    result = ProjectDocs(config).gen()

    assert [doc.name for doc in result.published] == ["guide", "My::Alpha", "My::Beta", "bin::run"]
    assert result.skipped == []
    assert result.index_written
    for relative in (
        "guide.pod.html",
        "My/Alpha.pm.html",
        "My/Beta.pm.html",
        "bin/run.pl.html",
        "src/My/Alpha.pm",
        "index.html",
        "podstyle.css",
        "up.svg",
    ):
        assert (output_root / relative).is_file(), relative


def test_reference_map_is_read_only(config: Config, output_root: Path):
    """Only module groups contribute, and the map cannot be modified."""
    references = ProjectDocs(config).collect_references()

    assert isinstance(references, MappingProxyType)
    assert dict(references) == {
        "My::Alpha": output_root / "My" / "Alpha.pm.html",
        "My::Beta": output_root / "My" / "Beta.pm.html",
    }
    with pytest.raises(TypeError):
        references["Other"] = output_root  # type: ignore[index]


# =============================================================================
# Incremental Builds
# =============================================================================


def test_rebuild_is_idempotent(config: Config, output_root: Path):
    """A second run with unchanged sources writes nothing."""
    first = ProjectDocs(config).gen()
    before = snapshot(output_root)

    second = ProjectDocs(config).gen()

    assert second.published == []
    assert len(second.skipped) == 4
    assert not second.index_written
    assert snapshot(output_root) == before
    assert navigation_json(second.navigation) == navigation_json(first.navigation)


def test_skipped_pages_keep_their_titles(config: Config):
    ProjectDocs(config).gen()

    result = ProjectDocs(config).gen()

    titles = {doc.name: doc.title for doc in result.skipped}
    assert titles["My::Alpha"] == "My::Alpha - first module"
    assert titles["guide"] == "guide - the manual"


def test_title_recovered_without_metadata(config: Config, output_root: Path):
    """A page lacking the metadata block falls back to a title-only parse."""
    ProjectDocs(config).gen()
    alpha_page = output_root / "My" / "Alpha.pm.html"
    stat = alpha_page.stat()
    alpha_page.write_text("<html></html>")
    os.utime(alpha_page, ns=(stat.st_atime_ns, stat.st_mtime_ns))

    result = ProjectDocs(config).gen()

    alpha = next(doc for doc in result.skipped if doc.name == "My::Alpha")
    assert alpha.title == "My::Alpha - first module"


def test_newer_source_is_regenerated(config: Config, sample_lib: Path, output_root: Path):
    ProjectDocs(config).gen()
    output_ns = (output_root / "My" / "Beta.pm.html").stat().st_mtime_ns
    later = output_ns + 10_000_000_000
    os.utime(sample_lib / "My" / "Beta.pm", ns=(later, later))

    result = ProjectDocs(config).gen()

    assert [doc.name for doc in result.published] == ["My::Beta"]


def test_forced_regeneration(sample_lib: Path, output_root: Path):
    ProjectDocs(Config.create(outroot=output_root, libroot=sample_lib)).gen()

    forced = Config.create(outroot=output_root, libroot=sample_lib, forcegen=True)
    result = ProjectDocs(forced).gen()

    assert len(result.published) == 4
    assert result.skipped == []


# =============================================================================
# Content
# =============================================================================


def test_cross_references_resolve(config: Config, output_root: Path):
    """Links work in both discovery directions; unknown modules stay code."""
    ProjectDocs(config).gen()

    alpha = page(output_root, "My/Alpha.pm.html")
    beta = page(output_root, "My/Beta.pm.html")

    assert '<a href="Beta.pm.html">My::Beta</a>' in alpha
    assert "<code>My::Missing</code>" in alpha
    assert 'href="My::Missing' not in alpha
    assert '<a href="Alpha.pm.html#description">&quot;DESCRIPTION&quot; in My::Alpha</a>' in beta


def test_manual_links_to_module(make_tree, output_root: Path):
    """Manuals render before modules but still see every module."""
    lib = make_tree(
        {
            "intro.pod": "=head1 Intro\n\nStart with L<Deep::Mod>.\n",
            "Deep/Mod.pm": "=head1 NAME\n\nDeep::Mod - x\n",
        }
    )
    config = Config.create(outroot=output_root, libroot=lib)

    ProjectDocs(config).gen()

    assert '<a href="Deep/Mod.pm.html">Deep::Mod</a>' in page(output_root, "intro.pod.html")


def test_top_level_modules_link_by_bare_name(make_tree, output_root: Path):
    """Single-word module names link from running text."""
    lib = make_tree(
        {
            "Alpha.pm": "=head1 NAME\n\nAlpha - x\n\n=head1 DESCRIPTION\n\nSee Beta for more.\n",
            "Beta.pm": "=head1 NAME\n\nBeta - y\n",
        }
    )
    config = Config.create(outroot=output_root, libroot=lib)

    ProjectDocs(config).gen()

    alpha = page(output_root, "Alpha.pm.html")
    assert 'See <a href="Beta.pm.html">Beta</a> for more.' in alpha
    assert "<code>See</code>" not in alpha


def test_build_survives_odd_sources(make_tree, output_root: Path):
    """Non-text encodings and surrogate escapes do not abort the build."""
    lib = make_tree(
        {
            "Hex.pm": "=encoding hex\n\n=head1 NAME\n\nHex - x\n",
            "Odd.pm": "=head1 NAME\n\nOdd E<0xD800> y\n\n=head1 BODY\n\nE<55296>\n",
        }
    )
    config = Config.create(outroot=output_root, libroot=lib)

    result = ProjectDocs(config).gen()

    assert [doc.name for doc in result.published] == ["Hex", "Odd"]
    assert "Hex - x" in page(output_root, "Hex.pm.html")
    assert "Odd E&lt;0xD800&gt; y" in page(output_root, "Odd.pm.html")


def test_repeated_headings_get_unique_anchors(config: Config, output_root: Path):
    ProjectDocs(config).gen()

    guide = page(output_root, "guide.pod.html")

    assert '<h1 id="topic">' in guide
    assert '<h1 id="topic-2">' in guide
    assert '<a href="#topic-2">Topic</a>' in guide


def test_assets_linked_relative_to_page(config: Config, output_root: Path):
    ProjectDocs(config).gen()

    assert 'href="../podstyle.css"' in page(output_root, "bin/run.pl.html")
    assert 'href="podstyle.css"' in page(output_root, "guide.pod.html")


# =============================================================================
# Selection and Ordering
# =============================================================================


def test_excluded_files_are_absent(sample_lib: Path, output_root: Path):
    config = Config.create(
        outroot=output_root, libroot=sample_lib, exclude=["bin/", re.compile(r"Beta")]
    )

    result = ProjectDocs(config).gen()

    assert not (output_root / "bin").exists()
    assert not (output_root / "My" / "Beta.pm.html").exists()
    names = [r.name for g in result.navigation for r in g.records]
    assert names == ["guide", "My::Alpha"]
    assert "My::Beta" not in result.reference_map


def test_navigation_order_is_stable(config: Config, sample_lib: Path, tmp_path: Path):
    """Independent builds of the same tree produce the same navigation."""
    first = ProjectDocs(config).gen()
    other = Config.create(outroot=tmp_path / "other", libroot=sample_lib, title="Sample")
    second = ProjectDocs(other).gen()

    assert [g.description for g in first.navigation] == [
        "Perl Manuals",
        "Perl Modules",
        "Trigger Scripts",
    ]
    assert navigation_json(first.navigation) == navigation_json(second.navigation)


def test_group_precedence(config: Config, output_root: Path):
    """A suffix claimed by two groups belongs to the first only."""
    docs = ProjectDocs(
        config,
        groups=[
            SuffixGroup("Scripts", ("pl", "pm"), kind=DocumentKind.SCRIPT),
            SuffixGroup("Perl Modules", ("pm",)),
        ],
    )

    result = docs.gen()

    assert [g.description for g in result.navigation] == ["Scripts"]
    assert dict(result.reference_map) == {}
    assert "<code>My::Beta</code>" in page(output_root, "My/Alpha.pm.html")


def test_add_manager_binary_group(make_tree, output_root: Path):
    lib = make_tree({"img/logo.png": "PNGDATA"})
    config = Config.create(outroot=output_root, libroot=lib)
    docs = ProjectDocs(config, groups=[])

    docs.add_manager("Images", "png", kind=DocumentKind.BINARY)
    result = docs.gen()

    assert (output_root / "img" / "logo.png").read_text() == "PNGDATA"
    assert not (output_root / "src").exists()
    assert result.navigation[0].records[0].path == "img/logo.png"


def test_reset_managers(config: Config, output_root: Path):
    docs = ProjectDocs(config)
    docs.reset_managers()

    result = docs.gen()

    assert docs.managers == []
    assert result.published == []
    assert (output_root / "index.html").is_file()


# =============================================================================
# Errors
# =============================================================================


def test_output_root_blocked_by_file(sample_lib: Path, tmp_path: Path):
    blocker = tmp_path / "blocked"
    blocker.write_text("")
    config = Config.create(outroot=blocker, libroot=sample_lib)

    with pytest.raises(PublishError) as exc_info:
        ProjectDocs(config).gen()

    assert "blocked" in str(exc_info.value)


def test_vanished_library_root(config: Config, sample_lib: Path):
    shutil.rmtree(sample_lib)

    with pytest.raises(ConfigError):
        ProjectDocs(config).gen()
