"""Tests for page metadata utilities."""

from pathlib import Path

import pytest

from projdocs.generation.frontmatter import (
    build_page_metadata,
    parse_page_metadata,
    read_page_metadata,
)


class TestBuildPageMetadata:
    """Tests for build_page_metadata function."""

    def test_build_wraps_yaml_in_comment(self):
        """Metadata is a YAML block inside a marked HTML comment."""
        result = build_page_metadata({"name": "Foo::Bar", "title": "Foo::Bar - things"})

        assert result.startswith("<!--projdocs\n")
        assert result.endswith("-->\n")
        assert '"name": "Foo::Bar"' in result

    def test_key_order_is_preserved(self):
        result = build_page_metadata({"title": "t", "name": "n"})

        assert result.index('"title"') < result.index('"name"')

    def test_double_dash_never_appears_in_body(self):
        """An HTML comment body must not contain "--"."""
        result = build_page_metadata({"title": "a -- b --- c"})

        body = result[len("<!--projdocs\n") : -len("-->\n")]
        assert "--" not in body


class TestParsePageMetadata:
    """Tests for parse_page_metadata function."""

    @pytest.mark.parametrize(
        "title",
        ["plain", 'with "quotes" and \'apostrophes\'', "dash -- dash", "Ünïcödé ✓", "a: b # c"],
    )
    def test_round_trip(self, title: str):
        """Titles survive build then parse unchanged."""
        block = build_page_metadata({"title": title, "group": "Perl Modules"})

        metadata, rest = parse_page_metadata(block + "<html>")

        assert metadata == {"title": title, "group": "Perl Modules"}
        assert rest == "<html>"

    def test_doctype_may_precede(self):
        content = "<!DOCTYPE html>\n" + build_page_metadata({"title": "x"}) + "<html>"

        metadata, _ = parse_page_metadata(content)

        assert metadata == {"title": "x"}

    def test_no_metadata(self):
        content = "<!DOCTYPE html>\n<html></html>"

        assert parse_page_metadata(content) == (None, content)

    def test_comment_after_content_is_ignored(self):
        content = "<html>" + build_page_metadata({"title": "x"})

        assert parse_page_metadata(content) == (None, content)

    def test_unclosed_comment(self):
        content = "<!--projdocs\ntitle: x\n"

        assert parse_page_metadata(content) == (None, content)

    def test_invalid_yaml(self):
        content = "<!--projdocs\n[unbalanced\n-->\n<html>"

        assert parse_page_metadata(content) == (None, content)


class TestReadPageMetadata:
    """Tests for read_page_metadata function."""

    def test_reads_existing_page(self, tmp_path: Path):
        page = tmp_path / "page.html"
        page.write_text("<!DOCTYPE html>\n" + build_page_metadata({"title": "T"}) + "<html/>")

        assert read_page_metadata(page) == {"title": "T"}

    def test_missing_page(self, tmp_path: Path):
        assert read_page_metadata(tmp_path / "absent.html") is None
