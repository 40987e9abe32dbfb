"""Tests for output root initialization."""

from pathlib import Path

import pytest
from hypothesis import given, settings, strategies as st

from projdocs.config import Config
from projdocs.documents.document import PublishError
from projdocs.workspace import initialize_output_root


class TestInitializeOutputRoot:
    """The output root exists after initialization or the build stops."""

    @given(
        subdir_name=st.text(
            alphabet="abcdefghijklmnopqrstuvwxyz0123456789_-", min_size=1, max_size=20
        ).filter(lambda x: not x.startswith("-"))
    )
    @settings(max_examples=25, deadline=None)
    def test_creates_nested_directories(self, tmp_path_factory, subdir_name: str):
        """For any plain name, the directory and its parents are created."""
        base = tmp_path_factory.mktemp("ws")
        config = Config.create(outroot=base / subdir_name / "docs", libroot=base)

        initialize_output_root(config)

        assert (base / subdir_name / "docs").is_dir()

    def test_existing_directory_is_kept(self, tmp_path: Path):
        (tmp_path / "out").mkdir()
        (tmp_path / "out" / "keep.html").write_text("x")
        config = Config.create(outroot=tmp_path / "out", libroot=tmp_path)

        initialize_output_root(config)

        assert (tmp_path / "out" / "keep.html").read_text() == "x"

    def test_file_in_the_way(self, tmp_path: Path):
        (tmp_path / "out").write_text("")
        config = Config.create(outroot=tmp_path / "out", libroot=tmp_path)

        with pytest.raises(PublishError):
            initialize_output_root(config)
