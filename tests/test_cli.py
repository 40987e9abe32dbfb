"""Command line tests."""

import logging
from pathlib import Path

import pytest

from projdocs.cli import build_parser, main


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("PROJDOCS_OUTROOT", "PROJDOCS_LIBROOT", "PROJDOCS_FORCEGEN"):
        monkeypatch.delenv(name, raising=False)


def test_short_and_long_options_agree():
    parser = build_parser()

    short = parser.parse_args(["-out", "o", "-lib", "a", "-lib", "b", "-forcegen", "-except", "x"])
    long = parser.parse_args(
        ["--outroot", "o", "--libroot", "a", "--libroot", "b", "--forcegen", "--except", "x"]
    )

    assert vars(short) == vars(long)
    assert short.libroot == ["a", "b"]
    assert short.forcegen is True


def test_forcegen_defaults_to_unset():
    """Without the flag, the config file and environment decide."""
    assert build_parser().parse_args([]).forcegen is None


def test_build_succeeds(sample_lib: Path, output_root: Path):
    status = main(["-out", str(output_root), "-lib", str(sample_lib), "-title", "CLI Title"])

    assert status == 0
    assert "<title>CLI Title</title>" in (output_root / "index.html").read_text()
    assert (output_root / "My" / "Alpha.pm.html").is_file()


def test_except_is_a_regex(sample_lib: Path, output_root: Path):
    status = main(["-out", str(output_root), "-lib", str(sample_lib), "-except", r"Be.a\.pm$"])

    assert status == 0
    assert (output_root / "My" / "Alpha.pm.html").is_file()
    assert not (output_root / "My" / "Beta.pm.html").exists()


def test_config_file(sample_lib: Path, output_root: Path, tmp_path: Path):
    config_path = tmp_path / "projdocs.ini"
    config_path.write_text(
        f"[project]\ntitle = From File\n[paths]\noutroot = {output_root}\nlibroot = {sample_lib}\n"
    )

    assert main(["-config", str(config_path)]) == 0
    assert "<title>From File</title>" in (output_root / "index.html").read_text()


def test_missing_library_root_fails(tmp_path: Path, output_root: Path, caplog):
    """A fatal error exits with 1, names the path and writes nothing."""
    missing = tmp_path / "nowhere"

    with caplog.at_level(logging.ERROR):
        status = main(["-out", str(output_root), "-lib", str(missing)])

    assert status == 1
    assert str(missing) in caplog.text
    assert not output_root.exists()


def test_invalid_except_pattern_fails(sample_lib: Path, output_root: Path):
    assert main(["-out", str(output_root), "-lib", str(sample_lib), "-except", "("]) == 1
    assert not output_root.exists()
