"""Shared pytest fixtures for all tests.

These fixtures build small source trees on disk so that discovery,
rendering and publishing run against real files.
"""

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from projdocs.config import Config


ALPHA_PM = """\
package My::Alpha;

=head1 NAME

My::Alpha - first module

=head1 DESCRIPTION

Uses L<My::Beta> and C<My::Missing>.

=head2 new

Constructor.

=cut

1;
"""

BETA_PM = """\
package My::Beta;

=head1 NAME

My::Beta - second module

=head1 DESCRIPTION

See L<My::Alpha/DESCRIPTION>.

=cut

1;
"""

GUIDE_POD = """\
=head1 NAME

guide - the manual

=head1 Topic

First.

=head1 Topic

Second.
"""

RUN_PL = """\
#!/usr/bin/perl

=head1 NAME

run - trigger script

=cut

print "hi\\n";
"""


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Return a factory writing {relative path: content} under tmp_path/lib."""

    def factory(files: dict[str, str], root_name: str = "lib") -> Path:
        root = tmp_path / root_name
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content), encoding="utf-8")
        return root

    return factory


@pytest.fixture
def sample_lib(make_tree) -> Path:
    """A library root with two linked modules, a manual and a script."""
    return make_tree(
        {
            "My/Alpha.pm": ALPHA_PM,
            "My/Beta.pm": BETA_PM,
            "guide.pod": GUIDE_POD,
            "bin/run.pl": RUN_PL,
        }
    )


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def config(sample_lib: Path, output_root: Path) -> Config:
    """Config building sample_lib into output_root."""
    return Config.create(
        outroot=output_root,
        libroot=sample_lib,
        title="Sample",
        description="Sample project",
    )
