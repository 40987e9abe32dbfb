"""Command line entry point."""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Optional, Sequence

from projdocs.config import ConfigError, ProjDocsError, load_config
from projdocs.generation.orchestrator import ProjectDocs

# Log line layout used when running from the command line
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; every option has a short and a long form."""
    parser = argparse.ArgumentParser(
        prog="projdocs",
        description="Generate cross-linked HTML documentation from POD sources.",
    )
    parser.add_argument(
        "-out", "--outroot", dest="outroot", metavar="DIR",
        help="output directory (default: current directory)",
    )
    parser.add_argument(
        "-lib", "--libroot", dest="libroot", action="append", metavar="DIR",
        help="library root to scan; repeat for several",
    )
    parser.add_argument("-title", "--title", dest="title", help="project title")
    parser.add_argument("-desc", "--description", dest="description", help="project description")
    parser.add_argument("-lang", "--language", dest="language", help="page language (default: en)")
    parser.add_argument(
        "-forcegen", "--forcegen", dest="forcegen", action="store_true", default=None,
        help="regenerate every page even if its source is unchanged",
    )
    parser.add_argument(
        "-except", "--except", dest="exclude", action="append", metavar="REGEX",
        help="skip relative paths matching this regular expression; repeat for several",
    )
    parser.add_argument(
        "-config", "--config", dest="config", type=Path, metavar="FILE",
        help="INI file with [project] and [paths] sections",
    )
    parser.add_argument(
        "-verbose", "--verbose", dest="verbose", action="store_true",
        help="log debug messages",
    )
    return parser


def _compile_excludes(patterns: Optional[list[str]]) -> Optional[list[re.Pattern[str]]]:
    if not patterns:
        return None
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError(f"Invalid -except pattern {pattern!r}: {e}") from e
    return compiled


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a documentation build.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:].

    Returns:
        0 on success, 1 if the build stopped on an error.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        config = load_config(
            args.config,
            outroot=args.outroot,
            libroot=args.libroot,
            exclude=_compile_excludes(args.exclude),
            forcegen=args.forcegen,
            title=args.title,
            description=args.description,
            language=args.language,
        )
        result = ProjectDocs(config).gen()
    except ProjDocsError as e:
        logger.error(str(e))
        return 1

    logger.info(
        f"Done: {len(result.published)} published, {len(result.skipped)} unchanged "
        f"in {config.output_root}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
