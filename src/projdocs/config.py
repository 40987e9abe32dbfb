# src/projdocs/config.py
"""Configuration system for projdocs.

This module handles loading build settings from keyword arguments, INI files
and environment variables, providing sensible defaults, and resolving every
path to an absolute one before the build starts.
"""

from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Pattern, Union
import os
import re

from projdocs.constants import INDEX_PAGE_NAME, SOURCE_MIRROR_DIR


class ProjDocsError(Exception):
    """Base class for errors that stop a documentation build."""

    pass


class ConfigError(ProjDocsError):
    """Raised when configuration validation fails."""

    pass


# Schema: section -> key -> (type, default, description)
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, str]]] = {
    "project": {
        "title": (str, "", "Project name shown in every page header"),
        "description": (str, "", "Project description shown under the title"),
        "language": (str, "en", "Value of the xml:lang attribute"),
        "forcegen": (bool, False, "Regenerate pages even if sources are unchanged"),
    },
    "paths": {
        "outroot": (str, ".", "Output directory for generated documentation"),
        "libroot": (list, ["."], "Library roots to scan for source files"),
        "except": (list, [], "Glob patterns of relative paths to skip"),
    },
}

ExcludePattern = Union[str, Pattern[str]]


def _split_list(raw_value: str) -> list[str]:
    """Split a newline or comma separated INI value."""
    items = re.split(r"[\n,]", raw_value)
    return [item.strip() for item in items if item.strip()]


def _load_section(
    parser: ConfigParser, section: str, schema: dict[str, tuple[type, Any, str]]
) -> dict[str, Any]:
    """Load and validate a configuration section.

    Args:
        parser: ConfigParser instance with loaded config
        section: Section name to load
        schema: Schema definition for the section

    Returns:
        Dictionary of validated configuration values

    Raises:
        ConfigError: If validation fails
    """
    result = {}

    for key, (typ, default, _) in schema.items():
        if not parser.has_option(section, key):
            result[key] = default
            continue

        raw_value = parser.get(section, key)
        value: bool | str | list[str]
        if typ is bool:
            lowered = raw_value.strip().lower()
            if lowered in ("true", "1", "yes", "on"):
                value = True
            elif lowered in ("false", "0", "no", "off", ""):
                value = False
            else:
                raise ConfigError(
                    f"Invalid value for [{section}].{key}: {raw_value!r} (expected bool)"
                )
        elif typ is list:
            value = _split_list(raw_value)
        else:
            value = raw_value.strip()

        result[key] = value

    return result


def _parse_bool_env(name: str) -> Optional[bool]:
    """Read a boolean environment variable, None when unset."""
    raw_value = os.getenv(name)
    if raw_value is None or raw_value == "":
        return None
    return raw_value.strip().lower() in ("true", "1", "yes", "on")


@dataclass(frozen=True)
class Config:
    """Resolved, immutable build configuration.

    Build one with Config.create() (keyword arguments) or load_config()
    (INI file plus environment); both normalize paths to absolute ones and
    validate the library roots.
    """

    output_root: Path
    library_roots: tuple[Path, ...]
    exclude_patterns: tuple[ExcludePattern, ...] = ()
    force_regenerate: bool = False
    title: str = ""
    description: str = ""
    language: str = "en"

    @classmethod
    def create(
        cls,
        outroot: Union[str, Path, None] = None,
        libroot: Union[str, Path, Iterable[Union[str, Path]], None] = None,
        exclude: Union[ExcludePattern, Iterable[ExcludePattern], None] = None,
        forcegen: bool = False,
        title: str = "",
        description: str = "",
        language: str = "en",
        base_dir: Optional[Path] = None,
    ) -> "Config":
        """Resolve raw settings into a Config.

        Args:
            outroot: Output directory; defaults to the current directory.
            libroot: One library root or several; defaults to the current directory.
            exclude: One pattern or several. Strings are glob patterns, compiled
                regular expressions are searched against the relative path.
            forcegen: Regenerate every page regardless of modification times.
            title: Project title.
            description: Project description.
            language: Page language for xml:lang.
            base_dir: Directory that relative paths are resolved against.

        Returns:
            A validated Config.

        Raises:
            ConfigError: If a library root is missing or unreadable.
        """
        base = Path(base_dir) if base_dir is not None else Path.cwd()

        output_root = _absolute(outroot or ".", base)

        if libroot is None:
            raw_roots: list[Union[str, Path]] = ["."]
        elif isinstance(libroot, (str, Path)):
            raw_roots = [libroot]
        else:
            raw_roots = list(libroot) or ["."]

        library_roots: list[Path] = []
        for raw_root in raw_roots:
            root = _absolute(raw_root, base)
            if root not in library_roots:
                library_roots.append(root)

        for root in library_roots:
            if not root.is_dir():
                raise ConfigError(f"Library root does not exist or is not a directory: {root}")
            if not os.access(root, os.R_OK | os.X_OK):
                raise ConfigError(f"Library root is not readable: {root}")

        if exclude is None:
            patterns: tuple[ExcludePattern, ...] = ()
        elif isinstance(exclude, (str, re.Pattern)):
            patterns = (exclude,)
        else:
            patterns = tuple(exclude)

        return cls(
            output_root=output_root,
            library_roots=tuple(library_roots),
            exclude_patterns=patterns,
            force_regenerate=bool(forcegen),
            title=title,
            description=description,
            language=language or "en",
        )

    @property
    def source_root(self) -> Path:
        """Directory holding the mirrored raw sources."""
        return self.output_root / SOURCE_MIRROR_DIR

    @property
    def index_path(self) -> Path:
        """Path to the generated index page."""
        return self.output_root / INDEX_PAGE_NAME


def _absolute(path: Union[str, Path], base: Path) -> Path:
    """Return path as an absolute, normalized Path."""
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    return Path(os.path.normpath(candidate))


def load_config(config_path: Optional[Path] = None, **overrides: Any) -> Config:
    """Load configuration from an INI file and the environment.

    Precedence is: explicit overrides, then environment variables
    (PROJDOCS_OUTROOT, PROJDOCS_LIBROOT, PROJDOCS_FORCEGEN), then the INI
    file, then schema defaults. Relative paths in the INI file are resolved
    against the file's directory.

    Args:
        config_path: Path to an INI file. If None or missing, only defaults apply.
        **overrides: Keyword arguments accepted by Config.create(); None values
            are ignored.

    Returns:
        Validated Config.

    Raises:
        ConfigError: If validation fails.
    """
    parser = ConfigParser()
    base_dir = Path.cwd()

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            try:
                parser.read(config_path, encoding="utf-8")
            except Exception as e:
                raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
            base_dir = config_path.resolve().parent

    project = _load_section(parser, "project", CONFIG_SCHEMA["project"])
    paths = _load_section(parser, "paths", CONFIG_SCHEMA["paths"])

    settings: dict[str, Any] = {
        "outroot": paths["outroot"],
        "libroot": paths["libroot"],
        "exclude": paths["except"],
        "forcegen": project["forcegen"],
        "title": project["title"],
        "description": project["description"],
        "language": project["language"],
    }

    # Paths from the environment and from overrides are relative to the cwd
    cwd = Path.cwd()
    env_outroot = os.getenv("PROJDOCS_OUTROOT")
    if env_outroot:
        settings["outroot"] = _absolute(env_outroot, cwd)
    env_libroot = os.getenv("PROJDOCS_LIBROOT")
    if env_libroot:
        settings["libroot"] = [_absolute(p, cwd) for p in env_libroot.split(os.pathsep) if p]
    env_forcegen = _parse_bool_env("PROJDOCS_FORCEGEN")
    if env_forcegen is not None:
        settings["forcegen"] = env_forcegen

    for key, value in overrides.items():
        if value is None:
            continue
        if key == "outroot":
            value = _absolute(value, cwd)
        elif key == "libroot":
            raw_roots = [value] if isinstance(value, (str, Path)) else list(value)
            if not raw_roots:
                continue
            value = [_absolute(p, cwd) for p in raw_roots]
        settings[key] = value

    return Config.create(base_dir=base_dir, **settings)
