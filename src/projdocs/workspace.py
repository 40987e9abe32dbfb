"""Output tree initialization.

This module creates the output root before anything is written into it.
Failing to create it is fatal for the build.
"""

import logging

from projdocs.config import Config
from projdocs.documents.document import PublishError

logger = logging.getLogger(__name__)


def initialize_output_root(config: Config) -> None:
    """Create the output root (and its parents) if it does not exist.

    Args:
        config: Build configuration.

    Raises:
        PublishError: If the directory cannot be created or is not a directory.
    """
    output_root = config.output_root
    try:
        output_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PublishError(output_root, e.strerror or str(e)) from e
    if not output_root.is_dir():
        raise PublishError(output_root, "not a directory")
    logger.debug(f"Output root ready at {output_root}")
