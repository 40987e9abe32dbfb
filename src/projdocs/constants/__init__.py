"""Configuration constants.

Re-exports all constants for convenient importing:
    from projdocs.constants import STYLESHEET_NAME, MODULE_SEPARATOR
"""

from projdocs.constants.files import *  # noqa: F403
from projdocs.constants.markup import *  # noqa: F403
