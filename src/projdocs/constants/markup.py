"""Markup parsing and rendering constants."""

import re

# =============================================================================
# Headings
# =============================================================================
# =head1 .. =head6 are accepted; HTML has no heading level beyond h6.

MAX_HEADING_LEVEL = 6

# Title of the conventional first section whose first paragraph is the
# document's title ("Foo::Bar - does things").

NAME_SECTION = "NAME"

# =============================================================================
# Anchors
# =============================================================================
# Slug used when a heading has no alphanumeric characters at all.

EMPTY_ANCHOR = "section"

# Anchor at the top of every page, target of the back-to-top arrows. Upper
# case so it can never collide with a generated (lower-case) slug.

TOP_ANCHOR = "TOP"

# =============================================================================
# Definition Extraction
# =============================================================================
# Default pattern for module pages: lower-case identifiers, optionally called
# through an invocant and followed by an argument list, e.g. "new",
# "gen()", "$pd->add_manager($desc, $suffix)".

MODULE_DEFINITION_PATTERN = (
    r"^(?:\$?[A-Za-z_][\w:]*->)?([a-z_][a-z0-9_]*)\s*(?:\(.*\))?\s*;?\s*$"
)

# =============================================================================
# Inline References
# =============================================================================
# A bare module name in running text: one identifier or several joined by "::".
# Sigils and surrounding identifier characters exclude variables like $Foo::Bar.

MODULE_TOKEN_RE = re.compile(r"(?<![\w:$@%&*])([A-Za-z_]\w*(?:::\w+)*)(?![\w:])")

# Link targets that are URLs: a scheme followed by a colon and no whitespace.

URL_TARGET_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:[^:\s]\S*$")

# Named escapes that are not HTML entity names.

POD_ESCAPES = {
    "lt": "<",
    "gt": ">",
    "verbar": "|",
    "sol": "/",
}
