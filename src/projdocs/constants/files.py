"""Output tree layout and default source groups.

These names are shared by the page renderer, which links to them, and by
the asset and index writers, which create them. Changing one here changes
both sides.
"""

# =============================================================================
# Output Layout
# =============================================================================
# Fixed top-level names inside the output root. Every rendered page links
# to these with a path made relative to its own location.

STYLESHEET_NAME = "podstyle.css"
ARROW_IMAGE_NAME = "up.svg"
INDEX_PAGE_NAME = "index.html"
SOURCE_MIRROR_DIR = "src"
HTML_SUFFIX = ".html"

# =============================================================================
# Module Names
# =============================================================================
# A document's module name is its library-relative path without suffix,
# with directory separators replaced by this string (Foo/Bar.pm -> Foo::Bar).

MODULE_SEPARATOR = "::"

# =============================================================================
# Default Groups
# =============================================================================
# Registered in this order; when suffixes overlap the earlier group wins.
# Tuples are (description, suffixes, kind value).

DEFAULT_GROUPS = [
    ("Perl Manuals", ("pod",), "manual"),
    ("Perl Modules", ("pm",), "module"),
    ("Trigger Scripts", ("cgi", "pl"), "script"),
]

# =============================================================================
# Page Metadata
# =============================================================================
# Rendered pages open with an HTML comment carrying YAML metadata. Only the
# first METADATA_SCAN_BYTES of an existing page are read to find it.

METADATA_MARKER = "projdocs"
METADATA_SCAN_BYTES = 8192
