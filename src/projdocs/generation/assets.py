"""Static assets shared by every generated page."""

import logging
from pathlib import Path

from projdocs.config import Config
from projdocs.constants import ARROW_IMAGE_NAME, STYLESHEET_NAME
from projdocs.documents.document import write_if_changed

logger = logging.getLogger(__name__)

STYLESHEET = """\
body {
    background: #ffffff;
    color: #000000;
    font-family: Verdana, Arial, Helvetica, sans-serif;
    font-size: 0.85em;
    margin: 0;
    padding: 0 1.5em 1.5em 1.5em;
}
a:link, a:visited { color: #0000cc; text-decoration: none; }
a:hover { text-decoration: underline; }
div.box {
    border: 1px solid #006699;
    background: #eef6ff;
    margin: 1em 0;
    padding: 0.5em 1em;
}
h1.t1 { font-size: 1.6em; margin: 0; }
div.t2 { color: #333333; margin-top: 0.3em; }
div.path { margin: 0.5em 0; }
div.source { margin: 0.5em 0; text-align: right; }
div.toc, div.definitions {
    border-left: 3px solid #cccccc;
    margin: 1em 0;
    padding: 0 1em;
}
div.toc ul, div.definitions ul { margin: 0.3em 0; padding-left: 1.2em; }
div.definitions h2 { font-size: 1em; }
div.pod h1 { background: #ddeeff; border-bottom: 1px solid #006699; font-size: 1.3em; }
div.pod h2 { font-size: 1.15em; }
div.pod h3, div.pod h4, div.pod h5, div.pod h6 { font-size: 1em; }
a.toplink { float: right; }
a.toplink img { border: 0; }
pre {
    background: #f5f5f5;
    border: 1px dashed #999999;
    overflow: auto;
    padding: 0.5em;
}
code { font-family: "Courier New", Courier, monospace; }
em.file { font-style: italic; }
dt { font-weight: bold; margin-top: 0.6em; }
div.footer { border-top: 1px solid #cccccc; color: #666666; margin-top: 2em; padding-top: 0.5em; }
table.index { border-collapse: collapse; width: 100%; }
table.index td { border-bottom: 1px solid #eeeeee; padding: 0.2em 0.5em; }
"""

ARROW_IMAGE = """\
<svg xmlns="http://www.w3.org/2000/svg" width="11" height="11" viewBox="0 0 11 11">
<polygon points="5.5,1 10,9 1,9" fill="#006699"/>
</svg>
"""


def publish_assets(config: Config) -> list[Path]:
    """Write the stylesheet and arrow image into the output root.

    Files already holding the same bytes are left untouched.

    Returns:
        Paths that were written.

    Raises:
        PublishError: If an asset cannot be written.
    """
    written = []
    for name, content in ((STYLESHEET_NAME, STYLESHEET), (ARROW_IMAGE_NAME, ARROW_IMAGE)):
        path = config.output_root / name
        if write_if_changed(path, content.encode("utf-8")):
            logger.info(f"Wrote {name}")
            written.append(path)
    return written
