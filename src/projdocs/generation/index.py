"""Navigation records and the index page.

After every group has been rendered, the aggregator collects one record per
document, grouped by the document's group. Groups keep registration order,
records keep discovery order, and empty groups are left out, so the same
source tree always yields the same index.
"""

import html
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from projdocs.config import Config
from projdocs.documents.document import write_if_changed

if TYPE_CHECKING:
    from projdocs.documents.manager import DocumentSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationRecord:
    """Index entry for one document."""

    group_description: str
    path: str  # Output path relative to the output root
    name: str
    title: str


@dataclass(frozen=True)
class NavigationGroup:
    """The records of one group, in discovery order."""

    description: str
    records: tuple[NavigationRecord, ...]


class IndexAggregator:
    """Collects navigation records from document sets."""

    def __init__(self, managers: Iterable["DocumentSet"]):
        """Initialize the aggregator.

        Args:
            managers: Document sets in registration order.
        """
        self.managers = list(managers)

    def collect(self) -> list[NavigationGroup]:
        """Build the navigation groups.

        Reads each document's name, title and output path whether or not
        this run rewrote its page.
        """
        groups = []
        for manager in self.managers:
            records = tuple(
                NavigationRecord(
                    group_description=manager.description,
                    path=doc.output_relative_path,
                    name=doc.name,
                    title=doc.display_title,
                )
                for doc in manager.docs
            )
            if records:
                groups.append(NavigationGroup(description=manager.description, records=records))
        return groups


def navigation_json(groups: Iterable[NavigationGroup]) -> str:
    """Serialize navigation groups as canonical JSON.

    Keys are sorted and separators compact, so unchanged trees serialize
    to identical bytes.
    """
    data = [
        {
            "desc": group.description,
            "records": [
                {"path": record.path, "name": record.name, "title": record.title}
                for record in group.records
            ],
        }
        for group in groups
    ]
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def render_index_page(config: Config, groups: list[NavigationGroup]) -> str:
    """Render index.html listing every group and document."""
    title = config.title or "Index"
    lang = html.escape(config.language)
    lines = [
        "<!DOCTYPE html>",
        f'<html xml:lang="{lang}" lang="{lang}">',
        "<head>",
        '<meta http-equiv="Content-Type" content="text/html; charset=utf-8" />',
        f"<title>{html.escape(title)}</title>",
        '<link rel="stylesheet" href="podstyle.css" type="text/css" />',
        "</head>",
        "<body>",
        '<div class="box">',
        f'<h1 class="t1">{html.escape(title)}</h1>',
    ]
    if config.description:
        lines.append(f'<div class="t2">{html.escape(config.description)}</div>')
    lines.append("</div>")

    for group in groups:
        lines.append(f"<h2>{html.escape(group.description)}</h2>")
        lines.append('<table class="index">')
        for record in group.records:
            lines.append(
                f'<tr><td><a href="{html.escape(record.path)}">{html.escape(record.name)}</a></td>'
                f"<td>{html.escape(record.title)}</td></tr>"
            )
        lines.append("</table>")

    # "</" must not appear inside a script element
    payload = navigation_json(groups).replace("</", "<\\/")
    lines.extend(
        [
            f'<script type="application/json" id="navigation">{payload}</script>',
            '<div class="footer">generated by projdocs</div>',
            "</body>",
            "</html>",
        ]
    )
    return "\n".join(lines) + "\n"


def publish_index(config: Config, groups: list[NavigationGroup]) -> Optional[Path]:
    """Write index.html if its content changed.

    Returns:
        The index path if it was written, else None.

    Raises:
        PublishError: If the page cannot be written.
    """
    path = config.index_path
    if write_if_changed(path, render_index_page(config, groups).encode("utf-8")):
        logger.info(f"Wrote {path.name}")
        return path
    return None
