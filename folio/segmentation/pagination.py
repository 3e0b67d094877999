# folio/segmentation/pagination.py
"""
Flow chapters into fixed-capacity pages.

Each chapter's HTML is cut into atomic units: its top-level elements, with
top-level lists broken into their items. Units are moved onto the current
page one at a time; when a unit makes the page overflow it is taken back,
the page is closed and the unit starts the next page. A unit that
overflows an empty page on its own is kept there anyway, so every unit is
placed exactly once and the loop always makes progress.

How much a page holds is decided by an injected ``measure`` callable that
returns the extent of a list of HTML fragments, compared against a
``capacity`` in the same unit. The default measure estimates lines of
text; a caller with a real layout engine can supply its own.

Pages are numbered from 1 across all chapters. Odd pages carry the
chapter title as header text, even pages the document title.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from functools import partial
from html import escape
from typing import Callable, Mapping, Optional, Sequence

from bs4 import BeautifulSoup, NavigableString, Tag

from folio.markdown.config import get_pagination_config

from .footnotes import attach_footnotes, link_references

logger = logging.getLogger(__name__)

Measure = Callable[[Sequence[str]], float]

LIST_TAGS = {"ul", "ol"}
BLOCK_TAGS = [
    "p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "pre", "blockquote",
    "figure", "table", "tr", "aside", "div", "dl", "dt", "dd", "hr",
]


@dataclass(frozen=True)
class AtomicUnit:
    """
    One piece of content that is never split across pages.

    List items remember the list they came from (``list_key``) so that
    neighbouring items on the same page can be wrapped back into one list.
    """

    html: str
    list_tag: Optional[str] = None
    list_attrs: tuple[tuple[str, str], ...] = ()
    list_key: Optional[int] = None
    ordinal: int = 0


def _attr_value(value) -> str:
    return " ".join(value) if isinstance(value, list) else str(value)


def atomic_units(html: str) -> list[AtomicUnit]:
    """Cut a chapter's rendered HTML into its atomic units."""
    soup = BeautifulSoup(html, "html.parser")
    units: list[AtomicUnit] = []

    for list_key, node in enumerate(soup.contents):
        if isinstance(node, Tag) and node.name in LIST_TAGS:
            attrs = tuple((k, _attr_value(v)) for k, v in node.attrs.items())
            items = node.find_all("li", recursive=False)
            for ordinal, item in enumerate(items):
                units.append(AtomicUnit(str(item), node.name, attrs, list_key, ordinal))
            continue
        if isinstance(node, NavigableString) and not str(node).strip():
            continue
        units.append(AtomicUnit(str(node)))

    return units


def _open_list(unit: AtomicUnit) -> str:
    attrs = dict(unit.list_attrs)
    if unit.list_tag == "ol" and unit.ordinal:
        start = int(attrs.get("start", 1) or 1)
        attrs["start"] = str(start + unit.ordinal)
    rendered = "".join(f' {k}="{escape(v)}"' for k, v in attrs.items())
    return f"<{unit.list_tag}{rendered}>"


def assemble(units: Sequence[AtomicUnit]) -> list[str]:
    """Turn a page's units into HTML fragments, re-wrapping list items."""
    fragments: list[str] = []
    i = 0
    while i < len(units):
        unit = units[i]
        if unit.list_key is None:
            fragments.append(unit.html)
            i += 1
            continue
        j = i
        while j < len(units) and units[j].list_key == unit.list_key:
            j += 1
        items = "\n".join(u.html for u in units[i:j])
        fragments.append(f"{_open_list(unit)}\n{items}\n</{unit.list_tag}>")
        i = j
    return fragments


def estimate_lines(
    fragments: Sequence[str],
    chars_per_line: int = 72,
    block_cost: float = 1.0,
    image_lines: float = 8.0,
) -> float:
    """
    Rough extent of ``fragments`` in lines of body text.

    Every non-blank text line costs ``ceil(len / chars_per_line)`` lines,
    every block element adds ``block_cost`` and every image adds
    ``image_lines``.
    """
    total = 0.0
    for fragment in fragments:
        soup = BeautifulSoup(fragment, "html.parser")
        for line in soup.get_text().split("\n"):
            if line.strip():
                total += math.ceil(len(line.strip()) / chars_per_line)
        total += block_cost * len(soup.find_all(BLOCK_TAGS))
        total += image_lines * len(soup.find_all("img"))
    return total


def default_measure() -> Measure:
    config = get_pagination_config()
    return partial(
        estimate_lines,
        chars_per_line=config["chars_per_line"],
        block_cost=config["block_cost"],
        image_lines=config["image_lines"],
    )


@dataclass
class Page:
    index: int
    chapter_title: str
    header_text: str
    units: list[AtomicUnit] = field(default_factory=list)
    body_fragment: list[str] = field(default_factory=list)
    footnote_ids: list[str] = field(default_factory=list)
    footnote_html: str = ""

    @property
    def parity(self) -> str:
        return "odd" if self.index % 2 else "even"

    @property
    def html(self) -> str:
        return "\n".join(self.body_fragment) + self.footnote_html


@dataclass
class Pagination:
    pages: list[Page]

    @property
    def page_count(self) -> int:
        return len(self.pages)


def header_for(index: int, chapter_title: str, document_title: str) -> str:
    return chapter_title if index % 2 else document_title


def _flow_chapter(units, measure: Measure, capacity: float):
    """Yield the unit lists of consecutive pages for one chapter."""
    queue = deque(units)
    body: list[AtomicUnit] = []

    while queue:
        unit = queue.popleft()
        body.append(unit)
        if measure(assemble(body)) <= capacity:
            continue
        if len(body) == 1:
            logger.info("Placing oversized unit on its own page")
            continue
        body.pop()
        queue.appendleft(unit)
        yield body
        body = []

    if body:
        yield body


def paginate(
    chapters: Sequence,
    document_title: str = "",
    measure: Optional[Measure] = None,
    capacity: Optional[float] = None,
    footnotes: Optional[Mapping[str, str]] = None,
    render_footnote: Optional[Callable[[str], str]] = None,
) -> Pagination:
    """
    Flow chapters onto pages.

    Args:
        chapters: Objects with ``title`` and ``html`` attributes, in order
        document_title: Header text for even pages
        measure: Extent of a list of HTML fragments (default: line estimate)
        capacity: Maximum extent of a page body, in the measure's unit
        footnotes: Document footnote map; each page lists the notes it uses
        render_footnote: Renders a footnote's Markdown content to HTML

    Returns:
        Pagination holding every page; ``page_count`` is the total
    """
    if measure is None:
        measure = default_measure()
    if capacity is None:
        capacity = get_pagination_config()["capacity"]
    footnotes = footnotes or {}

    pages: list[Page] = []
    for chapter in chapters:
        for units in _flow_chapter(atomic_units(chapter.html), measure, capacity):
            index = len(pages) + 1
            page = Page(
                index=index,
                chapter_title=chapter.title,
                header_text=header_for(index, chapter.title, document_title),
                units=units,
            )
            fragments = assemble(units)
            if footnotes:
                resolved = attach_footnotes(
                    "\n".join(fragments), footnotes, index - 1, render_footnote
                )
                page.footnote_ids = resolved.footnote_ids
                page.footnote_html = resolved.footnote_html
                if resolved.footnote_ids:
                    fragments = [
                        link_references(fragment, footnotes, index - 1)
                        for fragment in fragments
                    ]
            page.body_fragment = fragments
            pages.append(page)

    logger.debug(f"Paginated {len(chapters)} chapters into {len(pages)} pages")
    return Pagination(pages)
