# folio/segmentation/footnotes.py
"""
Footnotes for documents shown as separate units (slides, pages, chapters).

Definitions are pulled out of the Markdown source once, before the
document is split:

    Claim that needs a source.[^1]

    [^1]: The source.
        Indented lines continue the definition.

Each unit is then scanned for ``[^id]`` references. References become
superscript links and the unit gets its own footnote list holding only
the notes it references. Anchors include the unit's position so that the
same note referenced from two units never produces duplicate ids:

    <sup class="footnote-ref"><a href="#fn-def-0-1" id="fn-ref-0-1">[1]</a></sup>
    ...
    <div class="unit-footnotes"><ol class="unit-footnotes-list">
      <li id="fn-def-0-1">The source. <a href="#fn-ref-0-1" class="footnote-backref">↩</a></li>
    </ol></div>
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from bs4 import BeautifulSoup, NavigableString

from folio.markdown.fences import scan_lines

DEFINITION_PATTERN = re.compile(r"^\[\^([^\]]+)\]:\s*(.+)$")
REFERENCE_PATTERN = re.compile(r"\[\^([^\]]+)\]")

# Text inside these elements is literal and never holds references
LITERAL_TAGS = {"code", "pre", "script", "style"}

BACKREF_MARK = "↩"


@dataclass
class FootnotedUnit:
    html: str
    footnote_ids: list[str] = field(default_factory=list)
    footnote_html: str = ""

    @property
    def full_html(self) -> str:
        return self.html + self.footnote_html


def _is_continuation(line: str) -> bool:
    return line.startswith("    ") or line.startswith("\t")


def extract_footnote_definitions(markdown: str):
    """
    Remove footnote definitions from ``markdown``.

    Returns:
        ``(footnote_map, markdown_without_definitions)``
    """
    footnotes: dict[str, str] = {}
    kept: list[str] = []
    current: Optional[str] = None

    for line, fenced in scan_lines(markdown.split("\n")):
        if fenced:
            current = None
            kept.append(line)
            continue

        if current is not None and _is_continuation(line):
            footnotes[current] += "\n" + line.strip()
            continue

        match = DEFINITION_PATTERN.match(line)
        if match:
            current = match.group(1)
            footnotes[current] = match.group(2)
            continue

        current = None
        kept.append(line)

    return footnotes, "\n".join(kept)


def reference_id(unit_index: int, footnote_id: str) -> str:
    return f"fn-ref-{unit_index}-{footnote_id}"


def definition_id(unit_index: int, footnote_id: str) -> str:
    return f"fn-def-{unit_index}-{footnote_id}"


def _reference_strings(soup: BeautifulSoup):
    for string in soup.find_all(string=REFERENCE_PATTERN):
        if any(parent.name in LITERAL_TAGS for parent in string.parents):
            continue
        yield string


def collect_references(fragment: str, footnotes: Mapping[str, str]) -> list[str]:
    """Defined footnote ids referenced in ``fragment``, first-seen order."""
    soup = BeautifulSoup(fragment, "html.parser")
    seen: list[str] = []
    for string in _reference_strings(soup):
        for match in REFERENCE_PATTERN.finditer(str(string)):
            footnote_id = match.group(1)
            if footnote_id in footnotes and footnote_id not in seen:
                seen.append(footnote_id)
    return seen


def link_references(fragment: str, footnotes: Mapping[str, str], unit_index: int) -> str:
    """Turn defined ``[^id]`` references into superscript links."""
    soup = BeautifulSoup(fragment, "html.parser")

    for string in list(_reference_strings(soup)):
        text = str(string)
        pieces = []
        last = 0
        for match in REFERENCE_PATTERN.finditer(text):
            footnote_id = match.group(1)
            if footnote_id not in footnotes:
                continue
            if match.start() > last:
                pieces.append(NavigableString(text[last : match.start()]))

            sup = soup.new_tag("sup")
            sup["class"] = ["footnote-ref"]
            anchor = soup.new_tag("a")
            anchor["href"] = f"#{definition_id(unit_index, footnote_id)}"
            anchor["id"] = reference_id(unit_index, footnote_id)
            anchor.string = f"[{footnote_id}]"
            sup.append(anchor)
            pieces.append(sup)
            last = match.end()

        if not pieces:
            continue
        if last < len(text):
            pieces.append(NavigableString(text[last:]))

        for piece in pieces:
            string.insert_before(piece)
        string.extract()

    return str(soup)


def render_footnote_list(
    footnote_ids: list[str],
    footnotes: Mapping[str, str],
    unit_index: int,
    render: Optional[Callable[[str], str]] = None,
) -> str:
    """Build the footnote list appended to a unit."""
    if not footnote_ids:
        return ""
    render = render or (lambda content: html.escape(content, quote=False))

    items = []
    for footnote_id in footnote_ids:
        if footnote_id not in footnotes:
            continue
        items.append(
            f'<li id="{definition_id(unit_index, footnote_id)}">'
            f"{render(footnotes[footnote_id])}"
            f' <a href="#{reference_id(unit_index, footnote_id)}" class="footnote-backref">'
            f"{BACKREF_MARK}</a></li>"
        )

    return (
        '<div class="unit-footnotes"><ol class="unit-footnotes-list">'
        + "".join(items)
        + "</ol></div>"
    )


def attach_footnotes(
    fragment: str,
    footnotes: Mapping[str, str],
    unit_index: int,
    render: Optional[Callable[[str], str]] = None,
) -> FootnotedUnit:
    """
    Resolve the footnotes referenced by one display unit.

    Args:
        fragment: Rendered HTML of the unit
        footnotes: Document-wide footnote map (never modified)
        unit_index: Zero-based position of the unit, used in anchor ids
        render: Renders a footnote's Markdown content to HTML

    Returns:
        FootnotedUnit with linked references and the unit's footnote list
    """
    footnote_ids = collect_references(fragment, footnotes)
    if not footnote_ids:
        return FootnotedUnit(fragment)
    return FootnotedUnit(
        html=link_references(fragment, footnotes, unit_index),
        footnote_ids=footnote_ids,
        footnote_html=render_footnote_list(footnote_ids, footnotes, unit_index, render),
    )
