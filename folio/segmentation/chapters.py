# folio/segmentation/chapters.py
"""
Split Markdown source into chapters on ``---`` lines.

A separator only counts outside fenced code blocks, so a fence showing
front matter or a horizontal rule does not start a new chapter.
Whitespace-only chapters are dropped. A chapter's title is the text of
its first ATX heading outside any fence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from folio.markdown.fences import scan_lines

CHAPTER_SEPARATOR = "---"

ATX_HEADING = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")


@dataclass
class Chapter:
    title: str
    source: str


def chapter_title(source: str) -> str:
    for line, fenced in scan_lines(source.split("\n")):
        if fenced:
            continue
        match = ATX_HEADING.match(line)
        if match:
            return match.group(2).strip()
    return ""


def split_chapter_sources(text: str) -> list[str]:
    chapters: list[str] = []
    current: list[str] = []

    for line, fenced in scan_lines(text.split("\n")):
        if not fenced and line.rstrip() == CHAPTER_SEPARATOR:
            chapters.append("\n".join(current))
            current = []
        else:
            current.append(line)
    chapters.append("\n".join(current))

    return [chapter for chapter in chapters if chapter.strip()]


def split_chapters(text: str) -> list[Chapter]:
    """Return the chapters of ``text`` in source order."""
    return [
        Chapter(title=chapter_title(source), source=source)
        for source in split_chapter_sources(text)
    ]
