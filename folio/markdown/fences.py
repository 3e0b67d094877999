# folio/markdown/fences.py
"""
Fence tracking shared by every line-oriented transform.

A fence opens with a run of three or more backticks or tildes and closes
with a run of the same character that is at least as long. Lines inside a
fence, delimiters included, must be copied verbatim by any transform that
scans source text line by line (figure captions, chapter boundaries,
footnote definitions).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

_FENCE_OPEN = re.compile(r"^[ \t]*(`{3,}|~{3,})(.*)$")


@dataclass(frozen=True)
class Normal:
    pass


@dataclass(frozen=True)
class InFence:
    char: str
    length: int


FenceState = Union[Normal, InFence]

NORMAL = Normal()


def _closes(state: InFence, line: str) -> bool:
    stripped = line.strip()
    if len(stripped) < state.length:
        return False
    return stripped == state.char * len(stripped)


def advance(state: FenceState, line: str) -> FenceState:
    """Return the fence state after consuming ``line``."""
    if isinstance(state, InFence):
        return NORMAL if _closes(state, line) else state

    match = _FENCE_OPEN.match(line)
    if not match:
        return state
    marker, info = match.groups()
    # Backtick fences cannot carry backticks in their info string
    if marker[0] == "`" and "`" in info:
        return state
    return InFence(marker[0], len(marker))


def scan_lines(lines: Iterable[str]) -> Iterator[tuple[str, bool]]:
    """
    Yield ``(line, fenced)`` pairs.

    ``fenced`` is True for fence delimiters and every line between them,
    so callers only need to act on lines where it is False.
    """
    state: FenceState = NORMAL
    for line in lines:
        before = state
        state = advance(state, line)
        yield line, isinstance(before, InFence) or isinstance(state, InFence)
