# folio/markdown/extensions/aside.py
"""
Block rule for aside containers.

    :::note
    Content parsed as ordinary **Markdown**.
    :::

A marker is a run of three or more colons at the start of a line. The
container ends at the first later line whose trimmed text equals the same
marker, or implicitly at a line indented below the enclosing block. An
unclosed container runs to the end of the document. Text following the
opening marker becomes the aside's class.
"""

import html

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock

MARKER_CHAR = ":"
MIN_MARKER_LENGTH = 3


def aside_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    pos = state.bMarks[startLine] + state.tShift[startLine]
    maximum = state.eMarks[startLine]

    if pos >= maximum or state.src[pos] != MARKER_CHAR:
        return False

    marker_end = pos
    while marker_end < maximum and state.src[marker_end] == MARKER_CHAR:
        marker_end += 1

    if marker_end - pos < MIN_MARKER_LENGTH:
        return False

    if silent:
        return True

    marker = state.src[pos:marker_end]
    info = state.src[marker_end:maximum].strip()

    next_line = startLine
    explicitly_closed = False
    while next_line < endLine:
        next_line += 1
        pos = state.bMarks[next_line] + state.tShift[next_line]
        maximum = state.eMarks[next_line]
        if pos < maximum and state.sCount[next_line] < state.blkIndent:
            # non-empty line with negative indent ends the container
            break
        if state.src[pos:maximum].strip() == marker:
            explicitly_closed = True
            break

    old_parent = state.parentType
    old_line_max = state.lineMax
    state.parentType = "aside"
    # keeps the closing marker out of the nested tokenize
    state.lineMax = next_line

    token = state.push("aside_open", "aside", 1)
    token.markup = marker
    token.info = info
    token.block = True
    token.map = [startLine, next_line]

    state.md.block.tokenize(state, startLine + 1, next_line)

    token = state.push("aside_close", "aside", -1)
    token.markup = marker
    token.block = True

    state.parentType = old_parent
    state.lineMax = old_line_max
    state.line = next_line + (1 if explicitly_closed else 0)

    return True


def render_aside_open(self, tokens, idx, options, env):
    info = tokens[idx].info
    if info:
        return f'<aside class="{html.escape(info)}">\n'
    return "<aside>\n"


def render_aside_close(self, tokens, idx, options, env):
    return "</aside>\n"


def aside_plugin(md: MarkdownIt) -> None:
    md.block.ruler.before(
        "fence",
        "aside",
        aside_rule,
        {"alt": ["paragraph", "reference", "blockquote", "list"]},
    )
    md.add_render_rule("aside_open", render_aside_open)
    md.add_render_rule("aside_close", render_aside_close)
