# folio/markdown/extensions/attribution.py
"""
Blockquote attribution.

When the last paragraph of a blockquote has a line starting with the
marker, that line and everything after it become the quote's
attribution:

    > Stay hungry, stay foolish.
    > cite: Stewart Brand

renders as

    <figure class="c-quote">
    <blockquote>
    <p>Stay hungry, stay foolish.</p>
    </blockquote>
    <figcaption class="c-quote__attribution">Stewart Brand</figcaption>
    </figure>
"""

import logging

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

logger = logging.getLogger(__name__)

CONTAINER_CLASS = "c-quote"
ATTRIBUTION_CLASS = "c-quote__attribution"
BREAK_TYPES = ("softbreak", "hardbreak")


def _matching_open(tokens, close_index):
    level = tokens[close_index].level
    for index in range(close_index - 1, -1, -1):
        if tokens[index].type == "blockquote_open" and tokens[index].level == level:
            return index
    return None


def _marker_line(children, marker):
    """Index of the child starting the first line that begins with ``marker``."""
    line_start = 0
    for index, child in enumerate(children):
        if index == line_start:
            if child.type == "text" and child.content.lstrip().startswith(marker):
                return index
        if child.type in BREAK_TYPES:
            line_start = index + 1
    return None


def split_attribution(inline: Token, marker: str):
    """
    Cut the attribution off a paragraph's inline token.

    Returns:
        ``(quote_children, attribution_children)`` or None without a marker
    """
    children = inline.children or []
    start = _marker_line(children, marker)
    if start is None:
        return None

    quote = children[:start]
    while quote and quote[-1].type in BREAK_TYPES:
        quote.pop()

    attribution = list(children[start:])
    first = Token("text", "", 0)
    first.content = attribution[0].content.lstrip()[len(marker):].lstrip()
    attribution[0] = first
    return quote, attribution


def attribution_rule(state: StateCore, marker: str) -> None:
    tokens = state.tokens
    index = len(tokens) - 1

    # walk backwards so edits never shift tokens still to be visited
    while index >= 0:
        token = tokens[index]
        if token.type != "blockquote_close" or index < 3:
            index -= 1
            continue

        opening = _matching_open(tokens, index)
        paragraph_close, inline = tokens[index - 1], tokens[index - 2]
        if (
            opening is None
            or paragraph_close.type != "paragraph_close"
            or paragraph_close.level != token.level + 1
            or inline.type != "inline"
        ):
            index -= 1
            continue

        parts = split_attribution(inline, marker)
        if parts is None:
            index -= 1
            continue
        quote, attribution = parts

        raw_lines = inline.content.split("\n")
        kept_lines = sum(1 for child in quote if child.type in BREAK_TYPES) + 1
        caption = Token("inline", "", 0)
        caption.content = "\n".join(raw_lines[kept_lines:]) if quote else inline.content
        caption.children = attribution

        close_index = index
        if quote:
            inline.children = quote
            inline.content = "\n".join(raw_lines[:kept_lines])
        else:
            del tokens[index - 3 : index]
            close_index = index - 3

        tokens[opening].meta["attribution"] = True
        caption_open = Token("attribution_open", "figcaption", 1)
        caption_open.block = True
        caption_open.markup = marker
        caption_close = Token("attribution_close", "figcaption", -1)
        caption_close.block = True
        tokens[close_index + 1 : close_index + 1] = [caption_open, caption, caption_close]

        logger.debug("Attached blockquote attribution")
        index = close_index - 1


def render_blockquote_open(self, tokens, idx, options, env):
    rendered = self.renderToken(tokens, idx, options, env)
    if tokens[idx].meta.get("attribution"):
        return f'<figure class="{CONTAINER_CLASS}">\n{rendered}'
    return rendered


def render_attribution_open(self, tokens, idx, options, env):
    return f'<figcaption class="{ATTRIBUTION_CLASS}">'


def render_attribution_close(self, tokens, idx, options, env):
    return "</figcaption>\n</figure>\n"


def attribution_plugin(md: MarkdownIt, marker: str = "cite:") -> None:
    def attribution(state: StateCore) -> None:
        attribution_rule(state, marker)

    md.core.ruler.after("inline", "attribution", attribution)
    md.add_render_rule("blockquote_open", render_blockquote_open)
    md.add_render_rule("attribution_open", render_attribution_open)
    md.add_render_rule("attribution_close", render_attribution_close)
