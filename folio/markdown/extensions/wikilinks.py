# folio/markdown/extensions/wikilinks.py
"""
Wikilink resolution.

    [[Page]]              -> <a href="Page.html">Page</a>
    [[Page|other]]        -> <a href="other.html">Page</a>
    ![[diagram.png|Alt]]  -> <img src="diagram.png" alt="Alt">

With a search prefix configured, links point at ``#&{prefix}={target}``
instead of a sibling ``.html`` file. An image wikilink whose target does
not look like an image falls back to a link.

Wikilinks are an inline rule, so the brackets and their target are
consumed from the raw source before autolinking or typographic
replacement can see them.
"""

import re
from typing import Optional
from urllib.parse import quote

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from ..preprocessors.figure_caption import is_image_url

WIKILINK_PATTERN = re.compile(
    r"!\[\[([^|\]]+)(?:\|([^\]]+))?\]\]|\[\[([^|\]]+)(?:\|([^\]]+))?\]\]"
)

# characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def wikilink_href(destination: str, search_prefix: Optional[str] = None) -> str:
    if search_prefix:
        return f"#&{search_prefix}={quote(destination, safe=_URI_COMPONENT_SAFE)}"
    return f"{destination}.html"


def push_wikilink(push, match, search_prefix: Optional[str] = None) -> None:
    """
    Emit the tokens for one wikilink match.

    ``push(type, tag, nesting)`` must create, store and return a token, as
    ``StateInline.push`` does.
    """
    is_image = match.group(0).startswith("!")
    title = match.group(1) if is_image else match.group(3)
    alias = match.group(2) if is_image else match.group(4)

    if is_image and is_image_url(title):
        image = push("image", "img", 0)
        image.attrSet("src", title)
        image.attrSet("alt", alias or "")
        image.content = alias or ""
        image.children = []
        if alias:
            text = Token("text", "", 0)
            text.content = alias
            image.children = [text]
        return

    opening = push("link_open", "a", 1)
    opening.attrSet("href", wikilink_href(alias or title, search_prefix))
    opening.markup = "wikilink"
    push("text", "", 0).content = title
    closing = push("link_close", "a", -1)
    closing.markup = "wikilink"


def expand_wikilinks(source: str, search_prefix: Optional[str] = None) -> list[Token]:
    """Split ``source`` into text, link and image tokens."""
    out: list[Token] = []

    def push(ttype, tag, nesting):
        token = Token(ttype, tag, nesting)
        out.append(token)
        return token

    last = 0
    for match in WIKILINK_PATTERN.finditer(source):
        if match.start() > last:
            push("text", "", 0).content = source[last : match.start()]
        push_wikilink(push, match, search_prefix)
        last = match.end()

    if last < len(source):
        push("text", "", 0).content = source[last:]
    return out


def wikilinks_plugin(md: MarkdownIt, search_prefix: Optional[str] = None) -> None:
    def wikilink_rule(state: StateInline, silent: bool) -> bool:
        if state.src[state.pos] not in "![":
            return False
        match = WIKILINK_PATTERN.match(state.src, state.pos, state.posMax)
        if match is None:
            return False
        if not silent:
            push_wikilink(state.push, match, search_prefix)
        state.pos = match.end()
        return True

    # "[" and "!" would otherwise be claimed by the link and image rules
    md.inline.ruler.before("link", "wikilink", wikilink_rule)
