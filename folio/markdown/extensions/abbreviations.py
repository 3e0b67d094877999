# folio/markdown/extensions/abbreviations.py
"""
Abbreviation definitions and substitution.

A paragraph made up entirely of definition lines

    *[HTML]: Hyper Text Markup Language
    *[IDE]: Integrated Development Environment

is hidden from the output and its terms are added to the document's
abbreviation set. Every later occurrence of a term in visible text is
wrapped as ``<abbr title="...">TERM</abbr>``.

Collection and substitution are separate passes so that every definition
in a document (or in every chapter of a book) is known before any text is
rewritten.
"""

import re
from typing import Mapping, Optional

from markdown_it.token import Token

from ..tokens import iter_inline, text_token

DEFINITION_PATTERN = re.compile(r"^\*\[([^\]]+)\]:\s+(.+)$")


def _paragraph_lines(inline: Token) -> Optional[list[str]]:
    """Return the logical lines of a paragraph made only of text and breaks."""
    lines: list[str] = []
    buffer = ""
    for child in inline.children or []:
        if child.type in ("softbreak", "hardbreak"):
            lines.append(buffer)
            buffer = ""
            continue
        if child.type != "text":
            return None
        buffer += child.content
    if buffer:
        lines.append(buffer)
    return lines


def _parse_definitions(lines: list[str]) -> Optional[dict[str, str]]:
    definitions: dict[str, str] = {}
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        match = DEFINITION_PATTERN.match(stripped)
        if not match:
            return None
        definitions[match.group(1)] = match.group(2).strip()
    return definitions or None


def collect_abbreviations(tokens: list[Token]):
    """
    Hide definition paragraphs and return the terms they define.

    Returns:
        ``(tokens, abbreviations)``; the token list is modified in place.
    """
    abbreviations: dict[str, str] = {}

    i = 0
    while i < len(tokens) - 2:
        opening, inline, closing = tokens[i], tokens[i + 1], tokens[i + 2]
        if (
            opening.type != "paragraph_open"
            or inline.type != "inline"
            or closing.type != "paragraph_close"
        ):
            i += 1
            continue

        lines = _paragraph_lines(inline)
        definitions = _parse_definitions(lines) if lines is not None else None
        if definitions is None:
            i += 1
            continue

        abbreviations.update(definitions)
        opening.hidden = inline.hidden = closing.hidden = True
        inline.children = []
        i += 3

    return tokens, abbreviations


def build_pattern(abbreviations: Mapping[str, str]) -> Optional["re.Pattern[str]"]:
    """Longest terms first so a term never loses to a shorter prefix."""
    if not abbreviations:
        return None
    terms = sorted(abbreviations, key=len, reverse=True)
    alternation = "|".join(re.escape(term) for term in terms)
    return re.compile(rf"\b({alternation})\b")


def _split_text(child: Token, pattern, abbreviations: Mapping[str, str]) -> list[Token]:
    source = child.content
    out: list[Token] = []
    last = 0
    for match in pattern.finditer(source):
        if match.start() > last:
            out.append(text_token(source[last : match.start()]))
        term = match.group(1)
        opening = Token("abbr_open", "abbr", 1)
        opening.attrSet("title", abbreviations[term])
        out.append(opening)
        out.append(text_token(term))
        out.append(Token("abbr_close", "abbr", -1))
        last = match.end()

    if not out:
        return [child]
    if last < len(source):
        out.append(text_token(source[last:]))
    return out


def replace_abbreviations(tokens: list[Token], abbreviations: Mapping[str, str]) -> list[Token]:
    """
    Wrap abbreviation terms found in visible inline text.

    Text already inside an ``abbr`` element is left alone, so running the
    pass twice produces the same stream.
    """
    pattern = build_pattern(abbreviations)
    if pattern is None:
        return tokens

    for block in iter_inline(tokens):
        out: list[Token] = []
        depth = 0
        for child in block.children:
            if child.type == "abbr_open":
                depth += 1
            elif child.type == "abbr_close":
                depth -= 1

            if child.type != "text" or depth > 0:
                out.append(child)
                continue
            out.extend(_split_text(child, pattern, abbreviations))
        block.children = out

    return tokens
