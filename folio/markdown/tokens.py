# folio/markdown/tokens.py
"""Helpers for working with markdown-it token streams."""

from __future__ import annotations

from typing import Iterable, Sequence

from markdown_it.token import Token


def text_token(content: str) -> Token:
    return Token("text", "", 0, content=content)


def is_well_formed(tokens: Sequence[Token]) -> bool:
    """
    Check that every opening token has exactly one matching close.

    Nesting is tracked per tag name as a stack; the depth never goes
    negative and every stack is empty at the end. Inline children are
    checked recursively.
    """
    stack: list[str] = []
    for token in tokens:
        if token.nesting == 1:
            stack.append(token.tag)
        elif token.nesting == -1:
            if not stack or stack[-1] != token.tag:
                return False
            stack.pop()
        if token.children and not is_well_formed(token.children):
            return False
    return not stack


def iter_inline(tokens: Iterable[Token]) -> Iterable[Token]:
    """Yield the visible inline container tokens of a block stream."""
    for token in tokens:
        if token.type == "inline" and token.children is not None and not token.hidden:
            yield token
