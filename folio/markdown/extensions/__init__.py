# folio/markdown/extensions/__init__.py
"""
Parser-bound extensions.

Plugins (``aside_plugin``, ``attribution_plugin``, ``fence_blocks_plugin``,
``wikilinks_plugin``) patch a MarkdownIt instance once when it is built.
Token passes that carry document state (``collect_abbreviations``,
``replace_abbreviations``) are plain functions the compiler calls in order
on the parsed stream.
"""

from .abbreviations import collect_abbreviations, replace_abbreviations
from .aside import aside_plugin
from .attribution import attribution_plugin
from .fence_blocks import fence_blocks_plugin
from .wikilinks import wikilinks_plugin

__all__ = (
    "aside_plugin",
    "attribution_plugin",
    "collect_abbreviations",
    "fence_blocks_plugin",
    "replace_abbreviations",
    "wikilinks_plugin",
)
