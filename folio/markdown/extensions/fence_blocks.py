# folio/markdown/extensions/fence_blocks.py
"""
Render-time interception of fenced blocks by info string.

``chart`` and ``network`` fences are decoded and rendered as custom
elements; when decoding fails the fence is rendered as ordinary code so
the author still sees their source. ``mermaid`` fences are handed to the
client-side renderer untouched.
"""

import html
import logging

from markdown_it import MarkdownIt

from ..exceptions import FenceMiniLanguageDecodeError
from .chart_blocks import render_chart
from .network import render_network

logger = logging.getLogger(__name__)


def render_mermaid(source: str) -> str:
    return f'<div class="mermaid">{html.escape(source, quote=False)}</div>\n'


# Keyed on the full trimmed info string
MINI_LANGUAGES = {
    "chart": render_chart,
    "network": render_network,
}


def fence_blocks_plugin(md: MarkdownIt) -> None:
    default_fence = md.renderer.rules["fence"]

    def render_fence(self, tokens, idx, options, env):
        token = tokens[idx]
        info = token.info.strip() if token.info else ""

        renderer = MINI_LANGUAGES.get(info)
        if renderer is not None:
            try:
                return renderer(token.content)
            except FenceMiniLanguageDecodeError as exc:
                logger.warning(f"Rendering {info} fence as code: {exc}")
                return default_fence(tokens, idx, options, env)

        if info.split(maxsplit=1)[:1] == ["mermaid"]:
            return render_mermaid(token.content)

        return default_fence(tokens, idx, options, env)

    md.add_render_rule("fence", render_fence)
