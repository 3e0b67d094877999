# folio/markdown/preprocessors/figure_caption.py
"""
Preprocessor that turns captioned image lines into <figure> blocks.

Two forms are recognised, both using the wikilink image syntax:

    ![[photos/harbour.jpg]] Boats at dawn
    The harbour in 1932.

    ![[photos/harbour.jpg]]
    The harbour in 1932.

The first line holds the target and optional alt text; the line after it
is the caption. Without alt text the caption doubles as alt text. Output:

    <figure><img src="photos/harbour.jpg" alt="Boats at dawn"><figcaption>The harbour in 1932.</figcaption></figure>

Targets that do not look like images are left alone so the wikilink pass
can turn them into links. Lines inside fenced code blocks are never
touched.
"""

import html
import re

from ..fences import scan_lines

IMAGE_SUFFIX_PATTERN = re.compile(r"\.(jpg|jpeg|webp|png|gif|svg|mp4)$", re.IGNORECASE)

WITH_ALT_PATTERN = re.compile(
    r"^!\[\[([^\]]+)\]\][ \t]+([^\n]+)\n([^\n]+)$", re.MULTILINE
)
WITHOUT_ALT_PATTERN = re.compile(r"^!\[\[([^\]]+)\]\]\n([^\n]+)$", re.MULTILINE)


def is_image_url(url: str) -> bool:
    """
    Loose image heuristic shared with the wikilink resolver.

    Anything starting with ``http`` or ``/`` counts, so plain absolute
    links are treated as images too.
    """
    return bool(
        IMAGE_SUFFIX_PATTERN.search(url)
        or "placehold" in url
        or url.startswith("http")
        or url.startswith("/")
    )


def _figure(src: str, alt: str, caption: str) -> str:
    return (
        f'<figure><img src="{html.escape(src.strip())}" alt="{html.escape(alt.strip())}">'
        f"<figcaption>{html.escape(caption.strip(), quote=False)}</figcaption></figure>"
    )


def _replace_with_alt(match):
    url, alt, caption = match.groups()
    if not is_image_url(url):
        return match.group(0)
    return _figure(url, alt, caption)


def _replace_without_alt(match):
    url, caption = match.groups()
    if not is_image_url(url):
        return match.group(0)
    return _figure(url, caption, caption)


def _apply_replacements(segment: str) -> str:
    segment = WITH_ALT_PATTERN.sub(_replace_with_alt, segment)
    return WITHOUT_ALT_PATTERN.sub(_replace_without_alt, segment)


def figure_caption(text: str, context: dict) -> str:
    """
    Rewrite figure syntax outside fenced code blocks.

    Args:
        text: Markdown source
        context: Context dictionary (unused)

    Returns:
        Markdown with figure syntax replaced by HTML blocks
    """
    out: list[str] = []
    buffer: list[str] = []

    def flush():
        if buffer:
            out.append(_apply_replacements("\n".join(buffer)))
            buffer.clear()

    for line, fenced in scan_lines(text.split("\n")):
        if fenced:
            flush()
            out.append(line)
        else:
            buffer.append(line)
    flush()

    return "\n".join(out)


def figure_caption_default(text: str, context: dict) -> str:
    """
    Default configuration for figure_caption.

    This is the function that should be registered in PREPROCESSORS.
    """
    return figure_caption(text, context)
