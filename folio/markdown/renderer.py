# folio/markdown/renderer.py

import logging
from dataclasses import dataclass, field
from typing import Optional

from markdown_it import MarkdownIt
from mdit_py_plugins.tasklists import tasklists_plugin

from folio.segmentation.chapters import split_chapters
from folio.segmentation.footnotes import attach_footnotes, extract_footnote_definitions
from folio.segmentation.pagination import Pagination, paginate
from folio.segmentation.slides import Slide, split_slides

from .config import get_markdown_config
from .extensions import (
    aside_plugin,
    attribution_plugin,
    collect_abbreviations,
    fence_blocks_plugin,
    replace_abbreviations,
    wikilinks_plugin,
)
from .preprocessors import (
    apply_preprocessors,
    split_front_matter,
    substitute_host_attributes,
    substitute_variables,
)
from .preprocessors.variables import stringify

logger = logging.getLogger(__name__)


@dataclass
class PreparedSource:
    metadata: Optional[dict]
    body: str
    footnotes: dict[str, str] = field(default_factory=dict)


@dataclass
class CompiledDocument:
    metadata: dict
    html: str
    footnote_ids: list[str] = field(default_factory=list)


@dataclass
class CompiledChapter:
    title: str
    html: str
    footnote_ids: list[str] = field(default_factory=list)


@dataclass
class CompiledBook:
    metadata: dict
    chapters: list[CompiledChapter]


@dataclass
class SlideDeck:
    metadata: dict
    slides: list[Slide]


@dataclass
class PaginatedDocument:
    metadata: dict
    pagination: Pagination

    @property
    def pages(self):
        return self.pagination.pages

    @property
    def page_count(self) -> int:
        return self.pagination.page_count


def build_parser(search_prefix=None) -> MarkdownIt:
    """
    Create a markdown-it instance with every extension installed.

    ``search_prefix`` points wikilinks at in-page search anchors instead of
    sibling pages.
    """
    config = get_markdown_config()
    md = MarkdownIt(config["preset"], config["options"])
    md.use(tasklists_plugin, **config["tasklists"])
    md.use(attribution_plugin, **config["attribution"])
    md.use(wikilinks_plugin, search_prefix=search_prefix)
    md.use(aside_plugin)
    md.use(fence_blocks_plugin)
    return md


def prepare_source(text, context):
    """
    Run the text-level stages that apply once per document.

    Host attributes are substituted first, then the front matter is split
    off and its values fill ``$name`` placeholders, and finally footnote
    definitions are pulled out of the body.
    """
    text = substitute_host_attributes(text, context.get("attributes"))
    text = text.replace("\r\n", "\n").strip()
    metadata, body = split_front_matter(text)
    body = substitute_variables(body, metadata)
    footnotes, body = extract_footnote_definitions(body)
    return PreparedSource(metadata, body, footnotes)


def wikilinks_search_prefix(context):
    attributes = context.get("attributes") or {}
    return context.get("wikilinks_search_prefix") or attributes.get(
        "wikilinks-search-prefix"
    )


def parse_tokens(md, body, context):
    """Parse ``body`` and run the passes that precede abbreviation substitution."""
    body = apply_preprocessors(body, context)
    tokens = md.parse(body)
    tokens, abbreviations = collect_abbreviations(tokens)
    return tokens, abbreviations


def render_tokens(md, tokens, abbreviations):
    tokens = replace_abbreviations(tokens, abbreviations)
    return md.renderer.render(tokens, md.options, {})


def _metadata(source: PreparedSource) -> dict:
    return source.metadata if source.metadata is not None else {}


def compile_document(text, context=None):
    """
    Compile a whole document to HTML.

    Args:
        text: Raw source, optionally starting with YAML front matter
        context: Optional dict; ``attributes`` holds host attributes for
            ``{{key}}`` placeholders, ``wikilinks_search_prefix`` switches
            wikilinks to search anchors

    Returns:
        CompiledDocument with the decoded metadata and rendered HTML
    """
    context = context or {}
    md = build_parser(wikilinks_search_prefix(context))
    source = prepare_source(text, context)

    tokens, abbreviations = parse_tokens(md, source.body, context)
    html = render_tokens(md, tokens, abbreviations)
    unit = attach_footnotes(html, source.footnotes, 0, md.renderInline)

    return CompiledDocument(_metadata(source), unit.full_html, unit.footnote_ids)


def _render_chapters(md, source, context):
    chapters = split_chapters(source.body)
    parsed = [parse_tokens(md, chapter.source, context) for chapter in chapters]

    # abbreviations defined in any chapter apply to every chapter
    abbreviations = {}
    for _, found in parsed:
        abbreviations.update(found)

    logger.debug(
        f"Split document into {len(chapters)} chapters, "
        f"{len(abbreviations)} abbreviations"
    )
    return [
        CompiledChapter(chapter.title, render_tokens(md, tokens, abbreviations))
        for chapter, (tokens, _) in zip(chapters, parsed)
    ]


def compile_chapters(text, context=None):
    """Compile a document split on ``---`` lines into separate chapters."""
    context = context or {}
    md = build_parser(wikilinks_search_prefix(context))
    source = prepare_source(text, context)

    chapters = []
    for position, chapter in enumerate(_render_chapters(md, source, context)):
        unit = attach_footnotes(chapter.html, source.footnotes, position, md.renderInline)
        chapters.append(CompiledChapter(chapter.title, unit.full_html, unit.footnote_ids))

    return CompiledBook(_metadata(source), chapters)


def compile_slides(text, context=None):
    """Compile a document and cut the result into slides at ``<hr>``."""
    context = context or {}
    md = build_parser(wikilinks_search_prefix(context))
    source = prepare_source(text, context)

    tokens, abbreviations = parse_tokens(md, source.body, context)
    html = render_tokens(md, tokens, abbreviations)

    slides = []
    for position, fragment in enumerate(split_slides(html)):
        unit = attach_footnotes(fragment, source.footnotes, position, md.renderInline)
        slides.append(Slide(position + 1, unit.full_html, unit.footnote_ids))

    return SlideDeck(_metadata(source), slides)


def paginate_document(text, measure=None, capacity=None, context=None):
    """
    Compile a document into chapters and flow them onto pages.

    ``measure`` and ``capacity`` are passed to
    :func:`folio.segmentation.pagination.paginate`; the front matter's
    ``title`` is the header text of even pages.
    """
    context = context or {}
    md = build_parser(wikilinks_search_prefix(context))
    source = prepare_source(text, context)
    metadata = _metadata(source)

    pagination = paginate(
        _render_chapters(md, source, context),
        document_title=stringify(metadata.get("title", "")),
        measure=measure,
        capacity=capacity,
        footnotes=source.footnotes,
        render_footnote=md.renderInline,
    )
    return PaginatedDocument(metadata, pagination)
