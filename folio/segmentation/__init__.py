from .chapters import Chapter, split_chapters
from .footnotes import FootnotedUnit, attach_footnotes, extract_footnote_definitions
from .pagination import Page, Pagination, estimate_lines, paginate
from .slides import Slide, split_slides

__all__ = (
    "Chapter",
    "FootnotedUnit",
    "Page",
    "Pagination",
    "Slide",
    "attach_footnotes",
    "estimate_lines",
    "extract_footnote_definitions",
    "paginate",
    "split_chapters",
    "split_slides",
)
