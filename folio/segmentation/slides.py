# folio/segmentation/slides.py
"""
Split rendered HTML into slides at horizontal rules.

The split is textual: every ``<hr>`` ends a slide, wherever it sits. A
rule nested inside a container (for example ``---`` within an ``:::``
aside) therefore cuts the container in two, and each slide carries an
unbalanced half of it. Keep slide breaks at the top level.
"""

import re
from dataclasses import dataclass, field

HORIZONTAL_RULE = re.compile(r"<hr\s*/?>", re.IGNORECASE)


@dataclass
class Slide:
    index: int
    html: str
    footnote_ids: list[str] = field(default_factory=list)


def split_slides(html: str) -> list[str]:
    """Return the non-empty HTML fragments between ``<hr>`` elements."""
    fragments = (fragment.strip() for fragment in HORIZONTAL_RULE.split(html))
    return [fragment for fragment in fragments if fragment]
