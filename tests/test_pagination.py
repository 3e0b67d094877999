import logging

import pytest
from bs4 import BeautifulSoup

from folio.markdown.renderer import CompiledChapter
from folio.segmentation.pagination import atomic_units, estimate_lines, header_for, paginate


def count_blocks(fragments):
    """Stub measure: one unit of extent per paragraph, heading or list item."""
    return float(
        sum(
            len(BeautifulSoup(fragment, "html.parser").find_all(["p", "li", "h1"]))
            for fragment in fragments
        )
    )


def paragraphs(*texts):
    return "\n".join(f"<p>{text}</p>" for text in texts)


class TestPaginate:
    def test_pages_are_numbered_across_chapters(self):
        chapters = [
            CompiledChapter("A", paragraphs("1", "2", "3")),
            CompiledChapter("B", paragraphs("4")),
        ]
        pagination = paginate(chapters, "Doc", measure=count_blocks, capacity=2)

        assert pagination.page_count == 3
        assert [page.index for page in pagination.pages] == [1, 2, 3]
        assert [page.chapter_title for page in pagination.pages] == ["A", "A", "B"]
        assert [len(page.units) for page in pagination.pages] == [2, 1, 1]

    def test_headers_alternate_with_parity(self):
        chapters = [
            CompiledChapter("A", paragraphs("1", "2", "3")),
            CompiledChapter("B", paragraphs("4")),
        ]
        pages = paginate(chapters, "Doc", measure=count_blocks, capacity=2).pages

        assert [page.parity for page in pages] == ["odd", "even", "odd"]
        assert [page.header_text for page in pages] == ["A", "Doc", "B"]

    def test_every_unit_is_placed_once_in_order(self):
        html = paragraphs(*"abcdefg")
        pages = paginate([CompiledChapter("", html)], measure=count_blocks, capacity=3).pages

        placed = [unit.html for page in pages for unit in page.units]
        assert placed == [unit.html for unit in atomic_units(html)]

    def test_oversized_units_are_placed_alone(self, caplog):
        chapters = [CompiledChapter("A", paragraphs("x", "y", "z"))]

        with caplog.at_level(logging.INFO):
            pages = paginate(
                chapters, measure=lambda fragments: 10.0 * len(fragments), capacity=5
            ).pages

        assert [len(page.units) for page in pages] == [1, 1, 1]
        assert "oversized" in caplog.text

    def test_ordered_list_continues_numbering(self):
        html = "<ol>\n<li>a</li>\n<li>b</li>\n<li>c</li>\n</ol>"
        pages = paginate([CompiledChapter("", html)], measure=count_blocks, capacity=2).pages

        assert pages[0].body_fragment == ["<ol>\n<li>a</li>\n<li>b</li>\n</ol>"]
        assert pages[1].body_fragment == ['<ol start="3">\n<li>c</li>\n</ol>']

    def test_footnotes_are_resolved_per_page(self):
        html = paragraphs("One[^1]", "Two", "Three[^1][^2]")
        pages = paginate(
            [CompiledChapter("", html)],
            measure=count_blocks,
            capacity=2,
            footnotes={"1": "N1", "2": "N2"},
        ).pages

        assert [page.footnote_ids for page in pages] == [["1"], ["1", "2"]]
        assert 'id="fn-ref-0-1"' in pages[0].html
        assert 'id="fn-ref-1-1"' in pages[1].html
        assert '<li id="fn-def-1-2">N2' in pages[1].html

    def test_empty_chapter_produces_no_pages(self):
        assert paginate([CompiledChapter("A", "")], measure=count_blocks, capacity=2).page_count == 0

    def test_default_measure(self):
        pagination = paginate([CompiledChapter("A", paragraphs("short"))])
        assert pagination.page_count == 1


class TestHeaderFor:
    @pytest.mark.parametrize(
        "index, expected", [(1, "Chapter"), (2, "Book"), (7, "Chapter"), (10, "Book")]
    )
    def test_parity(self, index, expected):
        assert header_for(index, "Chapter", "Book") == expected


class TestEstimateLines:
    def test_wrapped_text(self):
        assert estimate_lines(["<p>" + "x" * 100 + "</p>"]) == 3.0

    def test_images(self):
        assert estimate_lines(['<p><img src="a.png" alt=""></p>']) == 9.0

    def test_custom_widths(self):
        assert estimate_lines(["<p>abcd</p>"], chars_per_line=2, block_cost=0) == 2.0
