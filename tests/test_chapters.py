from folio.segmentation.chapters import chapter_title, split_chapters


class TestSplitChapters:
    def test_split_on_separator(self):
        chapters = split_chapters("# One\nText\n---\n# Two\nMore")
        assert [chapter.title for chapter in chapters] == ["One", "Two"]
        assert chapters[0].source == "# One\nText"
        assert chapters[1].source == "# Two\nMore"

    def test_fenced_separator_is_not_a_split(self):
        chapters = split_chapters("# A\n```\n---\n```\nend")
        assert len(chapters) == 1

    def test_whitespace_only_chapters_are_dropped(self):
        chapters = split_chapters("---\n\n---\n# Only\n---\n")
        assert [chapter.title for chapter in chapters] == ["Only"]

    def test_trailing_spaces_after_separator(self):
        assert len(split_chapters("A\n---  \nB")) == 2

    def test_longer_rule_is_not_a_separator(self):
        assert len(split_chapters("A\n\n----\n\nB")) == 1


class TestChapterTitle:
    def test_first_heading_wins(self):
        assert chapter_title("Intro\n## Second\n# First") == "Second"

    def test_closing_hashes_are_dropped(self):
        assert chapter_title("## Closing ##") == "Closing"

    def test_no_heading(self):
        assert chapter_title("Just text") == ""

    def test_heading_inside_fence_is_ignored(self):
        assert chapter_title("```\n# code\n```\n# Real") == "Real"
