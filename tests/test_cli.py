import json

import pytest

from folio.cli import insert_into_template, main, parse_attributes


class TestInsertIntoTemplate:
    def test_element(self):
        assert insert_into_template("<body><mark-down></mark-down></body>", "<p>x</p>") == (
            "<body><p>x</p></body>"
        )

    def test_self_closing(self):
        assert insert_into_template("<div><mark-down/></div>", "<p>x</p>") == "<div><p>x</p></div>"


class TestParseAttributes:
    def test_pairs(self):
        assert parse_attributes(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}

    def test_missing_separator(self):
        import argparse

        with pytest.raises(argparse.ArgumentTypeError):
            parse_attributes(["broken"])


class TestMain:
    def test_document_to_stdout(self, tmp_path, capsys):
        source = tmp_path / "doc.md"
        source.write_text("# Hi {{who}}", encoding="utf-8")

        assert main([str(source), "--attr", "who=there"]) == 0
        assert "<h1>Hi there</h1>" in capsys.readouterr().out

    def test_template_and_output(self, tmp_path):
        source = tmp_path / "doc.md"
        source.write_text("Body", encoding="utf-8")
        template = tmp_path / "shell.html"
        template.write_text("<main><mark-down></mark-down></main>", encoding="utf-8")
        output = tmp_path / "out.html"

        assert main([str(source), "--template", str(template), "--output", str(output)]) == 0
        assert output.read_text(encoding="utf-8") == "<main><p>Body</p>\n</main>"

    def test_pages_mode(self, tmp_path, capsys):
        source = tmp_path / "book.md"
        source.write_text("# One\n\nA\n\n---\n\n# Two\n\nB", encoding="utf-8")

        assert main([str(source), "--mode", "pages"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["page_count"] == 2
        assert [page["parity"] for page in payload["pages"]] == ["odd", "even"]

    def test_slides_mode(self, tmp_path, capsys):
        source = tmp_path / "talk.md"
        source.write_text("One\n\n---\n\nTwo", encoding="utf-8")

        assert main([str(source), "--mode", "slides"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert [slide["index"] for slide in payload["slides"]] == [1, 2]

    def test_missing_input(self, tmp_path):
        assert main([str(tmp_path / "missing.md")]) == 1
