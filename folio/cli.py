# folio/cli.py
"""
Command-line compiler.

    folio README.md
    folio book.md --mode pages --capacity 30
    folio talk.md --template shell.html --output talk.html --attr author=Ada
"""

import argparse
import json
import logging
import re
import sys
from dataclasses import asdict
from pathlib import Path

from folio.markdown.renderer import (
    compile_chapters,
    compile_document,
    compile_slides,
    paginate_document,
)

logger = logging.getLogger(__name__)

MODES = ("document", "chapters", "slides", "pages")

TEMPLATE_ELEMENT = re.compile(r"<mark-down[^>]*>.*?</mark-down>", re.IGNORECASE | re.DOTALL)
TEMPLATE_SELF_CLOSING = re.compile(r"<mark-down[^>]*/>", re.IGNORECASE)


def insert_into_template(template: str, html: str) -> str:
    """Replace the template's ``<mark-down>`` element with ``html``."""
    if TEMPLATE_ELEMENT.search(template):
        return TEMPLATE_ELEMENT.sub(lambda _: html, template, count=1)
    return TEMPLATE_SELF_CLOSING.sub(lambda _: html, template, count=1)


def parse_attributes(pairs):
    attributes = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {pair!r}")
        attributes[key.strip()] = value
    return attributes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Compile extended Markdown to HTML, chapters, slides or pages.",
    )
    parser.add_argument("input", type=Path, help="Markdown source file")
    parser.add_argument("--template", type=Path, help="HTML template with a <mark-down> element")
    parser.add_argument("--output", type=Path, help="Output file (default: stdout)")
    parser.add_argument("--mode", choices=MODES, default="document")
    parser.add_argument(
        "--attr",
        action="append",
        metavar="KEY=VALUE",
        help="Host attribute for {{key}} placeholders (repeatable)",
    )
    parser.add_argument("--capacity", type=float, help="Page capacity in lines (pages mode)")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def render(text: str, mode: str, context: dict, capacity=None) -> str:
    if mode == "document":
        return compile_document(text, context).html
    if mode == "chapters":
        return json.dumps(asdict(compile_chapters(text, context)), indent=2, default=str)
    if mode == "slides":
        return json.dumps(asdict(compile_slides(text, context)), indent=2, default=str)

    paginated = paginate_document(text, capacity=capacity, context=context)
    payload = {
        "metadata": paginated.metadata,
        "page_count": paginated.page_count,
        "pages": [
            {
                "index": page.index,
                "parity": page.parity,
                "header_text": page.header_text,
                "html": page.html,
                "footnote_ids": page.footnote_ids,
            }
            for page in paginated.pages
        ],
    }
    return json.dumps(payload, indent=2, default=str)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        attributes = parse_attributes(args.attr)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    try:
        text = args.input.read_text(encoding="utf-8")
        output = render(text, args.mode, {"attributes": attributes}, args.capacity)

        if args.template:
            if args.mode != "document":
                parser.error("--template is only supported in document mode")
            output = insert_into_template(args.template.read_text(encoding="utf-8"), output)

        if args.output:
            args.output.write_text(output, encoding="utf-8")
            print(f"Compiled {args.input} to {args.output}", file=sys.stderr)
        else:
            print(output)
    except OSError as exc:
        logger.error(f"Error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
