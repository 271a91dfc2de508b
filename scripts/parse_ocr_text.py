#!/usr/bin/env python3
"""Parse OCR text of multiple-choice questions into JSON drafts.

Reads OCR text from a file (or stdin) and prints one JSON object per
detected question. A PDF page can be parsed from its text layer instead.

Usage:
    python scripts/parse_ocr_text.py scan.txt
    python scripts/parse_ocr_text.py --single scan.txt
    python scripts/parse_ocr_text.py --pdf paper.pdf --page 3
    cat scan.txt | python scripts/parse_ocr_text.py -
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from mcq_toolkit.screenshot_parser import (  # noqa: E402
    parse_screenshot_ocr_to_draft,
    parse_screenshot_ocr_to_drafts,
)

logger = logging.getLogger("parse_ocr_text")


def read_source(source: str) -> str:
    """Read OCR text from a path, or stdin for "-"."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def parse_pdf(path: Path, page_index: int, single: bool) -> list:
    """Drafts from one page of a born-digital PDF."""
    import fitz

    from mcq_toolkit.screenshot_parser.utils.pdf import parse_pdf_page

    with fitz.open(path) as doc:
        result = parse_pdf_page(doc[page_index], multi=not single)
    return [result] if single else result


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Parse OCR text into multiple-choice question drafts")
    parser.add_argument("source", nargs="?", default="-", help="OCR text file, or - for stdin")
    parser.add_argument("--single", action="store_true", help="Treat the input as one question")
    parser.add_argument("--pdf", type=Path, help="Parse a PDF page's text layer instead of OCR text")
    parser.add_argument("--page", type=int, default=0, help="Zero-based page index for --pdf")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log parser decisions")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.pdf is not None:
        drafts = parse_pdf(args.pdf, args.page, args.single)
    else:
        try:
            text = read_source(args.source)
        except OSError as e:
            logger.error(f"Cannot read {args.source}: {e}")
            return 1
        if args.single:
            drafts = [parse_screenshot_ocr_to_draft(text)]
        else:
            drafts = parse_screenshot_ocr_to_drafts(text)

    print(json.dumps([d.to_dict() for d in drafts], indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
