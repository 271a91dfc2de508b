"""
Module: screenshot_parser.utils.text

Purpose:
    Text normalization utilities for OCR output. Cleans per-line OCR
    artifacts, rebuilds paragraphs from wrapped lines, strips question
    numbering and trailing mark/year tags, and tidies option bodies.

Key Functions:
    - normalize_ocr_line_artifacts(): Clean one raw OCR line
    - normalize_ocr_text_to_paragraphs(): Unwrap lines, keep blank-line paragraphs
    - join_lines_preserving_line_paragraphs(): One paragraph per non-blank line
    - strip_leading_question_number(): Remove "Q3." / "Question 12)" / "7." prefixes
    - strip_trailing_tag(): Remove a trailing "[2014]" / "[1]" tag
    - clean_option_body(): Spacing and enumeration glue repair for option text

Dependencies:
    - re (std)

Used By:
    - screenshot_parser.pipeline: Line and stem normalization
    - screenshot_parser.structuring.assembler: Option body normalization
    - screenshot_parser.detection.geometry: Paragraphs from line geometry
"""

from __future__ import annotations

import re
from typing import Iterable, List, Tuple

# Invisible characters some OCR engines emit between glyphs
_ZERO_WIDTH_RE = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")
# Answer lines ("........", "______") carry no content
_ANSWER_LINE_RE = re.compile(r"\.{4,}|_{3,}")
# Scan border picked up as a vertical bar at the line edges
_LEADING_BAR_RE = re.compile(r"^\s*[|¦]\s+")
_TRAILING_BAR_RE = re.compile(r"\s+[|¦]\s*$")
_WHITESPACE_RE = re.compile(r"\s+")

QUESTION_NUMBER_PATTERNS = (
    re.compile(r"^\(?\s*Q\s*\.?\s*(\d{1,3})\s*[).:\-–—]?\s+", re.IGNORECASE),
    re.compile(r"^\(?\s*Question\s+(\d{1,3})\s*[).:\-–—]?\s+", re.IGNORECASE),
    re.compile(r"^(\d{1,3})\s*[).:\-–—]\s+"),
)

# "[2014]" year tags and "[1]" mark tags
_TRAILING_TAG_RE = re.compile(r"\s*\[\s*\d{1,4}\s*\]\s*$")
_TRAILING_MARK_TAG_RE = re.compile(r"\s*\[\s*\d{1,3}\s*\]\s*$")

# Option-body cleanup
_DOUBLE_SPACE_RE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_COMMA_RE = re.compile(r"[ \t]+,")
# Thousands groups such as "1,000" keep their comma
_COMMA_NO_SPACE_RE = re.compile(r",(?=\S)(?!(?<=\d,)\d{3}(?!\d))")
# Enumerations glued by OCR: "DandE", "AandBandC", "1or2"
_GLUED_ENUMERATION_RE = re.compile(r"\b(?:[A-E1-9](?:and|or))+[A-E1-9]\b")
_CONJUNCTION_RE = re.compile(r"(and|or)")


def normalize_line(line: str) -> str:
    """
    Collapse all whitespace runs to one space and trim.

    Example:
        >>> normalize_line("  A)   3  ")
        'A) 3'
    """
    return _WHITESPACE_RE.sub(" ", line.replace("\u00a0", " ")).strip()


def normalize_ocr_line_artifacts(line: str) -> str:
    """
    Clean OCR noise from a single raw line.

    Removes invisible glyphs, answer-line dot/underscore runs and stray
    border bars, and trims trailing whitespace. Leading content is kept
    as-is so indentation-sensitive callers still see it.

    Args:
        line: One raw OCR line.

    Returns:
        Cleaned line; applying this twice gives the same result.

    Example:
        >>> normalize_ocr_line_artifacts("Explain: ........ |")
        'Explain:'
    """
    text = _ZERO_WIDTH_RE.sub("", line).replace("\u00a0", " ")
    text = _ANSWER_LINE_RE.sub(" ", text)
    text = _LEADING_BAR_RE.sub("", text)
    text = _TRAILING_BAR_RE.sub("", text)
    return text.rstrip()


def _join_with_unwrap(prev: str, nxt: str) -> str:
    if not prev:
        return nxt
    if not nxt:
        return prev
    # De-hyphenate words broken across wrapped lines
    if prev.endswith("-") and len(prev) > 1 and prev[-2].isalpha():
        return prev[:-1] + nxt
    return f"{prev} {nxt}"


def normalize_ocr_text_to_paragraphs(text: str) -> str:
    """
    Convert OCR text into paragraph text.

    Single line breaks (soft wraps) become spaces; a blank line is a hard
    paragraph break rendered as a double newline.

    Args:
        text: Newline-delimited OCR text.

    Returns:
        Paragraphs joined by "\\n\\n". Idempotent.

    Example:
        >>> normalize_ocr_text_to_paragraphs("The cell\\ndivides.\\n\\nWhy?")
        'The cell divides.\\n\\nWhy?'
    """
    paragraphs: List[str] = []
    current = ""

    for raw in text.splitlines():
        cleaned = normalize_line(raw)
        if not cleaned:
            if current:
                paragraphs.append(current)
            current = ""
            continue
        current = _join_with_unwrap(current, cleaned)

    if current:
        paragraphs.append(current)

    return "\n\n".join(paragraphs)


def normalize_ocr_lines_to_paragraphs(lines: Iterable[str]) -> str:
    return normalize_ocr_text_to_paragraphs("\n".join(lines))


def join_lines_preserving_line_paragraphs(lines: Iterable[str]) -> str:
    """Render every non-blank line as its own paragraph."""
    return "\n\n".join(
        cleaned for cleaned in (normalize_line(line) for line in lines) if cleaned
    )


def strip_leading_question_number(text: str) -> Tuple[str, bool]:
    """
    Remove a leading question number such as "Q1.", "Question 7:" or "12)".

    Args:
        text: Question text.

    Returns:
        Tuple of (text without the prefix, whether a prefix was removed).

    Example:
        >>> strip_leading_question_number("Q3. Which gas?")
        ('Which gas?', True)
        >>> strip_leading_question_number("1.0 g of magnesium")
        ('1.0 g of magnesium', False)
    """
    s = text.lstrip()
    for pattern in QUESTION_NUMBER_PATTERNS:
        match = pattern.match(s)
        if match:
            return s[match.end():].lstrip(), True
    return s, False


def looks_like_question_start(line: str) -> bool:
    s = line.strip()
    if not s:
        return False
    return strip_leading_question_number(s)[1]


def strip_trailing_tag(text: str) -> str:
    """Remove a trailing bracketed year or mark tag ("[2014]", "[1]")."""
    return _TRAILING_TAG_RE.sub("", text).strip()


def strip_trailing_mark_tag(text: str) -> str:
    return _TRAILING_MARK_TAG_RE.sub("", text).rstrip()


def _unglue_enumeration(match: re.Match) -> str:
    return _CONJUNCTION_RE.sub(r" \1 ", match.group(0))


def clean_option_body(text: str) -> str:
    """
    Tidy a normalized option body.

    Strips a trailing mark tag, collapses doubled spaces, normalizes comma
    spacing and repairs short label enumerations that OCR glued together.
    Only single tokens from the label alphabet (A-E, 1-9) are rewritten,
    so ordinary prose is left alone.

    Args:
        text: Option body, possibly containing "\\n\\n" paragraph breaks.

    Returns:
        Cleaned body. Idempotent.

    Example:
        >>> clean_option_body("B,DandE only [1]")
        'B, D and E only'
    """
    s = strip_trailing_mark_tag(text)
    s = _DOUBLE_SPACE_RE.sub(" ", s)
    s = _SPACE_BEFORE_COMMA_RE.sub(",", s)
    s = _COMMA_NO_SPACE_RE.sub(", ", s)
    s = _GLUED_ENUMERATION_RE.sub(_unglue_enumeration, s)
    return s.strip()
