"""
Module: screenshot_parser.detection.inline_split

Purpose:
    Splits a physical OCR line that carries both the end of the question
    stem and the start of an inline option list, e.g.
    "Which is a base? (a) HCl (b) NaOH (c) H2O (d) NaCl", into a stem
    line and an option line so the downstream parser sees multi-line input.

Key Functions:
    - split_question_line_with_inline_options(): Cut one line at its first marker
    - expand_inline_option_lines(): Apply the split to a list of lines

Dependencies:
    - screenshot_parser.detection.markers: Inline marker scanners

Used By:
    - screenshot_parser.pipeline: Runs before segmentation
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .markers import find_inline_hits, is_marker_token

logger = logging.getLogger(__name__)


def split_question_line_with_inline_options(
    line: str,
    min_hits: int = 2,
) -> Optional[Tuple[str, str]]:
    """
    Cut a line at its first inline option marker.

    Parenthesized letters are tried first, then parenthesized digits, then
    bare capital letters. The line is only cut when the family has at least
    ``min_hits`` markers and text exists on both sides of the cut,
    and the text before the cut is more than a lone marker.

    Args:
        line: One OCR line.
        min_hits: Markers required before the line counts as an option list.

    Returns:
        (question_part, option_part) or None when the line is not glued.

    Example:
        >>> split_question_line_with_inline_options("Pick one. (a) red (b) blue")
        ('Pick one.', '(a) red (b) blue')
    """
    if not line.strip():
        return None

    hits = find_inline_hits(line, min_hits)
    if not hits:
        return None

    idx = hits[0].start
    question_part = line[:idx].rstrip()
    option_part = line[idx:].lstrip()
    if not question_part.strip() or not option_part:
        return None
    # "(1) A and B only" is one option, not a stem glued to a list
    if is_marker_token(question_part):
        return None
    return question_part, option_part


def expand_inline_option_lines(lines: Sequence[str], min_hits: int = 2) -> List[str]:
    """Replace every glued stem/option line with its two parts."""
    out: List[str] = []
    for i, line in enumerate(lines):
        split = split_question_line_with_inline_options(line, min_hits)
        if split is None:
            out.append(line)
            continue
        logger.debug(f"Split inline options out of line {i}")
        out.extend(split)
    return out
