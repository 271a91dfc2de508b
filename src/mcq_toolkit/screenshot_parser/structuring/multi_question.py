"""
Module: screenshot_parser.structuring.multi_question

Purpose:
    Partitions a long line stream (a full-page scan) into one line group
    per question. A new group starts at a line that looks like a question
    start ("2. ...", "Q3", "Question 4") once the current group already
    holds enough lettered option markers.

Key Functions:
    - split_question_segments(): Line index groups, one per question
    - filter_multi_question_drafts(): Drop option-less fragments from a multi-draft result

Dependencies:
    - screenshot_parser.detection.markers: Marker families per line
    - screenshot_parser.utils.text: Question-start detection

Used By:
    - screenshot_parser.pipeline: Multi-question entry points
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import DEFAULT_CONFIG, ParserConfig
from ..detection.markers import MarkerFamily, line_marker_families
from ..models import ScreenshotQuestionDraft
from ..utils.text import looks_like_question_start

logger = logging.getLogger(__name__)


def split_question_segments(
    lines: Sequence[str],
    config: Optional[ParserConfig] = None,
) -> List[List[int]]:
    """
    Group line indexes into per-question segments.

    Args:
        lines: Normalized lines of the whole scan.
        config: Parser configuration. Defaults to ParserConfig().

    Returns:
        Lists of indexes into ``lines``, in input order. Segments holding
        only blank lines are omitted; every other line lands in exactly one
        segment.

    Example:
        >>> lines = ["1. Pick", "A x", "B y", "2. Pick", "A p", "B q"]
        >>> split_question_segments(lines)
        [[0, 1, 2], [3, 4, 5]]
    """
    cfg = config or DEFAULT_CONFIG
    segments: List[List[int]] = []
    buffer: List[int] = []
    markers_seen = 0

    def flush() -> None:
        nonlocal buffer, markers_seen
        if any(lines[i].strip() for i in buffer):
            segments.append(buffer)
        buffer = []
        markers_seen = 0

    for i, line in enumerate(lines):
        markers_seen += sum(
            1 for f in line_marker_families(line, cfg.min_inline_hits) if f is MarkerFamily.LETTER
        )

        if looks_like_question_start(line) and markers_seen >= cfg.min_question_markers and buffer:
            logger.debug(f"New question starts at line {i}")
            flush()

        buffer.append(i)
    flush()

    return segments


def filter_multi_question_drafts(
    drafts: Sequence[ScreenshotQuestionDraft],
    config: Optional[ParserConfig] = None,
) -> List[ScreenshotQuestionDraft]:
    """
    Keep meaningful drafts from a multi-question parse.

    Empty drafts are always dropped. When more than one draft remains,
    drafts without options are dropped too; a lone draft is kept even
    without options, and so are all drafts when none has options.
    """
    cfg = config or DEFAULT_CONFIG
    kept = [
        d for d in drafts
        if len(d.options) >= cfg.min_options or d.question_text.strip()
    ]
    if len(kept) <= 1:
        return kept
    with_options = [d for d in kept if len(d.options) >= cfg.min_options]
    # No segment recovered options: return the fragments rather than nothing
    return with_options or kept
