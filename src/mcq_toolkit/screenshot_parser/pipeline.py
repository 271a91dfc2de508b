"""
Module: screenshot_parser.pipeline

Purpose:
    Entry points that turn OCR output into question drafts. Plain text runs
    through line cleanup, inline splitting, segmentation and option
    assembly. Structured results additionally drop diagram words, rebuild
    paragraph breaks from line gaps and, when a page image is supplied,
    confirm option markers by ink density.

Key Functions:
    - parse_screenshot_ocr_to_draft(): One question from plain text
    - parse_screenshot_ocr_to_drafts(): Several questions from plain text
    - parse_structured_ocr_to_draft(): One question from a StructuredOcrResult
    - parse_structured_ocr_to_drafts(): Several questions from a StructuredOcrResult

Dependencies:
    - screenshot_parser.structuring: Segmentation, assembly, question splitting
    - screenshot_parser.detection: Markers, inline splitting, geometry

Used By:
    - screenshot_parser.utils.pdf: parse_pdf_page()
    - scripts/parse_ocr_text.py: Command-line front end
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple, Union

from .config import DEFAULT_CONFIG, ParserConfig
from .detection.geometry import (
    ImageLike,
    InkMarkerConfirmer,
    drop_excluded,
    group_words_into_lines,
    layout_recognized_lines,
    order_recognized_lines,
    reconcile_options,
)
from .detection.inline_split import (
    expand_inline_option_lines,
    split_question_line_with_inline_options,
)
from .detection.markers import (
    MarkerFamily,
    line_marker_families,
    match_standalone_letter_label,
)
from .models import (
    RecognizedLine,
    RecognizedWord,
    ScreenshotQuestionDraft,
    StructuredOcrResult,
)
from .structuring.assembler import assemble_options
from .structuring.multi_question import filter_multi_question_drafts, split_question_segments
from .structuring.segmentation import find_option_start
from .utils.text import (
    join_lines_preserving_line_paragraphs,
    normalize_ocr_line_artifacts,
    normalize_ocr_lines_to_paragraphs,
    strip_leading_question_number,
    strip_trailing_tag,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Shared draft construction
# =============================================================================

def _prepare_lines(lines: Sequence[str], config: ParserConfig) -> List[str]:
    cleaned = [normalize_ocr_line_artifacts(line) for line in lines]
    return expand_inline_option_lines(cleaned, config.min_inline_hits)


def _finalize_question_text(text: str) -> str:
    stripped, _ = strip_leading_question_number(text)
    return strip_trailing_tag(stripped)


def _non_blank_indexes(lines: Sequence[str], start: int, stop: int) -> Tuple[int, ...]:
    return tuple(i for i in range(start, stop) if lines[i].strip())


def _question_only_draft(raw_lines: Sequence[str]) -> ScreenshotQuestionDraft:
    raw = tuple(raw_lines)
    return ScreenshotQuestionDraft(
        question_text=_finalize_question_text(normalize_ocr_lines_to_paragraphs(raw)),
        raw_lines=raw,
        question_line_indexes=_non_blank_indexes(raw, 0, len(raw)),
    )


def _stem_end(lines: Sequence[str], option_start: int) -> int:
    """Exclusive end of the stem, dropping standalone labels left dangling above the options."""
    end = option_start
    while True:
        last = next((i for i in range(end - 1, -1, -1) if lines[i].strip()), None)
        if last is None or match_standalone_letter_label(lines[last]) is None:
            return end
        logger.debug(f"Dropping dangling label line {last} from the stem")
        end = last


def _render_stem(stem_lines: Sequence[str], option_family: MarkerFamily, config: ParserConfig) -> str:
    statement_lines = sum(
        1 for line in stem_lines
        if any(f is not option_family for f in line_marker_families(line, config.min_inline_hits))
    )
    # Numbered statements read better kept one per paragraph
    if statement_lines >= config.min_statement_markers:
        return join_lines_preserving_line_paragraphs(stem_lines)
    return normalize_ocr_lines_to_paragraphs(stem_lines)


def _build_draft(lines: Sequence[str], config: ParserConfig) -> ScreenshotQuestionDraft:
    raw = tuple(lines)
    if not any(line.strip() for line in raw):
        return ScreenshotQuestionDraft(question_text="", raw_lines=raw)

    start = find_option_start(raw, config)
    if start is None:
        return _question_only_draft(raw)

    options = assemble_options(raw[start:], config)
    if len(options) < config.min_options:
        logger.debug(f"Only {len(options)} option(s) recovered; keeping question-only draft")
        return _question_only_draft(raw)

    end = _stem_end(raw, start)
    stem = _render_stem(raw[:end], MarkerFamily.of(options[0].label), config)
    return ScreenshotQuestionDraft(
        question_text=_finalize_question_text(stem),
        options=tuple(options),
        raw_lines=raw,
        question_line_indexes=_non_blank_indexes(raw, 0, end),
        option_line_indexes=_non_blank_indexes(raw, start, len(raw)),
    )


# =============================================================================
# Plain-text entry points
# =============================================================================

def parse_screenshot_ocr_to_draft(
    text: str,
    *,
    config: Optional[ParserConfig] = None,
) -> ScreenshotQuestionDraft:
    """
    Parse OCR text of one multiple-choice question into a draft.

    Args:
        text: Newline-delimited OCR text.
        config: Parser configuration. Defaults to ParserConfig().

    Returns:
        ScreenshotQuestionDraft. When fewer than two options are recovered
        the options are empty and the whole input becomes the question text.

    Example:
        >>> draft = parse_screenshot_ocr_to_draft("Q1. What is 2 + 2?\\nA) 3\\nB) 4")
        >>> draft.question_text, [o.text for o in draft.options]
        ('What is 2 + 2?', ['3', '4'])
    """
    cfg = config or DEFAULT_CONFIG
    return _build_draft(_prepare_lines(text.splitlines(), cfg), cfg)


def parse_screenshot_ocr_to_drafts(
    text: str,
    *,
    config: Optional[ParserConfig] = None,
) -> List[ScreenshotQuestionDraft]:
    """
    Parse OCR text that may hold several questions back to back.

    The line stream is cut at question starts ("2. ...", "Q3") once the
    running segment has gathered option markers; each segment is parsed
    on its own.

    Returns:
        Drafts in input order. With more than one draft, option-less
        fragments are dropped.
    """
    cfg = config or DEFAULT_CONFIG
    lines = _prepare_lines(text.splitlines(), cfg)
    drafts = [
        _build_draft([lines[i] for i in segment], cfg)
        for segment in split_question_segments(lines, cfg)
    ]
    logger.debug(f"Parsed {len(drafts)} question segment(s)")
    return filter_multi_question_drafts(drafts, cfg)


# =============================================================================
# Structured-result entry points
# =============================================================================

def _has_finite_box(item: Union[RecognizedWord, RecognizedLine]) -> bool:
    b = item.bbox
    return all(math.isfinite(v) for v in (b.x0, b.y0, b.x1, b.y1))


def _usable_geometry(items: Sequence, kind: str) -> list:
    usable = [item for item in items if _has_finite_box(item)]
    if len(usable) != len(items):
        logger.warning(f"Ignoring {len(items) - len(usable)} OCR {kind} with non-finite boxes")
    return usable


def _structured_lines(
    result: StructuredOcrResult,
    config: ParserConfig,
) -> Tuple[List[RecognizedLine], List[RecognizedWord]]:
    """(ordered lines, usable words) after exclusion and word grouping."""
    ratio = config.exclude_overlap_ratio
    words = drop_excluded(_usable_geometry(result.words, "words"), result.exclude_boxes, ratio)
    lines = drop_excluded(_usable_geometry(result.lines, "lines"), result.exclude_boxes, ratio)
    if not lines:
        lines = group_words_into_lines(words, config)
    return order_recognized_lines(lines), words


def _make_confirmer(
    image: Optional[ImageLike],
    words: Sequence[RecognizedWord],
    config: ParserConfig,
) -> Optional[InkMarkerConfirmer]:
    if image is None:
        return None
    return InkMarkerConfirmer(image, words, config)


def _parse_recognized_lines(
    lines: Sequence[RecognizedLine],
    confirmer: Optional[InkMarkerConfirmer],
    config: ParserConfig,
) -> ScreenshotQuestionDraft:
    texts, positions = layout_recognized_lines(lines, config)
    draft = _build_draft(expand_inline_option_lines(texts, config.min_inline_hits), config)
    if confirmer is None:
        return draft

    confirmed = confirmer.confirm_options(lines)
    if len(confirmed.options) < config.min_options:
        return draft
    if draft.options:
        merged = reconcile_options(draft.options, confirmed.options, config.min_options)
        return replace(draft, options=tuple(merged))

    # Text parse found no option block; rebuild the stem above the first bold marker line
    first = positions[confirmed.first_line]
    stem = list(texts[:first])
    glued = split_question_line_with_inline_options(texts[first], config.min_inline_hits)
    if glued is not None:
        stem.append(glued[0])
    logger.debug(f"Options confirmed by ink from line {first}; stem rebuilt above it")
    return ScreenshotQuestionDraft(
        question_text=_finalize_question_text(normalize_ocr_lines_to_paragraphs(stem)),
        options=confirmed.options,
        raw_lines=tuple(texts),
        question_line_indexes=_non_blank_indexes(texts, 0, first),
        option_line_indexes=_non_blank_indexes(texts, first, len(texts)),
    )


def parse_structured_ocr_to_draft(
    result: StructuredOcrResult,
    image: Optional[ImageLike] = None,
    *,
    config: Optional[ParserConfig] = None,
) -> ScreenshotQuestionDraft:
    """
    Parse a structured OCR result of one question into a draft.

    Words and lines on exclude boxes are dropped, lines are synthesized
    from words when the engine grouped none, and paragraph breaks come
    from vertical gaps. Results without any geometry are parsed from
    their text.

    Args:
        result: Structured OCR output.
        image: Page image the boxes refer to. Enables ink confirmation of
            option markers when given.
        config: Parser configuration. Defaults to ParserConfig().

    Returns:
        ScreenshotQuestionDraft.

    Raises:
        TypeError, ValueError: If image is not a usable image.
    """
    cfg = config or DEFAULT_CONFIG
    if not result.has_geometry:
        return parse_screenshot_ocr_to_draft(result.text, config=cfg)

    lines, words = _structured_lines(result, cfg)
    confirmer = _make_confirmer(image, words, cfg)
    return _parse_recognized_lines(lines, confirmer, cfg)


def parse_structured_ocr_to_drafts(
    result: StructuredOcrResult,
    image: Optional[ImageLike] = None,
    *,
    config: Optional[ParserConfig] = None,
) -> List[ScreenshotQuestionDraft]:
    """
    Parse a structured OCR result that may hold several questions.

    Lines are split into per-question segments first; each segment then
    goes through the same path as parse_structured_ocr_to_draft(), with
    ink confirmation limited to its own lines.
    """
    cfg = config or DEFAULT_CONFIG
    if not result.has_geometry:
        return parse_screenshot_ocr_to_drafts(result.text, config=cfg)

    lines, words = _structured_lines(result, cfg)
    confirmer = _make_confirmer(image, words, cfg)
    segments = split_question_segments([normalize_ocr_line_artifacts(l.text) for l in lines], cfg)
    drafts = [
        _parse_recognized_lines([lines[i] for i in segment], confirmer, cfg)
        for segment in segments
    ]
    return filter_multi_question_drafts(drafts, cfg)
