"""
Module: screenshot_parser.detection.geometry

Purpose:
    Geometry-aware helpers for structured OCR results: dropping words that
    sit on embedded diagrams, grouping loose words into lines, rebuilding
    paragraph breaks from vertical gaps, and confirming option markers by
    the ink density of their glyph boxes.

    Ink confirmation is a capability: InkMarkerConfirmer only exists when
    both a page image and word boxes are available. The text-only parser
    never needs it.

Key Functions:
    - to_luminance(): PIL image or numpy array to a luminance array
    - scan_box_ink_ratio(): Dark-pixel fraction inside a box
    - drop_excluded(): Remove words/lines covered by exclude boxes
    - group_words_into_lines(): Synthesize RecognizedLine from words
    - order_recognized_lines(): Non-blank lines sorted top to bottom
    - layout_recognized_lines(): Line texts with gap-based paragraph breaks
    - reconcile_options(): Merge geometry-confirmed and text-parsed options

Key Classes:
    - InkMarkerConfirmer: Bold-marker confirmation for one image
    - ConfirmedOptions: Confirmed options plus the first option line

Dependencies:
    - numpy: Pixel array operations
    - PIL.Image: Page image input

Used By:
    - screenshot_parser.pipeline: Structured OCR entry points
"""

from __future__ import annotations

import logging
import math
import re
import statistics
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np
from PIL import Image

from mcq_toolkit.common.bbox_utils import BoundingBox, union_all

from ..config import DEFAULT_CONFIG, ParserConfig
from ..models import ParsedOption, RecognizedLine, RecognizedWord
from ..utils.text import (
    clean_option_body,
    normalize_line,
    normalize_ocr_line_artifacts,
    normalize_ocr_text_to_paragraphs,
)
from .markers import (
    MarkerFamily,
    match_inline_letter_options,
    match_inline_parenthesized_letter_options,
    match_letter_option_marker,
    match_numeric_option_marker,
)

logger = logging.getLogger(__name__)

# Rec. 709 luma weights
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)

# A single-letter word, optionally written as "(a)", "A)" or "A."
MARKER_WORD_RE = re.compile(r"^\(?([A-D])\)?[.):]?$", re.IGNORECASE)

ImageLike = Union[Image.Image, np.ndarray]
_Boxed = TypeVar("_Boxed", RecognizedWord, RecognizedLine)


def to_luminance(image: ImageLike) -> np.ndarray:
    """
    Convert an image to a 2-D float luminance array (0-255).

    Args:
        image: PIL image (any mode) or numpy array shaped (H, W),
            (H, W, 3) or (H, W, 4).

    Returns:
        float32 array of shape (H, W).

    Raises:
        TypeError: If image is neither a PIL image nor a numpy array.
        ValueError: If the array shape is not a supported image layout.
    """
    if isinstance(image, Image.Image):
        if image.mode == "L":
            return np.asarray(image, dtype=np.float32)
        arr = np.asarray(image.convert("RGB"), dtype=np.float32)
    elif isinstance(image, np.ndarray):
        arr = image.astype(np.float32)
        if arr.ndim == 2:
            return arr
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"Unsupported image array shape: {arr.shape}")
    else:
        raise TypeError(f"Unsupported image type: {type(image).__name__}")

    r, g, b = LUMA_WEIGHTS
    return arr[..., 0] * r + arr[..., 1] * g + arr[..., 2] * b


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def scan_box_ink_ratio(luminance: np.ndarray, bbox: BoundingBox, threshold: float) -> float:
    """
    Fraction of pixels inside ``bbox`` darker than ``threshold``.

    Box edges are inclusive and clamped to the image. Degenerate boxes
    give 0.0.

    Example:
        >>> lum = np.zeros((10, 10), dtype=np.float32)
        >>> scan_box_ink_ratio(lum, BoundingBox(0, 0, 4, 4), 110)
        1.0
    """
    height, width = luminance.shape[:2]
    if width == 0 or height == 0:
        return 0.0
    box = bbox.normalized()
    x0 = _clamp(math.floor(box.x0), 0, width - 1)
    x1 = _clamp(math.floor(box.x1), 0, width - 1)
    y0 = _clamp(math.floor(box.y0), 0, height - 1)
    y1 = _clamp(math.floor(box.y1), 0, height - 1)
    if x1 <= x0 or y1 <= y0:
        return 0.0

    region = luminance[y0:y1 + 1, x0:x1 + 1]
    return float(np.count_nonzero(region < threshold)) / region.size


def drop_excluded(
    items: Sequence[_Boxed],
    exclude_boxes: Sequence[BoundingBox],
    overlap_ratio: float,
) -> List[_Boxed]:
    """
    Remove words or lines lying on excluded regions (embedded diagrams).

    An item is dropped when the fraction of its own area covered by any
    exclude box reaches ``overlap_ratio``.
    """
    if not exclude_boxes:
        return list(items)
    boxes = [b.normalized() for b in exclude_boxes]
    kept: List[_Boxed] = []
    for item in items:
        own = item.bbox.normalized()
        if any(own.overlap_ratio(box) >= overlap_ratio for box in boxes):
            continue
        kept.append(item)
    dropped = len(items) - len(kept)
    if dropped:
        logger.debug(f"Dropped {dropped} OCR items overlapping exclude boxes")
    return kept


def group_words_into_lines(
    words: Sequence[RecognizedWord],
    config: Optional[ParserConfig] = None,
) -> List[RecognizedLine]:
    """
    Group words into lines by vertical proximity.

    Words whose vertical centre is within ``word_grouping_ratio`` median
    word heights of the current line's centre join that line. Each line's
    words are ordered left to right and its box is their union.

    Returns:
        Lines sorted top to bottom.
    """
    cfg = config or DEFAULT_CONFIG
    usable = [w for w in words if w.text.strip()]
    if not usable:
        return []

    heights = [max(1.0, w.bbox.normalized().height) for w in usable]
    tolerance = max(1.0, statistics.median(heights) * cfg.word_grouping_ratio)

    groups: List[List[RecognizedWord]] = []
    centre = 0.0
    for word in sorted(usable, key=lambda w: (w.bbox.center_y, w.bbox.x0)):
        cy = word.bbox.center_y
        if groups and abs(cy - centre) <= tolerance:
            groups[-1].append(word)
            centre = sum(w.bbox.center_y for w in groups[-1]) / len(groups[-1])
            continue
        groups.append([word])
        centre = cy

    lines: List[RecognizedLine] = []
    for group in groups:
        ordered = sorted(group, key=lambda w: w.bbox.x0)
        bbox = union_all(w.bbox.normalized() for w in ordered)
        text = " ".join(w.text.strip() for w in ordered)
        lines.append(RecognizedLine(text=text, bbox=bbox, words=tuple(ordered)))
    return sorted(lines, key=lambda l: l.bbox.y0)


def order_recognized_lines(lines: Sequence[RecognizedLine]) -> List[RecognizedLine]:
    """Lines with visible text, sorted top to bottom (stable for ties)."""
    visible = [l for l in lines if normalize_ocr_line_artifacts(l.text).strip()]
    return sorted(visible, key=lambda l: l.bbox.normalized().y0)


def layout_recognized_lines(
    lines: Sequence[RecognizedLine],
    config: Optional[ParserConfig] = None,
) -> Tuple[List[str], List[int]]:
    """
    Line texts with a blank line wherever the vertical gap is paragraph-sized.

    The gap threshold is ``paragraph_gap_ratio`` times the median line
    height, but never below ``min_paragraph_gap_px``.

    Args:
        lines: Lines already ordered by order_recognized_lines().
        config: Parser configuration. Defaults to ParserConfig().

    Returns:
        Tuple of (texts, positions) where positions[k] is the index in
        texts of lines[k].
    """
    cfg = config or DEFAULT_CONFIG
    if not lines:
        return [], []

    heights = [max(1.0, l.bbox.normalized().height) for l in lines]
    median_height = statistics.median(heights) if heights else cfg.default_line_height_px
    paragraph_gap = max(cfg.min_paragraph_gap_px, median_height * cfg.paragraph_gap_ratio)

    texts: List[str] = []
    positions: List[int] = []
    prev: Optional[BoundingBox] = None
    for line in lines:
        box = line.bbox.normalized()
        if prev is not None and box.y0 - prev.y1 >= paragraph_gap:
            texts.append("")
        positions.append(len(texts))
        texts.append(normalize_ocr_line_artifacts(line.text))
        prev = box
    return texts, positions


@dataclass(frozen=True)
class ConfirmedOptions:
    """
    Options confirmed by ink density.

    Attributes:
        options: Confirmed options sorted by label.
        first_line: Index of the first line that yielded an option, or None.
    """
    options: Tuple[ParsedOption, ...] = ()
    first_line: Optional[int] = None


class InkMarkerConfirmer:
    """
    Confirms option markers by how dark their glyph boxes are.

    Rendered option letters in exam scans are usually bold; OCR letters
    that are really stray marks or ordinary text are not. A letter word
    whose ink ratio exceeds ``ink_ratio_cutoff`` counts as a bold marker.

    Example:
        >>> confirmer = InkMarkerConfirmer(page_image, result.words)
        >>> confirmed = confirmer.confirm_options(lines)
        >>> [o.label for o in confirmed.options]
        ['A', 'B', 'C', 'D']
    """

    def __init__(
        self,
        image: ImageLike,
        words: Sequence[RecognizedWord] = (),
        config: Optional[ParserConfig] = None,
    ) -> None:
        self.luminance = to_luminance(image)
        self.words = tuple(words)
        self.config = config or DEFAULT_CONFIG

    def ink_ratio(self, bbox: BoundingBox) -> float:
        return scan_box_ink_ratio(self.luminance, bbox, self.config.ink_luminance_threshold)

    def is_bold(self, word: RecognizedWord) -> bool:
        ratio = self.ink_ratio(word.bbox)
        if ratio > self.config.ink_ratio_cutoff:
            return True
        logger.debug(f"Word {word.text!r} ink ratio {ratio:.3f} below cutoff")
        return False

    def line_words(self, line: RecognizedLine) -> List[RecognizedWord]:
        """Words of a line: its own words, else page words centred within its box."""
        if line.words:
            return list(line.words)
        box = line.bbox.normalized()
        tol = self.config.line_membership_tolerance_px
        return [
            w for w in self.words
            if box.y0 - tol <= w.bbox.center_y <= box.y1 + tol
        ]

    def bold_letter_markers(self, line: RecognizedLine) -> List[str]:
        """Labels of bold single-letter words on the line, left to right."""
        found: List[Tuple[float, str]] = []
        for word in self.line_words(line):
            m = MARKER_WORD_RE.match(word.text.strip())
            if not m or not self.is_bold(word):
                continue
            found.append((word.bbox.x0, m.group(1).upper()))
        return [label for _, label in sorted(found)]

    def confirm_options(self, lines: Sequence[RecognizedLine]) -> ConfirmedOptions:
        """
        Collect options whose markers are confirmed bold.

        An inline marker line is accepted only when at least
        ``min_bold_markers`` of its letters are bold; a prefix marker line
        when its own letter is bold. The first option seen for a label wins.
        Lines that open with a numeric marker are skipped; letters on them
        belong to the numbered option's body.
        """
        cfg = self.config
        bodies: Dict[str, str] = {}
        first_line: Optional[int] = None

        for i, line in enumerate(lines):
            text = normalize_line(normalize_ocr_line_artifacts(line.text))
            if not text:
                continue
            if match_numeric_option_marker(text) is not None:
                continue

            inline = (
                match_inline_parenthesized_letter_options(text, cfg.min_inline_hits)
                or match_inline_letter_options(text, cfg.min_inline_hits)
            )
            if inline:
                bold = set(self.bold_letter_markers(line))
                if sum(1 for m in inline if m.label in bold) < cfg.min_bold_markers:
                    continue
                for m in inline:
                    bodies.setdefault(m.label, m.text)
                if first_line is None:
                    first_line = i
                continue

            m = match_letter_option_marker(text)
            if m is None or m.label not in self.bold_letter_markers(line):
                continue
            bodies.setdefault(m.label, m.text)
            if first_line is None:
                first_line = i

        options = []
        for label in sorted(bodies):
            body = clean_option_body(normalize_ocr_text_to_paragraphs(bodies[label]))
            if body:
                options.append(ParsedOption(label=label, text=body, source_lines=(bodies[label],)))
        return ConfirmedOptions(options=tuple(options), first_line=first_line)


def reconcile_options(
    text_options: Sequence[ParsedOption],
    geometry_options: Sequence[ParsedOption],
    min_options: int = 2,
) -> List[ParsedOption]:
    """
    Merge text-parsed and geometry-confirmed options by label.

    With fewer than ``min_options`` confirmed options the text result is
    returned unchanged. It is also kept when the confirmed markers belong
    to the other family (bold statement letters above numbered options).
    Otherwise every label from either source is kept, the confirmed body
    wins where both exist, and the result is sorted by label.

    Example:
        >>> text = [ParsedOption("A", "3"), ParsedOption("B", "4x")]
        >>> geo = [ParsedOption("B", "4"), ParsedOption("C", "5")]
        >>> [(o.label, o.text) for o in reconcile_options(text, geo)]
        [('A', '3'), ('B', '4'), ('C', '5')]
    """
    if len(geometry_options) < min_options:
        return list(text_options)
    text_families = {MarkerFamily.of(o.label) for o in text_options}
    if text_families and text_families != {MarkerFamily.of(o.label) for o in geometry_options}:
        logger.debug("Confirmed markers differ in family from the text options; keeping text options")
        return list(text_options)
    merged: Dict[str, ParsedOption] = {o.label: o for o in text_options}
    merged.update({o.label: o for o in geometry_options})
    return [merged[label] for label in sorted(merged)]
