"""
Module: screenshot_parser.utils.pdf

Purpose:
    Structured OCR results from a PDF page's text layer. Born-digital exam
    papers already carry word boxes, so the page itself can stand in for
    an OCR engine: words become RecognizedWord, PyMuPDF's line numbering
    becomes RecognizedLine, and embedded images become exclude boxes.
    Coordinates are converted to pixels of the page region rendered at
    the same DPI, so the boxes line up with render_page_region().

Key Functions:
    - render_page_region(): Grayscale image of a page region
    - extract_ocr_result(): StructuredOcrResult from the text layer
    - parse_pdf_page(): Render, extract and parse in one call

Dependencies:
    - fitz (PyMuPDF): Text layer and rendering
    - PIL.Image: Rendered image

Used By:
    - scripts/parse_ocr_text.py: --pdf input
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, Union

import fitz
from PIL import Image

from mcq_toolkit.common.bbox_utils import bbox_to_pixels, union_all

from ..config import ParserConfig
from ..models import RecognizedLine, RecognizedWord, ScreenshotQuestionDraft, StructuredOcrResult
from ..pipeline import parse_structured_ocr_to_draft, parse_structured_ocr_to_drafts

logger = logging.getLogger(__name__)

DEFAULT_DPI = 200


def _scale(dpi: int) -> float:
    return dpi / 72.0


def _resolve_clip(page: fitz.Page, clip: Optional[fitz.Rect]) -> fitz.Rect:
    rect = fitz.Rect(page.rect) if clip is None else fitz.Rect(clip)
    if rect.width <= 0 or rect.height <= 0:
        raise ValueError(f"Invalid clip region: {rect}")
    return rect


def render_page_region(
    page: fitz.Page,
    clip: Optional[fitz.Rect] = None,
    dpi: int = DEFAULT_DPI,
) -> Image.Image:
    """
    Render a page region to a grayscale image.

    Args:
        page: PyMuPDF page object.
        clip: Region in PDF points. Defaults to the whole page.
        dpi: Render resolution. Defaults to 200.

    Returns:
        PIL image in mode "L".

    Raises:
        ValueError: If clip has zero width or height.
    """
    rect = _resolve_clip(page, clip)
    matrix = fitz.Matrix(_scale(dpi), _scale(dpi))
    pix = page.get_pixmap(matrix=matrix, clip=rect, alpha=False, colorspace=fitz.csGRAY)
    return Image.frombytes("L", (pix.width, pix.height), pix.samples)


def _page_words(page: fitz.Page, clip: fitz.Rect) -> list:
    try:
        return page.get_text("words", clip=clip) or []
    except (RuntimeError, ValueError) as e:
        logger.warning(f"Failed to extract words from page: {e}")
        return []


def _image_boxes(page: fitz.Page, clip: fitz.Rect) -> List[Tuple[float, float, float, float]]:
    try:
        infos = page.get_image_info()
    except (RuntimeError, ValueError) as e:
        logger.warning(f"Failed to list images on page: {e}")
        return []
    boxes = []
    for info in infos:
        rect = fitz.Rect(info.get("bbox", (0, 0, 0, 0))) & clip
        if rect.is_empty:
            continue
        boxes.append((rect.x0, rect.y0, rect.x1, rect.y1))
    return boxes


def extract_ocr_result(
    page: fitz.Page,
    clip: Optional[fitz.Rect] = None,
    dpi: int = DEFAULT_DPI,
) -> StructuredOcrResult:
    """
    Build a StructuredOcrResult from a page's text layer.

    Args:
        page: PyMuPDF page object.
        clip: Region in PDF points. Defaults to the whole page.
        dpi: Resolution of the matching rendered image. Defaults to 200.

    Returns:
        Words, lines and image exclude boxes in pixels relative to the clip
        origin. Empty when the text layer cannot be read.

    Raises:
        ValueError: If clip has zero width or height.

    Example:
        >>> result = extract_ocr_result(doc[0], clip=fitz.Rect(0, 0, 595, 300))
        >>> result.lines[0].text
        'Q1. What is 2 + 2?'
    """
    rect = _resolve_clip(page, clip)
    origin = (rect.x0, rect.y0)
    scale = _scale(dpi)

    grouped: Dict[Tuple[int, int], List[RecognizedWord]] = {}
    for x0, y0, x1, y1, text, block_no, line_no, _word_no in _page_words(page, rect):
        if not text.strip():
            continue
        word = RecognizedWord(text=text, bbox=bbox_to_pixels((x0, y0, x1, y1), origin, scale))
        grouped.setdefault((block_no, line_no), []).append(word)

    lines = []
    for words in grouped.values():
        ordered = tuple(sorted(words, key=lambda w: w.bbox.x0))
        lines.append(RecognizedLine(
            text=" ".join(w.text for w in ordered),
            bbox=union_all(w.bbox for w in ordered),
            words=ordered,
        ))
    lines.sort(key=lambda l: (l.bbox.y0, l.bbox.x0))

    exclude = tuple(bbox_to_pixels(b, origin, scale) for b in _image_boxes(page, rect))
    logger.debug(f"Text layer: {len(lines)} lines, {len(exclude)} image regions")

    return StructuredOcrResult(
        text="\n".join(l.text for l in lines),
        words=tuple(w for l in lines for w in l.words),
        lines=tuple(lines),
        exclude_boxes=exclude,
    )


def parse_pdf_page(
    page: fitz.Page,
    clip: Optional[fitz.Rect] = None,
    dpi: int = DEFAULT_DPI,
    *,
    multi: bool = False,
    config: Optional[ParserConfig] = None,
) -> Union[ScreenshotQuestionDraft, List[ScreenshotQuestionDraft]]:
    """
    Parse the question(s) in a page region.

    Renders the region and reads its text layer, then runs the structured
    parser with ink confirmation.

    Args:
        page: PyMuPDF page object.
        clip: Region in PDF points. Defaults to the whole page.
        dpi: Render resolution. Defaults to 200.
        multi: Return a list of drafts for every question in the region.
        config: Parser configuration. Defaults to ParserConfig().

    Returns:
        ScreenshotQuestionDraft, or a list of them when ``multi`` is set.
    """
    result = extract_ocr_result(page, clip, dpi)
    image = render_page_region(page, clip, dpi)
    if multi:
        return parse_structured_ocr_to_drafts(result, image, config=config)
    return parse_structured_ocr_to_draft(result, image, config=config)
