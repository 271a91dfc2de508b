"""
Module: screenshot_parser.utils

Purpose:
    Utility subpackage with text normalization helpers and the PDF
    text-layer source.

Key Modules:
    - text: OCR line cleanup, paragraphs, question-number and tag stripping
    - pdf: StructuredOcrResult and page images from PyMuPDF (import directly)

Used By:
    - screenshot_parser.pipeline: Line and stem normalization
"""

from .text import (
    clean_option_body,
    normalize_ocr_line_artifacts,
    normalize_ocr_text_to_paragraphs,
    strip_leading_question_number,
)

__all__ = [
    "clean_option_body",
    "normalize_ocr_line_artifacts",
    "normalize_ocr_text_to_paragraphs",
    "strip_leading_question_number",
]
