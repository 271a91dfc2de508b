"""
Module: screenshot_parser

Purpose:
    Turns OCR output of printed multiple-choice questions into structured
    drafts: a clean question stem plus labelled answer options. Accepts
    plain OCR text or structured results with word/line boxes, and can
    split a full-page scan into one draft per question.

Key Functions:
    - parse_screenshot_ocr_to_draft(): One question from plain text
    - parse_screenshot_ocr_to_drafts(): Several questions from plain text
    - parse_structured_ocr_to_draft(): One question from boxes (+ image)
    - parse_structured_ocr_to_drafts(): Several questions from boxes (+ image)
    - merge_parsed_options_by_label(): Apply option corrections

Key Classes:
    - ParserConfig: Tunable thresholds
    - ScreenshotQuestionDraft, ParsedOption: Parse output
    - StructuredOcrResult, RecognizedLine, RecognizedWord: Geometry input

Dependencies:
    - numpy, PIL: Ink-ratio confirmation
    - fitz (PyMuPDF): PDF text-layer source (utils.pdf)

Used By:
    - scripts/parse_ocr_text.py: Command-line front end
"""

from .config import DEFAULT_CONFIG, ParserConfig
from .merge import merge_parsed_options_by_label
from .models import (
    ParsedOption,
    RecognizedLine,
    RecognizedWord,
    ScreenshotQuestionDraft,
    StructuredOcrResult,
)
from .pipeline import (
    parse_screenshot_ocr_to_draft,
    parse_screenshot_ocr_to_drafts,
    parse_structured_ocr_to_draft,
    parse_structured_ocr_to_drafts,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ParserConfig",
    "ParsedOption",
    "RecognizedLine",
    "RecognizedWord",
    "ScreenshotQuestionDraft",
    "StructuredOcrResult",
    "merge_parsed_options_by_label",
    "parse_screenshot_ocr_to_draft",
    "parse_screenshot_ocr_to_drafts",
    "parse_structured_ocr_to_draft",
    "parse_structured_ocr_to_drafts",
]
