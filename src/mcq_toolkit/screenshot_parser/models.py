"""
Module: screenshot_parser.models

Purpose:
    Immutable data models for OCR input and parsed question drafts.

Key Classes:
    - RecognizedWord: One OCR word with its box and confidence
    - RecognizedLine: One OCR line (union box of its words)
    - StructuredOcrResult: Text, words, lines and diagram exclude boxes
    - ParsedOption: One labelled answer option
    - ScreenshotQuestionDraft: Question stem plus ordered options

Dependencies:
    - mcq_toolkit.common.bbox_utils: BoundingBox

Used By:
    - screenshot_parser.pipeline: Builds drafts
    - screenshot_parser.detection.geometry: Consumes words and lines
    - screenshot_parser.merge: Merges ParsedOption lists
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from mcq_toolkit.common.bbox_utils import BoundingBox


@dataclass(frozen=True)
class RecognizedWord:
    """
    OCR word with position.

    Attributes:
        text: Recognized characters.
        bbox: Word box in image pixels.
        confidence: Engine confidence, if reported.
    """
    text: str
    bbox: BoundingBox
    confidence: Optional[float] = None


@dataclass(frozen=True)
class RecognizedLine:
    """
    OCR line with position.

    Attributes:
        text: Line text as reported (or joined from its words).
        bbox: Union of the line's word boxes.
        words: Words belonging to the line, left to right. May be empty
            when the OCR engine reports lines without word breakdown.
    """
    text: str
    bbox: BoundingBox
    words: Tuple[RecognizedWord, ...] = ()


@dataclass(frozen=True)
class StructuredOcrResult:
    """
    Structured OCR output for one image.

    Attributes:
        text: Overall recognized text (newline-delimited).
        words: Recognized words.
        lines: Recognized lines; empty when the engine grouped none.
        exclude_boxes: Boxes of embedded diagrams whose words are ignored.

    Example:
        >>> result = StructuredOcrResult(text="Q1. What?\\nA 1\\nB 2")
        >>> result.has_geometry
        False
    """
    text: str = ""
    words: Tuple[RecognizedWord, ...] = ()
    lines: Tuple[RecognizedLine, ...] = ()
    exclude_boxes: Tuple[BoundingBox, ...] = ()

    @property
    def has_geometry(self) -> bool:
        return bool(self.words or self.lines)


@dataclass(frozen=True)
class ParsedOption:
    """
    Parsed answer option.

    Attributes:
        label: "A"-"D" for lettered options or "1"-"9" for numbered ones.
        text: Final normalized body; paragraphs separated by a blank line.
        source_lines: Raw contributing lines; "" marks a paragraph break.
    """
    label: str
    text: str
    source_lines: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "text": self.text,
            "source_lines": list(self.source_lines),
        }


@dataclass(frozen=True)
class ScreenshotQuestionDraft:
    """
    Structured draft of one multiple-choice question.

    Attributes:
        question_text: Stem with question numbering and trailing tags removed.
        options: Options in first-encounter order; empty or at least two.
        raw_lines: Normalized input lines, for inspection.
        question_line_indexes: Indexes into raw_lines forming the stem.
        option_line_indexes: Indexes into raw_lines forming the options.
    """
    question_text: str
    options: Tuple[ParsedOption, ...] = ()
    raw_lines: Tuple[str, ...] = ()
    question_line_indexes: Tuple[int, ...] = ()
    option_line_indexes: Tuple[int, ...] = ()

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(option.label for option in self.options)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_text": self.question_text,
            "options": [option.to_dict() for option in self.options],
            "raw_lines": list(self.raw_lines),
            "question_line_indexes": list(self.question_line_indexes),
            "option_line_indexes": list(self.option_line_indexes),
        }
