"""
Module: screenshot_parser.config

Purpose:
    Configuration dataclass for the screenshot question parser. Provides
    immutable settings for option-body heuristics, inline marker acceptance,
    and the geometry constants (ink ratio, paragraph gap) that are tuned
    against real scans.

Key Classes:
    - ParserConfig: Settings shared by every parse entry point

Dependencies:
    - dataclasses: For frozen dataclass support
    - mcq_toolkit.common.thresholds: Default values

Used By:
    - screenshot_parser.pipeline: Passes config to every stage
    - screenshot_parser.detection.geometry: Ink and gap thresholds
    - screenshot_parser.structuring.segmentation: Option body heuristics
"""

from dataclasses import dataclass

from mcq_toolkit.common.thresholds import GEOMETRY_THRESHOLDS, SEGMENTATION_THRESHOLDS

_SEG = SEGMENTATION_THRESHOLDS
_GEO = GEOMETRY_THRESHOLDS


@dataclass(frozen=True)
class ParserConfig:
    """
    Configuration for the OCR-to-draft parser.

    Attributes:
        option_body_max_chars: Longest body still treated as an option (default 90)
        option_body_max_words: Most words in an option body (default 14)
        min_options: Options required for a draft to keep its options (default 2)
        min_inline_hits: Markers required on one line for an inline list (default 2)
        min_statement_markers: Other-family markers after a candidate that
            make it a statement label (default 2)
        min_question_markers: Lettered markers required in the buffer before
            a new question may start (default 2)
        ink_luminance_threshold: Luminance (0-255) below which a pixel is ink (default 110)
        ink_ratio_cutoff: Ink fraction above which a glyph reads as bold (default 0.22)
        min_bold_markers: Bold letters required on an inline marker line (default 2)
        line_membership_tolerance_px: Vertical slack matching words to lines (default 4)
        paragraph_gap_ratio: Multiple of median line height that breaks a paragraph (default 0.9)
        min_paragraph_gap_px: Minimum paragraph gap in pixels (default 6)
        default_line_height_px: Fallback line height (default 14)
        word_grouping_ratio: Centre distance, in median word heights, that keeps
            words on the same line (default 0.5)
        exclude_overlap_ratio: Overlap with an exclude box that drops a word (default 0.5)
    """
    option_body_max_chars: int = _SEG.option_body_max_chars
    option_body_max_words: int = _SEG.option_body_max_words
    min_options: int = _SEG.min_options
    min_inline_hits: int = _SEG.min_inline_hits
    min_statement_markers: int = _SEG.min_statement_markers
    min_question_markers: int = _SEG.min_question_markers
    ink_luminance_threshold: float = _GEO.ink_luminance_threshold
    ink_ratio_cutoff: float = _GEO.ink_ratio_cutoff
    min_bold_markers: int = _GEO.min_bold_markers
    line_membership_tolerance_px: float = _GEO.line_membership_tolerance_px
    paragraph_gap_ratio: float = _GEO.paragraph_gap_ratio
    min_paragraph_gap_px: float = _GEO.min_paragraph_gap_px
    default_line_height_px: float = _GEO.default_line_height_px
    word_grouping_ratio: float = _GEO.word_grouping_ratio
    exclude_overlap_ratio: float = _GEO.exclude_overlap_ratio

    def __post_init__(self) -> None:
        if self.min_options < 2:
            raise ValueError(f"min_options must be at least 2, got {self.min_options}")
        if self.min_inline_hits < 2:
            raise ValueError(f"min_inline_hits must be at least 2, got {self.min_inline_hits}")
        if self.option_body_max_chars <= 0 or self.option_body_max_words <= 0:
            raise ValueError("Option body limits must be positive")
        if not 0 <= self.ink_luminance_threshold <= 255:
            raise ValueError(
                f"ink_luminance_threshold must be within 0-255, got {self.ink_luminance_threshold}"
            )
        for name in ("ink_ratio_cutoff", "exclude_overlap_ratio"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        for name in (
            "paragraph_gap_ratio",
            "min_paragraph_gap_px",
            "default_line_height_px",
            "line_membership_tolerance_px",
            "word_grouping_ratio",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")


DEFAULT_CONFIG = ParserConfig()
