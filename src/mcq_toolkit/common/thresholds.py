"""Centralized threshold and magic number configuration.

This module contains the thresholds, ratios, and magic numbers used by the
screenshot question parser. Having these in one place makes tuning easier
and documents what each value controls. ``ParserConfig`` takes its defaults
from the global instances below.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SegmentationThresholds:
    """Thresholds for stem/option segmentation and option assembly."""

    option_body_max_chars: int = 90  # Longer bodies read as a sentence, not an option
    option_body_max_words: int = 14  # Word cap for an option-like body
    min_options: int = 2  # Fewer options than this demotes the draft to question-only
    min_inline_hits: int = 2  # Markers needed on one line for an inline option list
    min_statement_markers: int = 2  # Other-family markers that mark a candidate as a statement
    min_question_markers: int = 2  # Lettered markers needed before a new question may start


@dataclass
class GeometryThresholds:
    """Thresholds for bounding-box paragraphing and ink-ratio confirmation."""

    # Ink ratio (bold marker confirmation)
    ink_luminance_threshold: float = 110.0  # Pixel luminance below this is "ink"
    ink_ratio_cutoff: float = 0.22  # Dark fraction of a word box that reads as bold
    min_bold_markers: int = 2  # Bold letters needed to accept an inline marker line
    line_membership_tolerance_px: float = 4.0  # Slack when matching words to a line box

    # Paragraph reconstruction
    paragraph_gap_ratio: float = 0.9  # Gap >= ratio * median line height breaks a paragraph
    min_paragraph_gap_px: float = 6.0  # Floor for the paragraph gap
    default_line_height_px: float = 14.0  # Used when no line height can be measured

    # Word grouping and diagram exclusion
    word_grouping_ratio: float = 0.5  # Centre distance (x median word height) joining a line
    exclude_overlap_ratio: float = 0.5  # Overlap with a diagram box that drops a word/line


# Global instances for easy import
SEGMENTATION_THRESHOLDS = SegmentationThresholds()
GEOMETRY_THRESHOLDS = GeometryThresholds()
