"""
Module: screenshot_parser.detection

Purpose:
    Line-level detection: option-marker matchers, the inline stem/option
    splitter and ink-based marker confirmation for structured input.

Key Modules:
    - markers: Prefix, inline and standalone marker matchers
    - inline_split: Cuts glued "question ... (a) .. (b) .." lines
    - geometry: Exclusion, line grouping, gap paragraphs, ink confirmation

Used By:
    - screenshot_parser.structuring: Segmentation and assembly
    - screenshot_parser.pipeline: Entry points
"""

from .geometry import InkMarkerConfirmer, reconcile_options
from .inline_split import expand_inline_option_lines, split_question_line_with_inline_options
from .markers import MarkerFamily, OptionMarkerMatch, match_inline_options, match_option_marker

__all__ = [
    "InkMarkerConfirmer",
    "MarkerFamily",
    "OptionMarkerMatch",
    "expand_inline_option_lines",
    "match_inline_options",
    "match_option_marker",
    "reconcile_options",
    "split_question_line_with_inline_options",
]
