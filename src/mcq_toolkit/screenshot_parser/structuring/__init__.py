"""
Module: screenshot_parser.structuring

Purpose:
    Turns normalized lines into question structure: where the options
    start, which lines belong to which option, and where one question
    ends and the next begins.

Key Modules:
    - segmentation: Rule chain choosing the option block start
    - assembler: ParsedOption records from the option block
    - multi_question: Per-question segments of a full-page scan
"""

from .assembler import assemble_options
from .multi_question import filter_multi_question_drafts, split_question_segments
from .segmentation import DEFAULT_RULES, SegmentationRule, Verdict, find_option_start

__all__ = [
    "DEFAULT_RULES",
    "SegmentationRule",
    "Verdict",
    "assemble_options",
    "filter_multi_question_drafts",
    "find_option_start",
    "split_question_segments",
]
