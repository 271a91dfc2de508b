"""
Module: screenshot_parser.structuring.assembler

Purpose:
    Builds ParsedOption records from the option block. Walks the lines
    from the split point, opening an option on each marker, appending
    wrapped continuation lines, and keeping blank lines inside an option
    as paragraph breaks.

Key Functions:
    - merge_standalone_labels(): Join "B" / "G1" line pairs into "B G1"
    - assemble_options(): Option block lines to ParsedOption list

Dependencies:
    - screenshot_parser.detection.markers: Marker matchers
    - screenshot_parser.utils.text: Paragraph normalization and body cleanup

Used By:
    - screenshot_parser.pipeline: Option assembly after segmentation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from ..config import DEFAULT_CONFIG, ParserConfig
from ..detection.markers import (
    MarkerFamily,
    OptionMarkerMatch,
    match_inline_options,
    match_option_marker,
    match_standalone_letter_label,
)
from ..models import ParsedOption
from ..utils.text import clean_option_body, normalize_ocr_lines_to_paragraphs

logger = logging.getLogger(__name__)


def merge_standalone_labels(lines: Sequence[str]) -> List[str]:
    """
    Merge a label-only line with the next non-blank line.

    Blank lines between the label and its body are dropped. A label with
    nothing after it is kept unchanged.

    Example:
        >>> merge_standalone_labels(["A", "G0", "B", "", "G1"])
        ['A G0', 'B G1']
    """
    merged: List[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        label = match_standalone_letter_label(line)
        if label is None:
            merged.append(line)
            i += 1
            continue

        j = i + 1
        while j < len(lines) and not lines[j].strip():
            j += 1
        if j >= len(lines):
            merged.append(line)
            i += 1
            continue

        merged.append(f"{label} {lines[j].strip()}")
        i = j + 1
    return merged


@dataclass
class _OpenOption:
    label: str
    source_lines: List[str] = field(default_factory=list)


class _OptionCollector:
    """Finished options in first-encounter order with unique labels."""

    def __init__(self) -> None:
        self.options: List[ParsedOption] = []
        self._seen: Set[str] = set()

    def add(self, label: str, text: str, source_lines: Sequence[str]) -> None:
        if not text:
            return
        if label in self._seen:
            logger.debug(f"Dropping repeated option label {label}")
            return
        self._seen.add(label)
        self.options.append(ParsedOption(label=label, text=text, source_lines=tuple(source_lines)))

    def close(self, current: Optional[_OpenOption]) -> None:
        if current is None:
            return
        source_lines = list(current.source_lines)
        while source_lines and not source_lines[-1]:
            source_lines.pop()
        text = clean_option_body(normalize_ocr_lines_to_paragraphs(source_lines))
        self.add(current.label, text, source_lines)

    def has_label(self, label: str) -> bool:
        return label in self._seen


def _opens_option(
    match: OptionMarkerMatch,
    current: Optional[_OpenOption],
    collector: _OptionCollector,
    block_family: Optional[MarkerFamily],
) -> bool:
    if block_family is not None and match.family is not block_family:
        return False
    # A label already used cannot open a second option; the line continues the open one
    if collector.has_label(match.label):
        return False
    return current is None or current.label != match.label


def assemble_options(
    option_lines: Sequence[str],
    config: Optional[ParserConfig] = None,
) -> List[ParsedOption]:
    """
    Assemble options from the lines of the option block.

    - A blank line inside an open option becomes a paragraph break.
    - An inline marker line closes the open option and emits one option
      per marker.
    - A prefix marker closes the open option and opens a new one. Once the
      block's marker family is known, a prefix marker of the other family
      is read as a continuation ("2 times faster" wrapped under option A),
      and so is a marker whose label was already used.
    - Any other line continues the open option; before the first option it
      is discarded.
    - A label with no body after it (a trailing "D") is dropped.

    Args:
        option_lines: Lines from the split point to the end of input.
        config: Parser configuration. Defaults to ParserConfig().

    Returns:
        Options with unique labels in first-encounter order. Options with an
        empty body are never returned.

    Example:
        >>> [o.text for o in assemble_options(["A) 3", "B) 4"])]
        ['3', '4']
    """
    cfg = config or DEFAULT_CONFIG
    collector = _OptionCollector()
    current: Optional[_OpenOption] = None
    block_family: Optional[MarkerFamily] = None

    for line in merge_standalone_labels(option_lines):
        if not line.strip():
            if current is not None:
                current.source_lines.append("")
            continue

        # merge_standalone_labels leaves only labels with no body after them
        if match_standalone_letter_label(line) is not None:
            logger.debug(f"Dropping bodiless label line {line.strip()!r}")
            continue

        inline = match_inline_options(line, cfg.min_inline_hits)
        if inline:
            collector.close(current)
            current = None
            for match in inline:
                collector.add(match.label, clean_option_body(match.text), [match.text])
            if block_family is None:
                block_family = inline[0].family
            continue

        match = match_option_marker(line)
        if match is not None and _opens_option(match, current, collector, block_family):
            collector.close(current)
            current = _OpenOption(label=match.label, source_lines=[match.text])
            block_family = match.family
            continue

        if current is not None:
            current.source_lines.append(line)

    collector.close(current)
    return collector.options
