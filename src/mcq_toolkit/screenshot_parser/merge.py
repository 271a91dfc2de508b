"""
Module: screenshot_parser.merge

Purpose:
    Reconciles parsed options with user corrections. The base list keeps
    its order; a correction replaces the body of the option with the same
    label, and corrections for labels the base lacks are appended.

Key Functions:
    - merge_parsed_options_by_label(): Merge override options into a base list

Used By:
    - Application code applying manual OCR corrections
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Set

from .models import ParsedOption


def _label_key(label: str) -> str:
    return label.strip().upper()


def merge_parsed_options_by_label(
    base: Sequence[ParsedOption],
    overrides: Sequence[ParsedOption],
) -> List[ParsedOption]:
    """
    Merge ``overrides`` into ``base`` by option label.

    Labels compare case-insensitively after trimming. When a label repeats,
    its first occurrence wins in either list, so the result has unique
    labels.

    Args:
        base: Options in display order.
        overrides: Corrected options.

    Returns:
        Base order with overridden text and source lines, followed by
        override-only labels in override order.

    Example:
        >>> base = [ParsedOption("A", "3"), ParsedOption("B", "4")]
        >>> fixed = [ParsedOption("b", "four"), ParsedOption("C", "5")]
        >>> [(o.label, o.text) for o in merge_parsed_options_by_label(base, fixed)]
        [('A', '3'), ('B', 'four'), ('C', '5')]
    """
    by_label: Dict[str, ParsedOption] = {}
    for option in overrides:
        by_label.setdefault(_label_key(option.label), option)

    merged: List[ParsedOption] = []
    seen: Set[str] = set()
    for option in base:
        key = _label_key(option.label)
        if key in seen:
            continue
        seen.add(key)
        override = by_label.get(key)
        if override is None:
            merged.append(option)
        else:
            merged.append(ParsedOption(
                label=option.label,
                text=override.text,
                source_lines=override.source_lines,
            ))

    merged.extend(option for key, option in by_label.items() if key not in seen)
    return merged
