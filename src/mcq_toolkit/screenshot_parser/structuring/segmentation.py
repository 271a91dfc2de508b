"""
Module: screenshot_parser.structuring.segmentation

Purpose:
    Decides where the question stem ends and the option block begins.
    Each marker-prefixed line is a candidate; an ordered chain of rules
    accepts, rejects or defers it. The first accepted candidate is the
    split point. When no prefixed line qualifies, a standalone label line
    ("B") followed by an option-like body is used instead.

Key Functions:
    - find_option_start(): Index of the first option line, or None
    - looks_like_option_body(): Short, question-free text heuristic

Key Classes:
    - SegmentationRule: Base class for candidate rules
    - Verdict: ACCEPT / REJECT / DEFER
    - Candidate, SegmentationContext: Inputs handed to each rule

Dependencies:
    - screenshot_parser.detection.markers: Marker matchers

Used By:
    - screenshot_parser.pipeline: Splits lines into stem and options
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_CONFIG, ParserConfig
from ..detection.markers import (
    MarkerFamily,
    OptionMarkerMatch,
    find_inline_hits,
    line_marker_families,
    match_option_marker,
    match_standalone_letter_label,
)
from ..utils.text import normalize_line

logger = logging.getLogger(__name__)


class Verdict(Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    DEFER = "defer"


@dataclass(frozen=True)
class Candidate:
    """
    Marker-prefixed line under consideration.

    Attributes:
        position: Index among the non-blank lines.
        line_index: Index into the full line list.
        text: Trimmed line text.
        match: The prefix marker found on the line.
    """
    position: int
    line_index: int
    text: str
    match: OptionMarkerMatch


@dataclass
class SegmentationContext:
    """Non-blank lines plus per-line marker families, computed once."""
    non_blank: List[Tuple[int, str]]
    config: ParserConfig = DEFAULT_CONFIG
    families: List[List[MarkerFamily]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.families:
            self.families = [
                line_marker_families(text, self.config.min_inline_hits)
                for _, text in self.non_blank
            ]

    def families_after(self, position: int) -> List[MarkerFamily]:
        return [f for fams in self.families[position + 1:] for f in fams]


class SegmentationRule:
    """One candidate rule. Subclasses return a Verdict."""

    name = "rule"

    def evaluate(self, candidate: Candidate, context: SegmentationContext) -> Verdict:
        raise NotImplementedError


class LeadingArticleRule(SegmentationRule):
    """
    Rejects the article "A"/"a" read as a marker.

    On the first line, "A" followed by a lowercase word ("A fertilised egg
    ...") is a sentence. Elsewhere, a bare lowercase "a" with no separator
    followed by a lowercase word is treated the same way.
    """

    name = "leading-article"

    def evaluate(self, candidate: Candidate, context: SegmentationContext) -> Verdict:
        m = candidate.match
        if m.label != "A" or not m.text[:1].islower():
            return Verdict.DEFER
        if candidate.position == 0 or m.marker == "a":
            return Verdict.REJECT
        return Verdict.DEFER


class StatementLabelRule(SegmentationRule):
    """
    Rejects statement labels embedded in the stem.

    When markers of the other family follow the candidate ("Statement A ...
    Statement B ... choose from (1)-(4)"), the candidate labels a statement,
    not an answer option.
    """

    name = "statement-label"

    def evaluate(self, candidate: Candidate, context: SegmentationContext) -> Verdict:
        family = candidate.match.family
        others = sum(1 for f in context.families_after(candidate.position) if f is not family)
        if others >= context.config.min_statement_markers:
            return Verdict.REJECT
        return Verdict.DEFER


class InlineListRule(SegmentationRule):
    """Accepts a line that carries a whole inline option list on its own."""

    name = "inline-list"

    def evaluate(self, candidate: Candidate, context: SegmentationContext) -> Verdict:
        if find_inline_hits(candidate.text, context.config.min_inline_hits):
            return Verdict.ACCEPT
        return Verdict.DEFER


class RepeatedFamilyRule(SegmentationRule):
    """Rejects a lone marker: another marker of the same family must follow."""

    name = "repeated-family"

    def evaluate(self, candidate: Candidate, context: SegmentationContext) -> Verdict:
        family = candidate.match.family
        if family in context.families_after(candidate.position):
            return Verdict.DEFER
        return Verdict.REJECT


class OptionBodyShapeRule(SegmentationRule):
    """Rejects lettered candidates whose body reads like a sentence."""

    name = "option-body-shape"

    def evaluate(self, candidate: Candidate, context: SegmentationContext) -> Verdict:
        m = candidate.match
        if m.family is MarkerFamily.LETTER and not looks_like_option_body(m.text, context.config):
            return Verdict.REJECT
        return Verdict.DEFER


DEFAULT_RULES: Tuple[SegmentationRule, ...] = (
    LeadingArticleRule(),
    StatementLabelRule(),
    InlineListRule(),
    RepeatedFamilyRule(),
    OptionBodyShapeRule(),
)


def looks_like_option_body(text: str, config: ParserConfig = DEFAULT_CONFIG) -> bool:
    """
    True when text is short enough to be an option rather than a sentence.

    Example:
        >>> looks_like_option_body("Mg, 0.16 g")
        True
        >>> looks_like_option_body("Which of these is correct?")
        False
    """
    t = normalize_line(text)
    if not t:
        return False
    if len(t) > config.option_body_max_chars:
        return False
    if "?" in t:
        return False
    return len(t.split()) <= config.option_body_max_words


def evaluate_candidate(
    candidate: Candidate,
    context: SegmentationContext,
    rules: Sequence[SegmentationRule] = DEFAULT_RULES,
) -> bool:
    """Run the rule chain; a candidate nobody rejects is accepted."""
    for rule in rules:
        verdict = rule.evaluate(candidate, context)
        if verdict is Verdict.ACCEPT:
            return True
        if verdict is Verdict.REJECT:
            logger.debug(f"Line {candidate.line_index} rejected by {rule.name}")
            return False
    return True


def _standalone_label_start(context: SegmentationContext) -> Optional[int]:
    non_blank = context.non_blank
    for pos, (idx, text) in enumerate(non_blank[:-1]):
        if match_standalone_letter_label(text) is None:
            continue
        if looks_like_option_body(non_blank[pos + 1][1], context.config):
            return idx
    return None


def find_option_start(
    lines: Sequence[str],
    config: Optional[ParserConfig] = None,
    *,
    rules: Sequence[SegmentationRule] = DEFAULT_RULES,
) -> Optional[int]:
    """
    Find the line index at which the option block begins.

    Args:
        lines: Normalized lines (blank lines allowed).
        config: Parser configuration. Defaults to ParserConfig().
        rules: Candidate rule chain, in evaluation order.

    Returns:
        Index into ``lines`` of the first option line, or None when the
        whole input is the stem.

    Example:
        >>> find_option_start(["What is 2 + 2?", "A) 3", "B) 4"])
        1
    """
    cfg = config or DEFAULT_CONFIG
    non_blank = [(i, line.strip()) for i, line in enumerate(lines) if line.strip()]
    if not non_blank:
        return None

    context = SegmentationContext(non_blank=non_blank, config=cfg)

    for pos, (idx, text) in enumerate(non_blank):
        match = match_option_marker(text)
        if match is None:
            continue
        candidate = Candidate(position=pos, line_index=idx, text=text, match=match)
        if evaluate_candidate(candidate, context, rules):
            return idx

    return _standalone_label_start(context)
