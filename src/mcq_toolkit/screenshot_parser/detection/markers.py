"""
Module: screenshot_parser.detection.markers

Purpose:
    Option-marker recognition for OCR lines. Each matcher tests one marker
    convention: lettered prefix "A)", numeric prefix "(1)", inline letter
    lists "A enzyme B receptor", parenthesized inline lists "(a) .. (b) ..",
    "(1) .. (2) ..", and a standalone label alone on its line.

    Every prefix matcher requires a separator or whitespace straight after
    the label, so words like "cytokinesis" and decimals like "1.0 g" never
    read as markers. Inline matchers need at least two hits on the line.

Key Functions:
    - match_option_marker(): Lettered, then numeric prefix marker
    - match_letter_option_marker() / match_numeric_option_marker()
    - match_standalone_letter_label(): Bare "B" line
    - match_inline_options(): First inline family with enough hits
    - find_inline_hits(): Marker positions for the inline splitter
    - line_marker_families(): Marker families present on a line
    - is_marker_token(): Text that is only a marker, e.g. "(1)"

Key Classes:
    - MarkerFamily: LETTER or DIGIT
    - OptionMarkerMatch: Label plus the text after the marker
    - InlineMarkerHit: Position of one inline marker

Dependencies:
    - re (std)

Used By:
    - screenshot_parser.detection.inline_split: Splits glued stem/option lines
    - screenshot_parser.structuring.segmentation: Finds the option block
    - screenshot_parser.structuring.assembler: Opens and closes options
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..utils.text import normalize_line

LETTER_LABELS = "ABCD"
DIGIT_LABELS = "123456789"

# A. / A) / A - / (A) / A :
LETTER_MARKER_RE = re.compile(
    r"^(\(?\s*([A-D])\s*\)?)(?:\s*[).:\-–—]\s*|\s+)(.+)$", re.IGNORECASE
)
# 1. / 1) / (1) / 1 - ; whitespace is required after the marker ("1.0 g" is not one)
NUMERIC_MARKER_RE = re.compile(r"^(\(?\s*([1-9])\s*\)?)(?:\s*[).:\-–—]\s+|\s+)(.+)$")
STANDALONE_LABEL_RE = re.compile(r"^\(?\s*([A-D])\s*\)?\s*[.:]?\s*$", re.IGNORECASE)
MARKER_TOKEN_RE = re.compile(r"^\(?\s*([A-D]|[1-9])\s*\)?\s*[.:)]?\s*$", re.IGNORECASE)

# Case-sensitive so the article "a" in a stem is never a marker. The leading
# non-letter boundary admits run-together OCR such as "system?A contract".
INLINE_LETTER_RE = re.compile(r"(^|[^A-Za-z])([A-D])\s*[).:\-–—]?\s+")
INLINE_PAREN_LETTER_RE = re.compile(r"(^|\s)\(\s*([A-D])\s*\)\s*", re.IGNORECASE)
INLINE_PAREN_NUMERIC_RE = re.compile(r"(^|\s)\(\s*([1-9])\s*\)\s*")


class MarkerFamily(Enum):
    """Alphabet a marker label belongs to."""
    LETTER = "letter"
    DIGIT = "digit"

    @classmethod
    def of(cls, label: str) -> "MarkerFamily":
        return cls.DIGIT if label.isdigit() else cls.LETTER


@dataclass(frozen=True)
class OptionMarkerMatch:
    """
    Option marker found on a line.

    Attributes:
        label: Uppercase letter "A"-"D" or digit "1"-"9".
        text: Everything after the marker on that line.
        marker: The marker token as written, e.g. "(a)" or "B." (empty for
            inline matches).

    Example:
        >>> m = match_option_marker("B) 4")
        >>> (m.label, m.text, m.family)
        ('B', '4', <MarkerFamily.LETTER: 'letter'>)
    """
    label: str
    text: str
    marker: str = ""

    @property
    def family(self) -> MarkerFamily:
        return MarkerFamily.of(self.label)


@dataclass(frozen=True)
class InlineMarkerHit:
    """
    One marker inside an inline option list.

    Attributes:
        label: Uppercase label.
        start: Index of the marker's first character in the scanned line.
        end: Index just past the marker and its trailing separator.
    """
    label: str
    start: int
    end: int


def _match_prefix(pattern: re.Pattern, line: str) -> Optional[OptionMarkerMatch]:
    s = normalize_line(line)
    if not s:
        return None
    m = pattern.match(s)
    if not m:
        return None
    marker = s[:m.start(3)].strip()
    return OptionMarkerMatch(label=m.group(2).upper(), text=m.group(3).strip(), marker=marker)


def match_letter_option_marker(line: str) -> Optional[OptionMarkerMatch]:
    """Match a lettered prefix marker (A-D, any case, optionally parenthesized)."""
    return _match_prefix(LETTER_MARKER_RE, line)


def match_numeric_option_marker(line: str) -> Optional[OptionMarkerMatch]:
    """Match a numeric prefix marker (1-9, optionally parenthesized)."""
    return _match_prefix(NUMERIC_MARKER_RE, line)


def match_option_marker(line: str) -> Optional[OptionMarkerMatch]:
    """
    Match a single option marker at the start of a line.

    Lettered markers are tried first, then numeric ones.

    Args:
        line: OCR line.

    Returns:
        OptionMarkerMatch or None.

    Example:
        >>> match_option_marker("(2) A,BandC only").label
        '2'
        >>> match_option_marker("1.0 g of magnesium") is None
        True
    """
    return match_letter_option_marker(line) or match_numeric_option_marker(line)


def match_standalone_letter_label(line: str) -> Optional[str]:
    """
    Return the label of a line holding only a marker ("B", "(c)"), else None.

    The body of such an option sits on the next non-blank line.
    """
    s = normalize_line(line)
    if not s:
        return None
    m = STANDALONE_LABEL_RE.match(s)
    return m.group(1).upper() if m else None


def _scan(pattern: re.Pattern, s: str) -> List[InlineMarkerHit]:
    hits: List[InlineMarkerHit] = []
    for m in pattern.finditer(s):
        # marker starts after the boundary character, not at it
        hits.append(InlineMarkerHit(label=m.group(2).upper(), start=m.end(1), end=m.end()))
    return hits


def scan_inline_letter_markers(s: str) -> List[InlineMarkerHit]:
    return _scan(INLINE_LETTER_RE, s)


def scan_parenthesized_letter_markers(s: str) -> List[InlineMarkerHit]:
    return _scan(INLINE_PAREN_LETTER_RE, s)


def scan_parenthesized_numeric_markers(s: str) -> List[InlineMarkerHit]:
    return _scan(INLINE_PAREN_NUMERIC_RE, s)


# Priority order shared by the inline splitter and the option assembler
INLINE_SCANNERS: Tuple[Callable[[str], List[InlineMarkerHit]], ...] = (
    scan_parenthesized_letter_markers,
    scan_parenthesized_numeric_markers,
    scan_inline_letter_markers,
)


def _options_from_hits(s: str, hits: List[InlineMarkerHit]) -> List[OptionMarkerMatch]:
    out: List[OptionMarkerMatch] = []
    for i, hit in enumerate(hits):
        stop = hits[i + 1].start if i + 1 < len(hits) else len(s)
        text = s[hit.end:stop].strip()
        if not text:
            continue
        out.append(OptionMarkerMatch(label=hit.label, text=text))
    return out


def _match_inline(
    scanner: Callable[[str], List[InlineMarkerHit]],
    line: str,
    min_hits: int,
) -> List[OptionMarkerMatch]:
    s = normalize_line(line)
    if not s:
        return []
    hits = scanner(s)
    if len(hits) < min_hits:
        return []
    return _options_from_hits(s, hits)


def match_inline_letter_options(line: str, min_hits: int = 2) -> List[OptionMarkerMatch]:
    """
    Split a line such as "A enzyme B glycoprotein C G protein D receptor".

    A single hit is never an inline list, so a leading article is safe.

    Example:
        >>> [m.label for m in match_inline_letter_options("A 1 and 2  B 1 and 3")]
        ['A', 'B']
    """
    return _match_inline(scan_inline_letter_markers, line, min_hits)


def match_inline_parenthesized_letter_options(line: str, min_hits: int = 2) -> List[OptionMarkerMatch]:
    """Split "(a) Mg, 0.16 g   (b) O2, 0.16 g" into labelled options."""
    return _match_inline(scan_parenthesized_letter_markers, line, min_hits)


def match_inline_parenthesized_numeric_options(line: str, min_hits: int = 2) -> List[OptionMarkerMatch]:
    """Split "(1) 1 and 2 (2) 2 and 3" into labelled options."""
    return _match_inline(scan_parenthesized_numeric_markers, line, min_hits)


def is_marker_token(text: str) -> bool:
    """True when ``text`` is nothing but one marker, e.g. "(1)" or "B."."""
    return bool(MARKER_TOKEN_RE.match(normalize_line(text)))


def _inline_scanners(line: str) -> Tuple[Callable[[str], List[InlineMarkerHit]], ...]:
    # Letters after a numeric prefix belong to its body: "(1) A and B only"
    if match_numeric_option_marker(line) is not None:
        return tuple(s for s in INLINE_SCANNERS if s is not scan_inline_letter_markers)
    return INLINE_SCANNERS


def match_inline_options(line: str, min_hits: int = 2) -> List[OptionMarkerMatch]:
    """
    Return options from the first inline family with enough hits.

    Bare capital letters are not scanned on a line that opens with a
    numeric marker.
    """
    for scanner in _inline_scanners(line):
        found = _match_inline(scanner, line, min_hits)
        if found:
            return found
    return []


def find_inline_hits(line: str, min_hits: int = 2) -> List[InlineMarkerHit]:
    """
    Marker positions in ``line`` from the first inline family with enough hits.

    Positions index into ``line`` itself (not a whitespace-normalized copy).
    """
    for scanner in _inline_scanners(line):
        hits = scanner(line)
        if len(hits) >= min_hits:
            return hits
    return []


def line_marker_families(line: str, min_hits: int = 2) -> List[MarkerFamily]:
    """
    Families of every option marker on a line.

    An inline list contributes one entry per option; otherwise a prefix
    marker contributes one entry.
    """
    inline = match_inline_options(line, min_hits)
    if inline:
        return [m.family for m in inline]
    single = match_option_marker(line)
    return [single.family] if single else []
