"""
Tests for screenshot_parser.detection.markers module.

Covers prefix, standalone and inline marker matchers and the separator
guard that keeps words and decimals from reading as markers.
"""

import pytest

from mcq_toolkit.screenshot_parser.detection.markers import (
    MarkerFamily,
    find_inline_hits,
    is_marker_token,
    line_marker_families,
    match_inline_letter_options,
    match_inline_options,
    match_inline_parenthesized_letter_options,
    match_inline_parenthesized_numeric_options,
    match_letter_option_marker,
    match_numeric_option_marker,
    match_option_marker,
    match_standalone_letter_label,
)


class TestPrefixMarkers:
    """Tests for single prefix markers."""

    @pytest.mark.parametrize("line,label,text,marker", [
        ("A) 3", "A", "3", "A)"),
        ("(b) Mg, 0.16 g", "B", "Mg, 0.16 g", "(b)"),
        ("C. ten", "C", "ten", "C."),
        ("D - receptor", "D", "receptor", "D -"),
    ])
    def test_match_option_marker_when_lettered_then_returns_label_and_body(self, line, label, text, marker):
        """Should normalize the label to uppercase and keep the marker token."""
        # Act
        m = match_option_marker(line)

        # Assert
        assert m is not None
        assert (m.label, m.text, m.marker) == (label, text, marker)
        assert m.family is MarkerFamily.LETTER

    def test_match_option_marker_when_parenthesized_digit_then_numeric(self):
        """Should match "(2)" as a numeric marker, not a letter."""
        m = match_option_marker("(2) A,BandC only")

        assert m.label == "2"
        assert m.text == "A,BandC only"
        assert m.family is MarkerFamily.DIGIT

    @pytest.mark.parametrize("line", [
        "cytokinesis occurs in the cell",
        "1.0 g of magnesium is burnt",
        "Doubling time",
        "",
        "   ",
    ])
    def test_match_option_marker_when_no_separator_then_none(self, line):
        """Should not read words or decimals as markers."""
        assert match_option_marker(line) is None

    def test_match_numeric_option_marker_when_period_and_space_then_matches(self):
        """Should accept "1. text" while "1.0" stays a decimal."""
        assert match_numeric_option_marker("1. Which gas is released?").label == "1"
        assert match_numeric_option_marker("1.0 g") is None

    def test_match_letter_option_marker_when_lowercase_article_then_marker_kept(self):
        """Should report the raw marker so callers can spot the article "a"."""
        m = match_letter_option_marker("a fertilised egg")

        assert m.label == "A"
        assert m.marker == "a"


class TestStandaloneLabel:
    """Tests for match_standalone_letter_label()."""

    @pytest.mark.parametrize("line,expected", [
        ("B", "B"),
        ("(c)", "C"),
        ("  D.  ", "D"),
        ("Bee", None),
        ("B G1", None),
        ("", None),
    ])
    def test_match_standalone_letter_label(self, line, expected):
        assert match_standalone_letter_label(line) == expected


class TestInlineMarkers:
    """Tests for inline option lists."""

    def test_match_inline_letter_options_when_four_markers_then_splits_bodies(self):
        """Should split a single-line option dump into four options."""
        # Arrange
        line = "A enzyme B glycoprotein C G protein D receptor"

        # Act
        options = match_inline_letter_options(line)

        # Assert
        assert [(o.label, o.text) for o in options] == [
            ("A", "enzyme"),
            ("B", "glycoprotein"),
            ("C", "G protein"),
            ("D", "receptor"),
        ]

    def test_match_inline_letter_options_when_run_together_then_finds_markers(self):
        """Should find a marker glued to the preceding question mark."""
        options = match_inline_letter_options("Which system?A contract B recoil")

        assert [(o.label, o.text) for o in options] == [("A", "contract"), ("B", "recoil")]

    def test_match_inline_letter_options_when_single_hit_then_empty(self):
        """A single hit is never an inline list."""
        assert match_inline_letter_options("A fertilised egg develops") == []

    def test_match_inline_letter_options_when_lowercase_then_ignored(self):
        """Lowercase letters in prose are not markers."""
        assert match_inline_letter_options("take a pen and a ruler") == []

    def test_match_inline_parenthesized_letter_options(self):
        options = match_inline_parenthesized_letter_options("(a) Mg, 0.16 g   (b) O2, 0.16 g")

        assert [(o.label, o.text) for o in options] == [("A", "Mg, 0.16 g"), ("B", "O2, 0.16 g")]

    def test_match_inline_parenthesized_numeric_options(self):
        options = match_inline_parenthesized_numeric_options("(1) 1 and 2 (2) 2 and 3")

        assert [(o.label, o.text) for o in options] == [("1", "1 and 2"), ("2", "2 and 3")]

    def test_match_inline_options_when_parenthesized_capitals_then_paren_family_wins(self):
        """Should prefer the parenthesized reading so bodies carry no stray brackets."""
        options = match_inline_options("(A) red (B) blue")

        assert [o.text for o in options] == ["red", "blue"]

    def test_match_inline_options_when_marker_has_no_body_then_skipped(self):
        """Markers with nothing after them produce no option."""
        options = match_inline_parenthesized_letter_options("(a) red (b)")

        assert [o.label for o in options] == ["A"]

    def test_find_inline_hits_when_glued_stem_then_positions_index_raw_line(self):
        """Should report the first marker's position in the unmodified line."""
        # Arrange
        line = "Pick one. (a) red (b) blue"

        # Act
        hits = find_inline_hits(line)

        # Assert
        assert [h.label for h in hits] == ["A", "B"]
        assert hits[0].start == line.index("(a)")

    def test_find_inline_hits_when_numeric_prefix_then_body_letters_ignored(self):
        """Letters inside a numbered option body are not inline markers."""
        assert find_inline_hits("(1) A and B only") == []
        assert match_inline_options("(1) A and B only") == []

    def test_find_inline_hits_when_numeric_prefix_then_parenthesized_lists_still_found(self):
        hits = find_inline_hits("(1) A only (2) B only")

        assert [h.label for h in hits] == ["1", "2"]


class TestMarkerToken:
    """Tests for is_marker_token()."""

    @pytest.mark.parametrize("text,expected", [
        ("(1)", True),
        ("B.", True),
        (" (c) ", True),
        ("2)", True),
        ("Q2.", False),
        ("Pick one.", False),
        ("", False),
    ])
    def test_is_marker_token(self, text, expected):
        assert is_marker_token(text) is expected


class TestLineMarkerFamilies:
    """Tests for line_marker_families()."""

    def test_line_marker_families_when_inline_list_then_one_entry_per_option(self):
        assert line_marker_families("(a) x (b) y (c) z") == [MarkerFamily.LETTER] * 3

    def test_line_marker_families_when_numeric_prefix_then_digit(self):
        assert line_marker_families("(1) B,DandE only") == [MarkerFamily.DIGIT]

    def test_line_marker_families_when_numbered_body_names_letters_then_digit_only(self):
        assert line_marker_families("(1) A and B only") == [MarkerFamily.DIGIT]

    def test_line_marker_families_when_plain_text_then_empty(self):
        assert line_marker_families("The cell divides twice.") == []

    def test_marker_family_of(self):
        assert MarkerFamily.of("7") is MarkerFamily.DIGIT
        assert MarkerFamily.of("C") is MarkerFamily.LETTER
