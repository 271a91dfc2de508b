"""
Tests for screenshot_parser.structuring.multi_question module.
"""

from mcq_toolkit.screenshot_parser.models import ParsedOption, ScreenshotQuestionDraft
from mcq_toolkit.screenshot_parser.structuring.multi_question import (
    filter_multi_question_drafts,
    split_question_segments,
)


def _draft(text, labels=()):
    return ScreenshotQuestionDraft(
        question_text=text,
        options=tuple(ParsedOption(label, f"body {label}") for label in labels),
    )


class TestSplitQuestionSegments:
    """Tests for split_question_segments()."""

    def test_split_question_segments_when_two_questions_then_two_segments(self):
        lines = ["1. Pick", "A x", "B y", "2. Pick", "A p", "B q"]

        assert split_question_segments(lines) == [[0, 1, 2], [3, 4, 5]]

    def test_split_question_segments_when_no_options_seen_then_single_segment(self):
        """A numbered line only starts a new question after options were seen."""
        lines = ["1. First statement", "2. Second statement", "Which are true?"]

        assert split_question_segments(lines) == [[0, 1, 2]]

    def test_split_question_segments_when_inline_options_then_counted(self):
        lines = ["Q1 Which is a base?", "(a) HCl (b) NaOH", "Q2 Which is an acid?", "(a) HCl (b) NaOH"]

        assert split_question_segments(lines) == [[0, 1], [2, 3]]

    def test_split_question_segments_when_blank_lines_only_then_empty(self):
        assert split_question_segments(["", "  "]) == []

    def test_split_question_segments_when_blank_line_before_next_question_then_kept_in_first(self):
        lines = ["1. Pick", "A x", "B y", "", "2. Pick", "A p", "B q"]

        assert split_question_segments(lines) == [[0, 1, 2, 3], [4, 5, 6]]


class TestFilterMultiQuestionDrafts:
    """Tests for filter_multi_question_drafts()."""

    def test_filter_when_several_drafts_then_option_less_fragments_dropped(self):
        # Arrange
        good = _draft("Pick one", "AB")
        fragment = _draft("Turn over")

        # Act
        result = filter_multi_question_drafts([good, fragment])

        # Assert
        assert result == [good]

    def test_filter_when_single_draft_without_options_then_kept(self):
        lone = _draft("Describe the cell.")

        assert filter_multi_question_drafts([lone]) == [lone]

    def test_filter_when_empty_draft_then_dropped(self):
        assert filter_multi_question_drafts([_draft("")]) == []

    def test_filter_when_no_draft_has_options_then_fragments_returned(self):
        first, second = _draft("Part one"), _draft("Part two")

        assert filter_multi_question_drafts([first, second]) == [first, second]
