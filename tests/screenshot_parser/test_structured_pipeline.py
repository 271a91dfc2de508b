"""
Tests for screenshot_parser.pipeline structured-result entry points.

Structured results are built by hand from word boxes; "bold" markers
are solid black rectangles drawn on a white page image.
"""

import math

import numpy as np

from mcq_toolkit.common.bbox_utils import BoundingBox
from mcq_toolkit.screenshot_parser import (
    RecognizedWord,
    StructuredOcrResult,
    parse_screenshot_ocr_to_draft,
    parse_structured_ocr_to_draft,
    parse_structured_ocr_to_drafts,
)

LONG_A = "The passage describes how cells divide and why that matters for growth in many organisms"
LONG_B = "The second statement is also very long and describes many things about cells in the body"


def _pairs(draft):
    return [(o.label, o.text) for o in draft.options]


class TestTextFallback:
    """Results without geometry are parsed from their text."""

    def test_parse_structured_when_no_geometry_then_same_as_text(self, sample_mcq_text):
        result = StructuredOcrResult(text=sample_mcq_text)

        assert parse_structured_ocr_to_draft(result) == parse_screenshot_ocr_to_draft(sample_mcq_text)

    def test_parse_structured_drafts_when_no_geometry_then_text_drafts(self, sample_mcq_text):
        drafts = parse_structured_ocr_to_drafts(StructuredOcrResult(text=sample_mcq_text))

        assert [d.labels for d in drafts] == [("A", "B", "C", "D")]


class TestStructuredLines:
    """Line geometry without an image."""

    def test_parse_structured_when_lines_then_gap_paragraphs_and_options(self, make_line):
        # Arrange
        lines = (
            make_line([("Q1.", 0, 20), ("The", 25, 50), ("cell", 55, 80)], y0=0),
            make_line([("divides.", 0, 60)], y0=16),
            make_line([("Which", 0, 40), ("stage?", 45, 90)], y0=50),
            make_line([("A)", 0, 15), ("prophase", 20, 90)], y0=80),
            make_line([("B)", 0, 15), ("anaphase", 20, 90)], y0=96),
        )
        result = StructuredOcrResult(lines=lines)

        # Act
        draft = parse_structured_ocr_to_draft(result)

        # Assert
        assert draft.question_text == "The cell divides.\n\nWhich stage?"
        assert _pairs(draft) == [("A", "prophase"), ("B", "anaphase")]

    def test_parse_structured_when_only_words_then_lines_synthesized(self):
        """Words are grouped into lines when the engine reports none."""
        # Arrange
        words = (
            RecognizedWord("heart", BoundingBox(30, 40, 80, 54)),
            RecognizedWord("Which", BoundingBox(10, 10, 60, 24)),
            RecognizedWord("A)", BoundingBox(10, 40, 25, 54)),
            RecognizedWord("organ?", BoundingBox(65, 10, 120, 24)),
            RecognizedWord("B)", BoundingBox(10, 58, 25, 72)),
            RecognizedWord("lung", BoundingBox(30, 58, 80, 72)),
        )

        # Act
        draft = parse_structured_ocr_to_draft(StructuredOcrResult(words=words))

        # Assert
        assert draft.question_text == "Which organ?"
        assert _pairs(draft) == [("A", "heart"), ("B", "lung")]

    def test_parse_structured_when_diagram_labels_then_excluded(self, make_line):
        # Arrange
        lines = (
            make_line([("Which", 0, 40), ("organ?", 45, 90)], y0=0),
            make_line([("X", 200, 210), ("Y", 300, 310)], y0=20),
            make_line([("A)", 0, 15), ("heart", 20, 90)], y0=40),
            make_line([("B)", 0, 15), ("lung", 20, 90)], y0=56),
        )
        diagram = BoundingBox(190, 15, 320, 40)

        # Act
        draft = parse_structured_ocr_to_draft(StructuredOcrResult(lines=lines, exclude_boxes=(diagram,)))

        # Assert
        assert draft.question_text == "Which organ?"
        assert "X" not in " ".join(draft.raw_lines)

    def test_parse_structured_when_box_not_finite_then_ignored(self, make_line):
        # Arrange
        broken = RecognizedWord("ghost", BoundingBox(0, math.nan, 10, 10))
        words = (
            RecognizedWord("Pick", BoundingBox(0, 0, 30, 14)),
            broken,
            RecognizedWord("A)", BoundingBox(0, 30, 15, 44)),
            RecognizedWord("x", BoundingBox(20, 30, 30, 44)),
            RecognizedWord("B)", BoundingBox(0, 46, 15, 60)),
            RecognizedWord("y", BoundingBox(20, 46, 30, 60)),
        )

        # Act
        draft = parse_structured_ocr_to_draft(StructuredOcrResult(words=words))

        # Assert
        assert draft.question_text == "Pick"
        assert draft.labels == ("A", "B")

    def test_parse_structured_when_everything_excluded_then_empty_draft(self, make_line):
        lines = (make_line([("Fig.", 0, 30), ("1", 35, 40)], y0=0),)

        draft = parse_structured_ocr_to_draft(
            StructuredOcrResult(text="Fig. 1", lines=lines, exclude_boxes=(BoundingBox(0, 0, 100, 100),))
        )

        assert draft.question_text == ""
        assert draft.options == ()


class TestInkConfirmation:
    """Geometry confirmation with a page image."""

    def test_parse_structured_when_text_demotes_but_bold_markers_then_stem_recovered(
        self, make_line, make_page_image
    ):
        """Bold markers rescue options whose bodies read like sentences."""
        # Arrange
        lines = (
            make_line([("Read", 10, 40), ("the", 45, 65), ("statements.", 70, 150)], y0=10),
            make_line([("A", 10, 20), (LONG_A, 30, 390)], y0=40),
            make_line([("B", 10, 20), (LONG_B, 30, 390)], y0=60),
        )
        image = make_page_image(ink_boxes=[lines[1].words[0].bbox, lines[2].words[0].bbox])
        result = StructuredOcrResult(lines=lines)

        # Act
        text_only = parse_structured_ocr_to_draft(result)
        confirmed = parse_structured_ocr_to_draft(result, image)

        # Assert
        assert text_only.options == ()
        assert confirmed.question_text == "Read the statements."
        assert _pairs(confirmed) == [("A", LONG_A), ("B", LONG_B)]
        assert confirmed.question_line_indexes == (0,)
        assert confirmed.option_line_indexes == (2, 3)

    def test_parse_structured_when_geometry_confirms_subset_then_union_sorted(self, make_line, make_page_image):
        # Arrange
        lines = (
            make_line([("Which", 10, 50), ("organ?", 55, 110)], y0=10),
            make_line([("A", 10, 20), ("heart", 30, 80)], y0=30),
            make_line([("B", 10, 20), ("lung", 30, 80)], y0=46),
            make_line([("C", 10, 20), ("liver", 30, 80)], y0=62),
        )
        image = make_page_image(ink_boxes=[lines[1].words[0].bbox, lines[2].words[0].bbox])

        # Act
        draft = parse_structured_ocr_to_draft(StructuredOcrResult(lines=lines), image)

        # Assert
        assert _pairs(draft) == [("A", "heart"), ("B", "lung"), ("C", "liver")]

    def test_parse_structured_when_bold_statement_letters_above_numbered_options_then_numbered_only(
        self, make_line, make_page_image
    ):
        """Bold statement letters stay in the stem and never join numbered options."""
        # Arrange
        lines = (
            make_line([("Which", 10, 50), ("are", 55, 80), ("correct?", 85, 150)], y0=10),
            make_line([("A", 10, 20), ("Enzymes", 30, 90), ("are", 95, 120), ("proteins.", 125, 190)], y0=30),
            make_line([("B", 10, 20), ("Enzymes", 30, 90), ("are", 95, 120), ("used.", 125, 170)], y0=46),
            make_line([("C", 10, 20), ("Enzymes", 30, 90), ("are", 95, 120), ("fast.", 125, 170)], y0=62),
            make_line([("(1)", 10, 30), ("A,", 35, 50), ("B", 55, 65), ("only", 70, 100)], y0=78),
            make_line([("(2)", 10, 30), ("B,", 35, 50), ("C", 55, 65), ("only", 70, 100)], y0=94),
            make_line([("(3)", 10, 30), ("A,", 35, 50), ("C", 55, 65), ("only", 70, 100)], y0=110),
        )
        image = make_page_image(ink_boxes=[line.words[0].bbox for line in lines[1:4]])

        # Act
        draft = parse_structured_ocr_to_draft(StructuredOcrResult(lines=lines), image)

        # Assert
        assert _pairs(draft) == [("1", "A, B only"), ("2", "B, C only"), ("3", "A, C only")]
        assert "A Enzymes are proteins." in draft.question_text

    def test_parse_structured_when_no_bold_markers_then_text_result_kept(self, make_line, make_page_image):
        lines = (
            make_line([("Which", 10, 50), ("organ?", 55, 110)], y0=10),
            make_line([("A", 10, 20), ("heart", 30, 80)], y0=30),
            make_line([("B", 10, 20), ("lung", 30, 80)], y0=46),
        )
        result = StructuredOcrResult(lines=lines)

        assert parse_structured_ocr_to_draft(result, make_page_image()) == parse_structured_ocr_to_draft(result)

    def test_parse_structured_when_numpy_image_then_accepted(self, make_line):
        lines = (
            make_line([("Which", 10, 50), ("organ?", 55, 110)], y0=10),
            make_line([("A", 10, 20), ("heart", 30, 80)], y0=30),
            make_line([("B", 10, 20), ("lung", 30, 80)], y0=46),
        )
        image = np.full((200, 400), 255, dtype=np.uint8)

        draft = parse_structured_ocr_to_draft(StructuredOcrResult(lines=lines), image)

        assert draft.labels == ("A", "B")


class TestStructuredMultiQuestion:
    """Tests for parse_structured_ocr_to_drafts()."""

    def test_parse_structured_drafts_when_two_questions_then_two_drafts(self, make_line):
        # Arrange
        rows = [
            [("1.", 0, 10), ("Which", 15, 55), ("gas?", 60, 90)],
            [("A", 0, 10), ("oxygen", 15, 60)],
            [("B", 0, 10), ("hydrogen", 15, 70)],
            [("2.", 0, 10), ("Which", 15, 55), ("metal?", 60, 100)],
            [("A", 0, 10), ("copper", 15, 60)],
            [("B", 0, 10), ("iron", 15, 50)],
        ]
        lines = tuple(make_line(words, y0=i * 16) for i, words in enumerate(rows))

        # Act
        drafts = parse_structured_ocr_to_drafts(StructuredOcrResult(lines=lines))

        # Assert
        assert [d.question_text for d in drafts] == ["Which gas?", "Which metal?"]
        assert [_pairs(d) for d in drafts] == [
            [("A", "oxygen"), ("B", "hydrogen")],
            [("A", "copper"), ("B", "iron")],
        ]
