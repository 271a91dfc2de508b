import pytest
import sys
from pathlib import Path
from PIL import Image, ImageDraw

# Add src to sys.path so we can import mcq_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from mcq_toolkit.common.bbox_utils import BoundingBox  # noqa: E402
from mcq_toolkit.screenshot_parser.models import RecognizedLine, RecognizedWord  # noqa: E402


# Common test fixtures
@pytest.fixture
def make_page_image():
    """Factory for white page images with solid black rectangles ("bold" glyphs)."""
    def _make(size=(400, 300), ink_boxes=()):
        img = Image.new("RGB", size, color="white")
        draw = ImageDraw.Draw(img)
        for box in ink_boxes:
            draw.rectangle([box.x0, box.y0, box.x1, box.y1], fill="black")
        return img
    return _make


@pytest.fixture
def make_line():
    """Factory for RecognizedLine built from (text, x0, x1) word specs on one row."""
    def _make(words, y0, height=14):
        recognized = tuple(
            RecognizedWord(text=text, bbox=BoundingBox(x0, y0, x1, y0 + height))
            for text, x0, x1 in words
        )
        bbox = BoundingBox(recognized[0].bbox.x0, y0, recognized[-1].bbox.x1, y0 + height)
        return RecognizedLine(
            text=" ".join(w.text for w in recognized),
            bbox=bbox,
            words=recognized,
        )
    return _make


@pytest.fixture
def sample_mcq_text():
    """A clean four-option question as OCR text."""
    return "Q1. What is 2 + 2?\nA) 3\nB) 4\nC) 5\nD) 6"
