"""Bounding box helpers for OCR geometry.

Provides the immutable ``BoundingBox`` used by recognized words and lines,
plus the conversion from PDF coordinates to pixel coordinates used when a
PDF text layer stands in for OCR output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned box in image-pixel space.

    Attributes:
        x0: Left edge.
        y0: Top edge.
        x1: Right edge.
        y1: Bottom edge.

    Example:
        >>> box = BoundingBox(10, 20, 30, 60)
        >>> box.height, box.center_y
        (40, 40.0)
    """
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return max(0.0, self.x1 - self.x0)

    @property
    def height(self) -> float:
        return max(0.0, self.y1 - self.y0)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center_y(self) -> float:
        return (self.y0 + self.y1) / 2

    def normalized(self) -> "BoundingBox":
        """Return the box with edges swapped so that x0 <= x1 and y0 <= y1."""
        if self.x0 <= self.x1 and self.y0 <= self.y1:
            return self
        return BoundingBox(
            min(self.x0, self.x1),
            min(self.y0, self.y1),
            max(self.x0, self.x1),
            max(self.y0, self.y1),
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.x0, other.x0),
            min(self.y0, other.y0),
            max(self.x1, other.x1),
            max(self.y1, other.y1),
        )

    def intersection_area(self, other: "BoundingBox") -> float:
        w = min(self.x1, other.x1) - max(self.x0, other.x0)
        h = min(self.y1, other.y1) - max(self.y0, other.y0)
        if w <= 0 or h <= 0:
            return 0.0
        return w * h

    def overlap_ratio(self, other: "BoundingBox") -> float:
        """
        Fraction of this box's area covered by ``other``.

        Zero-area boxes never overlap anything.
        """
        area = self.area
        if area <= 0:
            return 0.0
        return self.intersection_area(other) / area


def union_all(boxes: Iterable[BoundingBox]) -> Optional[BoundingBox]:
    """Union of all boxes, or None when there are none."""
    result: Optional[BoundingBox] = None
    for box in boxes:
        result = box if result is None else result.union(box)
    return result


def bbox_to_pixels(
    bbox: Tuple[float, float, float, float],
    clip_origin: Tuple[float, float],
    scale: float,
) -> BoundingBox:
    """Convert PDF bounding box coordinates to pixel coordinates.

    Takes a PDF bounding box (in PDF points) and converts it to pixel
    coordinates relative to the rendered clip region.

    Args:
        bbox: PDF bounding box as (x0, y0, x1, y1) in PDF coordinates.
        clip_origin: (x0, y0) of the clip region in PDF coordinates.
        scale: Scale factor from PDF to pixel coordinates (typically DPI/72.0).

    Returns:
        BoundingBox in pixels, ensuring x1 > x0 and y1 > y0.

    Example:
        >>> bbox_to_pixels((100.0, 200.0, 150.0, 220.0), (0.0, 0.0), 2.0)
        BoundingBox(x0=200.0, y0=400.0, x1=300.0, y1=440.0)
    """
    x0, y0, x1, y1 = bbox
    origin_x, origin_y = clip_origin

    px0 = float(round((x0 - origin_x) * scale))
    py0 = float(round((y0 - origin_y) * scale))
    px1 = float(round((x1 - origin_x) * scale))
    py1 = float(round((y1 - origin_y) * scale))

    # Ensure valid bounding box (x1 > x0, y1 > y0)
    if px1 <= px0:
        px1 = px0 + 1
    if py1 <= py0:
        py1 = py0 + 1

    return BoundingBox(px0, py0, px1, py1)
