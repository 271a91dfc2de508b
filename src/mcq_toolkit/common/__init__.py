"""Common utilities shared across the toolkit."""

from __future__ import annotations

from .bbox_utils import BoundingBox, bbox_to_pixels, union_all
from .thresholds import (
    GEOMETRY_THRESHOLDS,
    SEGMENTATION_THRESHOLDS,
    GeometryThresholds,
    SegmentationThresholds,
)

__all__ = [
    # bbox_utils
    "BoundingBox",
    "bbox_to_pixels",
    "union_all",
    # thresholds
    "GEOMETRY_THRESHOLDS",
    "SEGMENTATION_THRESHOLDS",
    "GeometryThresholds",
    "SegmentationThresholds",
]
