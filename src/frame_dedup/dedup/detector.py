"""
Duplicate Detector
==================

Single-pair duplicate test for two frames.

ROI Selection (first match wins):
    1. Current frame's ROI, if non-empty
    2. Previous frame's ROI, if non-empty
    3. Intersection of both frames' full bounds
"""

from typing import NamedTuple

from frame_dedup.config import DedupConfig
from frame_dedup.models.frame import Frame
from frame_dedup.models.geometry import Rect
from frame_dedup.similarity.engine import calculate_similarity, effective_threshold


class DuplicateCheck(NamedTuple):
    """Outcome of comparing two frames."""

    is_duplicate: bool
    similarity: float


def select_roi(prev: Frame, curr: Frame) -> Rect:
    """
    Choose the comparison region for a frame pair.

    Both frames must carry an image when neither has an ROI.
    """
    if curr.has_roi:
        return curr.roi
    if prev.has_roi:
        return prev.roi
    return Rect(
        0,
        0,
        min(prev.image.width, curr.image.width),
        min(prev.image.height, curr.image.height),
    )


def is_duplicate(prev: Frame, curr: Frame, config: DedupConfig) -> DuplicateCheck:
    """
    Decide whether ``curr`` duplicates ``prev``.

    Args:
        prev: Reference frame
        curr: Candidate frame
        config: Comparison settings

    Returns:
        DuplicateCheck(is_duplicate, similarity). A frame without an image
        is never a duplicate and reports similarity 0.0.
    """
    if prev.image is None or curr.image is None:
        return DuplicateCheck(False, 0.0)

    roi = select_roi(prev, curr)
    similarity = calculate_similarity(prev.image, curr.image, roi, config)
    return DuplicateCheck(similarity >= effective_threshold(config), similarity)
