"""
Similarity Module
=================

Per-pixel, per-channel similarity between two rasters.

This module provides:
    - calculate_similarity: ratio in [0, 1] for two rasters and a config
    - effective_threshold: config threshold clamped into [0, 1]
    - pixels_equal: vectorised pixel-equality rule (tolerance + mask)
    - diff_bounds: bounding box of differing pixels

No perceptual or structural metrics; only masked per-channel comparison.
"""

from frame_dedup.similarity.engine import calculate_similarity, effective_threshold
from frame_dedup.similarity.pixels import diff_bounds, pixels_equal

__all__ = [
    "calculate_similarity",
    "effective_threshold",
    "pixels_equal",
    "diff_bounds",
]
