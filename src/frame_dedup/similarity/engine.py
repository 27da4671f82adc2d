"""
Similarity Engine
=================

Pixel-level similarity between two equally sized rasters.

This module produces a similarity ratio in [0, 1] for a pair of images
under a DedupConfig. It is stateless and knows nothing about sequence
position; the duplicate grouper calls it pairwise.

Degenerate Inputs:
    - Either image missing      -> 0.0
    - Width or height mismatch  -> 0.0
    - Empty comparison region   -> 1.0 (nothing to disagree on)

Strategies:
    Exact full-frame fast path:
        Used when tolerance == 0, both strides == 1 and the region is the
        whole image. Finds the bounding box of differing pixels and
        reports 1 - bbox_area / total_area. This is an area estimate, not
        a count of differing pixels: sparse differences spread over a
        large box are reported as less similar than they are, and a
        single differing pixel costs exactly one pixel.

    Sampled scan:
        Visits the region on a (sample_step_x, sample_step_y) grid
        anchored at its top-left corner and counts equal samples. With
        early-out enabled the scan stops as soon as the best achievable
        ratio (all remaining samples equal) drops below the threshold;
        the returned ratio is then equal_so_far / total_samples.

Formula:
    similarity = equal_samples / total_samples
    total_samples = ceil(roi_w / step_x) * ceil(roi_h / step_y)
"""

import logging
from typing import Optional

import numpy as np

from frame_dedup.config import DedupConfig
from frame_dedup.models.geometry import Rect
from frame_dedup.models.raster import Raster
from frame_dedup.similarity.pixels import diff_bounds, pixels_equal


logger = logging.getLogger(__name__)


def _clamp_ratio(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


def effective_threshold(config: DedupConfig) -> float:
    """Threshold clamped into [0, 1], also for configs built without validation."""
    return _clamp_ratio(config.similarity_threshold)


def calculate_similarity(
    a: Optional[Raster],
    b: Optional[Raster],
    roi: Optional[Rect] = None,
    config: Optional[DedupConfig] = None,
) -> float:
    """
    Compute the similarity ratio of two rasters.

    Args:
        a: First raster (None allowed)
        b: Second raster (None allowed)
        roi: Region to compare; None compares the full frame. The region
            is clamped to the image bounds before use.
        config: Comparison settings; defaults to DedupConfig()

    Returns:
        Similarity in [0, 1], where 1.0 means identical under config
    """
    if config is None:
        config = DedupConfig()

    if a is None or b is None:
        return 0.0
    if a.width != b.width or a.height != b.height:
        return 0.0

    width, height = a.width, a.height
    region = (roi if roi is not None else a.bounds).clamp(width, height)
    if region.is_empty:
        return 1.0

    step_x = max(1, config.sample_step_x)
    step_y = max(1, config.sample_step_y)
    tolerance = max(0, config.per_channel_tolerance)

    if tolerance == 0 and step_x == 1 and step_y == 1 and region.covers(width, height):
        return _exact_full_frame(a, b, config.channel_mask)

    return _sampled_scan(a, b, region, step_x, step_y, tolerance, config)


def _exact_full_frame(a: Raster, b: Raster, mask: int) -> float:
    """Bounding-box estimate over the whole image (exact-match fast path)."""
    box = diff_bounds(a.rows(), b.rows(), mask)
    if box is None:
        return 1.0

    total = a.width * a.height
    if total <= 0:
        return 0.0

    similarity = _clamp_ratio(1.0 - box.area / total)
    logger.debug(
        f"Fast path: diff box {box.width}x{box.height} at ({box.x}, {box.y}), "
        f"similarity={similarity:.6f}"
    )
    return similarity


def _sampled_scan(
    a: Raster,
    b: Raster,
    region: Rect,
    step_x: int,
    step_y: int,
    tolerance: int,
    config: DedupConfig,
) -> float:
    """
    Strided scan with optional early-out.

    Each sampled row is evaluated as one vector, but the early-out test is
    applied per sample: the first sample after which the threshold becomes
    unreachable ends the scan, exactly as a pixel-by-pixel loop would.
    """
    samples_a = a.region(region)[::step_y, ::step_x]
    samples_b = b.region(region)[::step_y, ::step_x]

    sample_rows, sample_cols = samples_a.shape
    total = sample_rows * sample_cols
    if total <= 0:
        return 1.0

    threshold = effective_threshold(config)
    mask = config.channel_mask
    # Position of each sample within its row, 1-based
    row_offsets = np.arange(1, sample_cols + 1, dtype=np.int64)

    equal = 0
    processed = 0
    for row_a, row_b in zip(samples_a, samples_b):
        matches = pixels_equal(row_a, row_b, tolerance, mask)

        if config.enable_early_out:
            running_equal = np.cumsum(matches, dtype=np.int64)
            remaining = total - processed - row_offsets
            best_case = (equal + running_equal + remaining) / total
            unreachable = np.flatnonzero(best_case < threshold)
            if unreachable.size:
                stop = int(unreachable[0])
                equal += int(running_equal[stop])
                processed += stop + 1
                logger.debug(
                    f"Early out after {processed}/{total} samples "
                    f"(equal={equal}, threshold={threshold})"
                )
                return _clamp_ratio(equal / total)

        equal += int(np.count_nonzero(matches))
        processed += sample_cols

    if processed <= 0:
        return 1.0
    return _clamp_ratio(equal / total)
