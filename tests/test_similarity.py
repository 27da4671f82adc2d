"""
Similarity Tests
================

Tests for pixel equality and the similarity engine.
"""

import numpy as np
import pytest

from frame_dedup.config import DedupConfig
from frame_dedup.models import RGB_MASK, RGBA_MASK, Raster, Rect, pack_rgba
from frame_dedup.similarity import (
    calculate_similarity,
    diff_bounds,
    effective_threshold,
    pixels_equal,
)

from conftest import make_raster


BLACK = pack_rgba(0, 0, 0, 0)
WHITE = pack_rgba(255, 255, 255, 0)
GRAY = pack_rgba(100, 100, 100, 0)


class TestPixelsEqual:
    """Tests for the pixel equality rule."""

    def test_exact_match_under_mask(self):
        assert pixels_equal(GRAY, pack_rgba(100, 100, 100, 200), 0, RGB_MASK)
        assert not pixels_equal(GRAY, pack_rgba(100, 100, 100, 200), 0, RGBA_MASK)

    def test_partial_mask_bits(self):
        """Strict mode compares only the masked bits, not whole channels."""
        a = pack_rgba(0b1000_0000, 0, 0)
        b = pack_rgba(0b1000_0001, 0, 0)
        assert pixels_equal(a, b, 0, 0x00F00000)
        assert not pixels_equal(a, b, 0, 0x000F0000)

    def test_tolerance_boundary(self):
        assert pixels_equal(GRAY, pack_rgba(101, 100, 100, 0), 1, RGB_MASK)
        assert not pixels_equal(GRAY, pack_rgba(102, 100, 100, 0), 1, RGB_MASK)

    def test_tolerance_skips_unmasked_channels(self):
        assert pixels_equal(GRAY, pack_rgba(100, 100, 100, 255), 3, RGB_MASK)
        assert not pixels_equal(GRAY, pack_rgba(100, 100, 100, 255), 3, RGBA_MASK)

    def test_tolerance_uses_absolute_difference(self):
        assert pixels_equal(pack_rgba(100, 5, 100, 0), pack_rgba(100, 7, 100, 0), 2, RGB_MASK)
        assert pixels_equal(pack_rgba(100, 7, 100, 0), pack_rgba(100, 5, 100, 0), 2, RGB_MASK)

    def test_vectorised(self):
        a = np.array([GRAY, GRAY, GRAY], dtype=np.uint32)
        b = np.array([GRAY, pack_rgba(101, 100, 100, 0), WHITE], dtype=np.uint32)
        np.testing.assert_array_equal(pixels_equal(a, b, 1, RGB_MASK), [True, True, False])


class TestDiffBounds:
    """Tests for the differing-pixel bounding box."""

    def test_identical(self):
        a = make_raster(8, 8, GRAY)
        assert diff_bounds(a.rows(), a.rows(), RGB_MASK) is None

    def test_box_spans_all_differences(self):
        a = make_raster(10, 10, BLACK)
        b = make_raster(10, 10, BLACK, [(2, 3, 1, 1, WHITE), (6, 7, 1, 1, WHITE)])
        assert diff_bounds(a.rows(), b.rows(), RGB_MASK) == Rect(2, 3, 5, 5)


class TestDegenerateInputs:
    """Tests for defined results on degenerate inputs."""

    def test_missing_image(self, gray_pair):
        a, _ = gray_pair
        assert calculate_similarity(None, a) == 0.0
        assert calculate_similarity(a, None) == 0.0
        assert calculate_similarity(None, None) == 0.0

    @pytest.mark.parametrize("size", [(33, 32), (32, 31)])
    def test_size_mismatch(self, size):
        a = make_raster(32, 32, GRAY)
        b = make_raster(size[0], size[1], GRAY)
        assert calculate_similarity(a, b) == 0.0
        assert calculate_similarity(a, b, config=DedupConfig(per_channel_tolerance=50)) == 0.0

    @pytest.mark.parametrize("roi", [Rect(10, 10, 0, 0), Rect(3, 3, 5, 0), Rect(40, 40, 5, 5)])
    def test_empty_region_is_identical(self, roi):
        a = make_raster(32, 32, BLACK)
        b = make_raster(32, 32, WHITE)
        assert calculate_similarity(a, b, roi) == 1.0


class TestIdentity:
    """A raster is always fully similar to itself."""

    @pytest.mark.parametrize(
        "config",
        [
            DedupConfig(),
            DedupConfig(sample_step_x=3, sample_step_y=2),
            DedupConfig(per_channel_tolerance=4),
            DedupConfig(channel_mask=RGBA_MASK, enable_early_out=False),
        ],
    )
    @pytest.mark.parametrize("roi", [None, Rect(0, 0, 32, 32), Rect(5, 7, 11, 3)])
    def test_identity(self, config, roi):
        raster = make_raster(32, 32, GRAY, [(4, 4, 9, 9, WHITE)])
        assert calculate_similarity(raster, raster, roi, config) == 1.0

    def test_separate_buffers(self, gray_pair):
        a, b = gray_pair
        assert calculate_similarity(a, b) == 1.0


class TestExactFastPath:
    """Tests for the bounding-box estimate used by exact full-frame comparison."""

    def test_completely_different(self):
        a = make_raster(64, 64, pack_rgba(10, 20, 30, 0))
        c = make_raster(64, 64, pack_rgba(200, 100, 50, 0))
        assert calculate_similarity(a, c) == pytest.approx(0.0, abs=1e-9)

    def test_stripe(self):
        """A 16 px stripe on an 80 px wide image leaves 80% similarity."""
        a = make_raster(80, 60, BLACK)
        b = make_raster(80, 60, BLACK, [(0, 0, 16, 60, WHITE)])
        assert calculate_similarity(a, b) == pytest.approx(1.0 - 16 / 80, abs=1e-9)

    def test_sparse_differences_use_box_area(self):
        """
        Two corner pixels span the whole frame, so the estimate is 0.

        The box area is never below the differing-pixel count, so this
        estimate can only understate similarity, never overstate it.
        """
        a = make_raster(10, 10, BLACK)
        b = make_raster(10, 10, BLACK, [(0, 0, 1, 1, WHITE), (9, 9, 1, 1, WHITE)])

        assert calculate_similarity(a, b) == 0.0

        counted = DedupConfig(per_channel_tolerance=1, enable_early_out=False)
        assert calculate_similarity(a, b, config=counted) == pytest.approx(0.98)

    def test_oversized_roi_is_full_frame(self):
        a = make_raster(10, 10, BLACK)
        b = make_raster(10, 10, BLACK, [(0, 0, 1, 1, WHITE)])
        assert calculate_similarity(a, b, Rect(-5, -5, 50, 50)) == pytest.approx(0.99)


class TestChannelsAndTolerance:
    """Tests for channel masking and per-channel tolerance."""

    def test_alpha_ignored_by_default(self):
        a = make_raster(32, 32, GRAY)
        b = make_raster(32, 32, pack_rgba(100, 100, 100, 200))
        assert calculate_similarity(a, b) == 1.0

    def test_alpha_included(self):
        a = make_raster(32, 32, GRAY)
        b = make_raster(32, 32, pack_rgba(100, 100, 100, 200))
        config = DedupConfig(channel_mask=RGBA_MASK)
        assert calculate_similarity(a, b, config=config) == pytest.approx(0.0, abs=1e-9)

    def test_masked_out_channel_with_tolerance(self):
        a = make_raster(16, 16, GRAY)
        b = make_raster(16, 16, pack_rgba(100, 100, 180, 0))
        config = DedupConfig(channel_mask=["red", "green"], per_channel_tolerance=2)
        assert calculate_similarity(a, b, config=config) == 1.0

    def test_tolerance_boundary(self):
        a = make_raster(10, 10, GRAY)
        b = make_raster(10, 10, pack_rgba(101, 100, 100, 0))

        assert calculate_similarity(a, b, config=DedupConfig(per_channel_tolerance=1)) == 1.0
        assert calculate_similarity(a, b, config=DedupConfig(per_channel_tolerance=0)) == 0.0

    def test_tolerance_plus_one_fails(self):
        a = make_raster(10, 10, GRAY)
        b = make_raster(10, 10, pack_rgba(102, 100, 100, 0))
        config = DedupConfig(per_channel_tolerance=1, enable_early_out=False)
        assert calculate_similarity(a, b, config=config) == 0.0


class TestSampledScan:
    """Tests for strided sampling, ROI scans and early-out."""

    def test_unsampled_pixel_is_invisible(self):
        a = make_raster(10, 10, BLACK)
        b = make_raster(10, 10, BLACK, [(1, 1, 1, 1, WHITE)])

        strided = DedupConfig(sample_step_x=2, sample_step_y=2)
        assert calculate_similarity(a, b, config=strided) == 1.0
        assert calculate_similarity(a, b) == pytest.approx(0.99)

    def test_sample_count_rounds_up(self):
        """A 5x5 region at stride 2 has 3x3 samples."""
        a = make_raster(5, 5, BLACK)
        b = make_raster(5, 5, BLACK, [(0, 0, 1, 1, WHITE)])
        config = DedupConfig(sample_step_x=2, sample_step_y=2, enable_early_out=False)
        assert calculate_similarity(a, b, config=config) == pytest.approx(8 / 9)

    def test_sampling_grid_starts_at_roi(self):
        a = make_raster(10, 10, BLACK)
        b = make_raster(10, 10, BLACK, [(3, 3, 1, 1, WHITE)])
        config = DedupConfig(sample_step_x=2, sample_step_y=2, enable_early_out=False)

        assert calculate_similarity(a, b, Rect(0, 0, 10, 10), config) == 1.0
        assert calculate_similarity(a, b, Rect(3, 3, 4, 4), config) == pytest.approx(3 / 4)

    def test_roi_restricts_comparison(self):
        a = make_raster(80, 60, BLACK)
        b = make_raster(80, 60, BLACK, [(0, 0, 16, 60, WHITE)])

        assert calculate_similarity(a, b, Rect(0, 0, 16, 60)) == pytest.approx(0.0, abs=1e-12)
        assert calculate_similarity(a, b, Rect(16, 0, 64, 60)) == 1.0

    def test_early_out_reports_over_total(self):
        """
        Left half differs on a 10x10 image, threshold 0.95.

        The sixth unequal sample makes 0.95 unreachable; by then only the
        five equal samples of row 0 were seen, so the ratio is 5/100.
        """
        a = make_raster(10, 10, BLACK)
        b = make_raster(10, 10, BLACK, [(0, 0, 5, 10, WHITE)])

        early = DedupConfig(similarity_threshold=0.95, per_channel_tolerance=1)
        full = DedupConfig(similarity_threshold=0.95, per_channel_tolerance=1, enable_early_out=False)

        assert calculate_similarity(a, b, config=early) == pytest.approx(0.05)
        assert calculate_similarity(a, b, config=full) == pytest.approx(0.5)

    def test_early_out_never_flips_decision(self):
        a = make_raster(20, 20, BLACK)
        b = make_raster(20, 20, BLACK, [(3, 0, 2, 20, WHITE), (11, 5, 6, 6, WHITE)])

        for threshold in (0.5, 0.8, 0.85, 0.9, 0.95):
            early = DedupConfig(similarity_threshold=threshold, sample_step_x=2)
            full = early.model_copy(update={"enable_early_out": False})
            sim_early = calculate_similarity(a, b, config=early)
            sim_full = calculate_similarity(a, b, config=full)
            assert (sim_early >= threshold) == (sim_full >= threshold)
            assert sim_early <= sim_full

    def test_no_early_out_at_zero_threshold(self):
        a = make_raster(10, 10, BLACK)
        b = make_raster(10, 10, WHITE)
        config = DedupConfig(similarity_threshold=0.0, per_channel_tolerance=1)
        assert calculate_similarity(a, b, config=config) == 0.0

    def test_padded_stride_is_ignored(self):
        """Pixels in the row padding never take part in comparison."""
        left = np.full((4, 8), BLACK, dtype=np.uint32)
        right = np.full((4, 8), BLACK, dtype=np.uint32)
        right[:, 6:] = WHITE

        a = Raster(left, width=6)
        b = Raster(right, width=6)
        assert calculate_similarity(a, b) == 1.0
        assert calculate_similarity(a, b, config=DedupConfig(per_channel_tolerance=1)) == 1.0


class TestUnvalidatedThreshold:
    """Thresholds outside [0, 1] are clamped by the engine itself."""

    @pytest.mark.parametrize("value, expected", [(1.5, 1.0), (-0.3, 0.0), (0.4, 0.4)])
    def test_effective_threshold(self, value, expected):
        config = DedupConfig.model_construct(similarity_threshold=value)
        assert effective_threshold(config) == expected

    def test_identity_with_oversized_threshold(self):
        raster = make_raster(10, 10, GRAY, [(2, 2, 3, 3, WHITE)])
        config = DedupConfig.model_construct(similarity_threshold=1.5, per_channel_tolerance=1)

        assert calculate_similarity(raster, raster, config=config) == 1.0
