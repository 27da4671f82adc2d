"""
Test Configuration
==================

Pytest fixtures and helpers for frame_dedup tests.
"""

from typing import Iterable, Optional, Tuple

import numpy as np
import pytest

from frame_dedup.config import DedupConfig
from frame_dedup.models import Frame, Raster, pack_rgba


def make_raster(
    width: int,
    height: int,
    pixel: int,
    patches: Iterable[Tuple[int, int, int, int, int]] = (),
) -> Raster:
    """
    Build a solid raster with optional rectangular patches.

    Args:
        width: Raster width
        height: Raster height
        pixel: Background pixel value
        patches: (x, y, w, h, pixel) rectangles painted over the background
    """
    pixels = np.full((height, width), pixel, dtype=np.uint32)
    for x, y, w, h, value in patches:
        pixels[y : y + h, x : x + w] = value
    return Raster(pixels)


def make_frame(
    index: int,
    image: Optional[Raster],
    delay_ms: int,
    roi=None,
) -> Frame:
    return Frame(index=index, image=image, delay_ms=delay_ms, roi=roi)


@pytest.fixture
def default_config():
    """Provide a default DedupConfig (0.90 threshold, RGB exact, keep first, sum)."""
    return DedupConfig()


@pytest.fixture
def gray_pair():
    """Two identical 32x32 gray rasters backed by separate buffers."""
    color = pack_rgba(100, 100, 100, 0)
    return make_raster(32, 32, color), make_raster(32, 32, color)


@pytest.fixture
def abc_rasters():
    """Three distinct solid rasters A, B, C."""
    return (
        make_raster(32, 32, pack_rgba(10, 10, 10, 0)),
        make_raster(32, 32, pack_rgba(20, 20, 20, 0)),
        make_raster(32, 32, pack_rgba(30, 30, 30, 0)),
    )
