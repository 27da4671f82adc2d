"""
Pixel Comparison Primitives
===========================

Vectorised pixel-equality tests over packed 32-bit pixels.

Equality Rule:
    tolerance == 0:
        equal iff ((a XOR b) AND mask) == 0
        (exact match restricted to the masked bits)

    tolerance > 0:
        for each channel with any bit set in the mask,
        |channel(a) - channel(b)| <= tolerance
        (channels absent from the mask are skipped entirely)
"""

from typing import Optional, Union

import numpy as np

from frame_dedup.models.geometry import Rect
from frame_dedup.models.pixel import CHANNELS


ArrayOrPixel = Union[np.ndarray, int]


def pixels_equal(
    a: ArrayOrPixel,
    b: ArrayOrPixel,
    tolerance: int,
    mask: int,
) -> Union[np.ndarray, bool]:
    """
    Elementwise pixel equality under tolerance and channel mask.

    Args:
        a: Packed pixel or uint32 array
        b: Packed pixel or uint32 array (broadcastable to a)
        tolerance: Per-channel tolerance (<= 0 means exact)
        mask: Packed channel mask

    Returns:
        Boolean array, or a plain bool when both inputs are scalars
    """
    pa = np.asarray(a, dtype=np.uint32)
    pb = np.asarray(b, dtype=np.uint32)

    if tolerance <= 0:
        result = ((pa ^ pb) & np.uint32(mask)) == 0
    else:
        result = np.ones(np.broadcast(pa, pb).shape, dtype=bool)
        for _, bits, shift in CHANNELS:
            if not mask & bits:
                continue
            ca = ((pa >> shift) & 0xFF).astype(np.int16)
            cb = ((pb >> shift) & 0xFF).astype(np.int16)
            result &= np.abs(ca - cb) <= tolerance

    if np.ndim(result) == 0:
        return bool(result)
    return result


def diff_bounds(a: np.ndarray, b: np.ndarray, mask: int) -> Optional[Rect]:
    """
    Bounding box of pixels that differ under the channel mask.

    Args:
        a: (H, W) uint32 pixels
        b: (H, W) uint32 pixels
        mask: Packed channel mask

    Returns:
        Smallest rectangle containing every differing pixel, or None if
        the images are identical under the mask
    """
    diff = ((a ^ b) & np.uint32(mask)) != 0
    diff_rows = np.flatnonzero(diff.any(axis=1))
    if diff_rows.size == 0:
        return None
    diff_cols = np.flatnonzero(diff.any(axis=0))
    return Rect.from_edges(
        int(diff_cols[0]),
        int(diff_rows[0]),
        int(diff_cols[-1]) + 1,
        int(diff_rows[-1]) + 1,
    )
