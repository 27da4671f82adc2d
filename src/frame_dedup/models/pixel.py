"""
Pixel Packing
=============

Helpers for the packed 32-bit pixel format used throughout the package.

Layout:
    pixel = A << 24 | R << 16 | G << 8 | B

This is the in-memory layout of a little-endian BGRA byte buffer, which
is what OpenCV produces for 4-channel images, so decoded images can be
viewed as packed pixels without conversion.

Channel masks use the same layout: a mask selects the bits of each
channel that participate in equality tests.
"""

from typing import Tuple


RED_MASK = 0x00FF0000
GREEN_MASK = 0x0000FF00
BLUE_MASK = 0x000000FF
ALPHA_MASK = 0xFF000000

RGB_MASK = RED_MASK | GREEN_MASK | BLUE_MASK
RGBA_MASK = RGB_MASK | ALPHA_MASK

# (name, mask, shift) for every channel, in the order they are tested
CHANNELS: Tuple[Tuple[str, int, int], ...] = (
    ("red", RED_MASK, 16),
    ("green", GREEN_MASK, 8),
    ("blue", BLUE_MASK, 0),
    ("alpha", ALPHA_MASK, 24),
)


def pack_rgba(r: int, g: int, b: int, a: int = 0) -> int:
    """Pack 8-bit channel values into a single 32-bit pixel."""
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def unpack_rgba(pixel: int) -> Tuple[int, int, int, int]:
    """Split a packed pixel into its (r, g, b, a) channel values."""
    pixel = int(pixel)
    return (
        (pixel >> 16) & 0xFF,
        (pixel >> 8) & 0xFF,
        pixel & 0xFF,
        (pixel >> 24) & 0xFF,
    )


def channel_mask(
    red: bool = True,
    green: bool = True,
    blue: bool = True,
    alpha: bool = False,
) -> int:
    """
    Build a channel mask from per-channel flags.

    Example:
        channel_mask(alpha=True) == RGBA_MASK
    """
    mask = 0
    if red:
        mask |= RED_MASK
    if green:
        mask |= GREEN_MASK
    if blue:
        mask |= BLUE_MASK
    if alpha:
        mask |= ALPHA_MASK
    return mask
