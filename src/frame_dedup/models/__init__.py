"""
Data Models
===========

Core data types for frame duplicate removal.

This module re-exports all data models for convenient access.

Models:
    Geometry:
        - Rect: Region of interest rectangle

    Images:
        - Raster: Bounds-checked packed pixel buffer
        - pack_rgba / unpack_rgba: Pixel packing helpers
        - channel masks: RED_MASK, GREEN_MASK, BLUE_MASK, ALPHA_MASK, ...

    Frames:
        - Frame: Image + capture index + delay + optional ROI

    Policies:
        - KeepPolicy: Keep first or last frame of a run
        - DelayMergePolicy: Keep, average or sum run delays
"""

from frame_dedup.models.geometry import Rect
from frame_dedup.models.pixel import (
    ALPHA_MASK,
    BLUE_MASK,
    GREEN_MASK,
    RED_MASK,
    RGB_MASK,
    RGBA_MASK,
    channel_mask,
    pack_rgba,
    unpack_rgba,
)
from frame_dedup.models.raster import Raster
from frame_dedup.models.frame import Frame
from frame_dedup.models.policy import DelayMergePolicy, KeepPolicy

__all__ = [
    # Geometry
    "Rect",
    # Images
    "Raster",
    "pack_rgba",
    "unpack_rgba",
    "channel_mask",
    "RED_MASK",
    "GREEN_MASK",
    "BLUE_MASK",
    "ALPHA_MASK",
    "RGB_MASK",
    "RGBA_MASK",
    # Frames
    "Frame",
    # Policies
    "KeepPolicy",
    "DelayMergePolicy",
]
