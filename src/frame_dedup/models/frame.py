"""
Frame Data Model
=================

Captured animation frame as seen by the duplicate remover.

Design Rules:
    - Frames are immutable; delay merging produces new records
    - The raster is shared by reference, never copied
    - A missing raster (None) is a valid, degenerate frame
"""

from dataclasses import dataclass, replace
from typing import Optional

from frame_dedup.models.geometry import Rect
from frame_dedup.models.raster import Raster


@dataclass(frozen=True, slots=True)
class Frame:
    """
    One frame of a capture sequence.

    Attributes:
        index: Position in capture order
        image: Packed pixel raster, or None if the frame has no image
        delay_ms: Display duration in milliseconds
        roi: Optional region restricting comparison. Rectangles with
            zero or negative area count as "no ROI".
    """

    index: int
    image: Optional[Raster]
    delay_ms: int
    roi: Optional[Rect] = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.delay_ms < 0:
            raise ValueError("delay_ms must be non-negative")

    @property
    def has_roi(self) -> bool:
        """True if the frame carries a non-empty region of interest."""
        return self.roi is not None and not self.roi.is_empty

    def with_delay(self, delay_ms: int) -> "Frame":
        """Return a copy with a new delay, sharing the same raster."""
        return replace(self, delay_ms=delay_ms)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the image."""
        size = f"{self.image.width}x{self.image.height}" if self.image else "None"
        return (
            f"Frame(index={self.index}, image={size}, "
            f"delay_ms={self.delay_ms}, roi={self.roi})"
        )
