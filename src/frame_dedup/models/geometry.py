"""
Geometry Models
===============

Rectangles used to restrict frame comparison to a region of interest.

All coordinates are in IMAGE SPACE (pixels), origin at the top-left of
the raster. X increases rightward, Y increases downward. A rectangle
covers columns ``[x, right)`` and rows ``[y, bottom)``.
"""

from dataclasses import dataclass


def _clamp(value: int, low: int, high: int) -> int:
    return low if value < low else (high if value > high else value)


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Axis-aligned rectangle in pixel coordinates.

    Width and height may be zero or negative; such rectangles have no
    area and are treated as empty by every consumer.

    Attributes:
        x: Left edge (inclusive)
        y: Top edge (inclusive)
        width: Horizontal extent in pixels
        height: Vertical extent in pixels
    """

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_edges(cls, left: int, top: int, right: int, bottom: int) -> "Rect":
        """Build a rectangle from its left/top/right/bottom edges."""
        return cls(x=left, y=top, width=right - left, height=bottom - top)

    @property
    def right(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def area(self) -> int:
        """Pixel area, zero for empty rectangles."""
        if self.is_empty:
            return 0
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def clamp(self, width: int, height: int) -> "Rect":
        """
        Intersect with the bounds ``[0, width) x [0, height)``.

        Edges are clamped independently; an inverted result collapses
        to a zero-area rectangle anchored at the clamped left/top edge.

        Args:
            width: Bounding width in pixels
            height: Bounding height in pixels

        Returns:
            Clamped rectangle (possibly empty)
        """
        left = _clamp(self.x, 0, width)
        top = _clamp(self.y, 0, height)
        right = _clamp(self.right, 0, width)
        bottom = _clamp(self.bottom, 0, height)
        if right < left:
            right = left
        if bottom < top:
            bottom = top
        return Rect.from_edges(left, top, right, bottom)

    def covers(self, width: int, height: int) -> bool:
        """True if this rectangle spans exactly ``[0, width) x [0, height)``."""
        return (
            self.x == 0
            and self.y == 0
            and self.width == width
            and self.height == height
        )
