"""
Raster Model
============

Bounds-checked view over a packed 32-bit pixel buffer.

A Raster wraps a 2-D ``numpy.uint32`` array of shape ``(rows, stride)``
and exposes only the ``width x height`` visible area. All access goes
through numpy slicing, so sampling and region iteration can never read
past the allocated buffer.

Design Rules:
    - Never copies or mutates the caller's buffer
    - Views handed out are read-only
    - Bottom-up (flipped) storage is normalised by rows()
"""

from typing import Optional

import numpy as np

from frame_dedup.models.geometry import Rect


class Raster:
    """
    Rectangular image of packed ``A<<24 | R<<16 | G<<8 | B`` pixels.

    Attributes:
        width: Visible width in pixels
        height: Visible height in pixels
        stride: Row span of the underlying buffer in pixels (>= width)
        flipped: True if rows are stored bottom-up

    Example:
        pixels = np.zeros((480, 640), dtype=np.uint32)
        raster = Raster(pixels)
        top_left = raster.pixel(0, 0)
    """

    __slots__ = ("_pixels", "_width", "_height", "_flipped")

    def __init__(
        self,
        pixels: np.ndarray,
        width: Optional[int] = None,
        height: Optional[int] = None,
        flipped: bool = False,
    ) -> None:
        """
        Wrap a packed pixel buffer.

        Args:
            pixels: 2-D uint32 array of shape (rows, stride)
            width: Visible width; defaults to the buffer stride
            height: Visible height; defaults to the buffer row count
            flipped: Rows stored bottom-up

        Raises:
            ValueError: If the buffer is not 2-D uint32 or the visible
                area does not fit inside it
        """
        arr = np.asarray(pixels)
        if arr.ndim != 2:
            raise ValueError(f"pixel buffer must be 2-D, got shape {arr.shape}")
        if arr.dtype != np.uint32:
            raise ValueError(f"pixel buffer must be uint32, got {arr.dtype}")

        rows, stride = arr.shape
        width = stride if width is None else int(width)
        height = rows if height is None else int(height)
        if not 0 <= width <= stride:
            raise ValueError(f"width {width} outside buffer stride {stride}")
        if not 0 <= height <= rows:
            raise ValueError(f"height {height} outside buffer rows {rows}")

        view = arr.view()
        view.flags.writeable = False

        self._pixels = view
        self._width = width
        self._height = height
        self._flipped = bool(flipped)

    @classmethod
    def filled(cls, width: int, height: int, pixel: int) -> "Raster":
        """Create a new raster of the given size filled with one pixel value."""
        return cls(np.full((height, width), pixel, dtype=np.uint32))

    @classmethod
    def from_bgra(cls, image: np.ndarray) -> "Raster":
        """
        View an (H, W, 4) uint8 BGRA image as packed pixels.

        The image is reinterpreted in place when it is C-contiguous;
        otherwise a contiguous copy is made first.
        """
        if image.ndim != 3 or image.shape[2] != 4 or image.dtype != np.uint8:
            raise ValueError(
                f"expected (H, W, 4) uint8 BGRA image, got {image.shape} {image.dtype}"
            )
        height, width = image.shape[:2]
        packed = np.ascontiguousarray(image).view("<u4").reshape(height, width)
        return cls(packed)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def stride(self) -> int:
        return self._pixels.shape[1]

    @property
    def flipped(self) -> bool:
        return self._flipped

    @property
    def bounds(self) -> Rect:
        """Full visible area."""
        return Rect(0, 0, self._width, self._height)

    def rows(self) -> np.ndarray:
        """Read-only top-down (height, width) view of the visible pixels."""
        visible = self._pixels[: self._height, : self._width]
        if self._flipped:
            return visible[::-1]
        return visible

    def region(self, rect: Rect) -> np.ndarray:
        """
        Read-only view of a sub-rectangle.

        Raises:
            ValueError: If the rectangle extends outside the raster
        """
        if (
            rect.x < 0
            or rect.y < 0
            or rect.right > self._width
            or rect.bottom > self._height
        ):
            raise ValueError(
                f"region {rect} outside raster bounds {self._width}x{self._height}"
            )
        if rect.is_empty:
            return self.rows()[0:0, 0:0]
        return self.rows()[rect.y : rect.bottom, rect.x : rect.right]

    def pixel(self, x: int, y: int) -> int:
        """
        Packed pixel value at (x, y).

        Raises:
            IndexError: If the coordinate is outside the raster
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"pixel ({x}, {y}) outside raster {self._width}x{self._height}"
            )
        return int(self.rows()[y, x])

    def to_bgra(self) -> np.ndarray:
        """Copy the visible pixels out as an (H, W, 4) uint8 BGRA image."""
        packed = np.array(self.rows(), dtype="<u4")
        return packed.view(np.uint8).reshape(self._height, self._width, 4)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixel buffer."""
        return (
            f"Raster(width={self._width}, height={self._height}, "
            f"stride={self.stride}, flipped={self._flipped})"
        )
