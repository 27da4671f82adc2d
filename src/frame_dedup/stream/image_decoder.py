"""
Image Decoder
=============

Decoding encoded images (PNG, BMP, JPEG, ...) into packed rasters.

Design Rules:
    - This is the ONLY place in the codebase that decodes images
    - Output is always 8-bit BGRA, viewed as packed pixels
    - Grayscale and BGR inputs get an opaque alpha channel
    - Fails fast on corrupt or unsupported images
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from frame_dedup.models.raster import Raster


logger = logging.getLogger(__name__)


class ImageDecodeError(Exception):
    """Raised when image decoding fails."""
    pass


def _to_raster(image: np.ndarray, source: str) -> Raster:
    """Normalise a decoded OpenCV image to BGRA and wrap it."""
    if image.dtype != np.uint8:
        raise ImageDecodeError(f"Unsupported dtype for {source}: {image.dtype}")

    if image.ndim == 2:
        bgra = cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    elif image.ndim == 3 and image.shape[2] == 3:
        bgra = cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    elif image.ndim == 3 and image.shape[2] == 4:
        bgra = image
    else:
        raise ImageDecodeError(f"Invalid image shape for {source}: {image.shape}")

    return Raster.from_bgra(bgra)


def decode_raster(data: bytes) -> Raster:
    """
    Decode an encoded image held in memory.

    Args:
        data: Encoded image bytes

    Returns:
        Raster of packed BGRA pixels

    Raises:
        ImageDecodeError: If decoding fails or the image is unsupported
    """
    if not data:
        raise ImageDecodeError("Empty image data")

    buffer = np.frombuffer(data, np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageDecodeError("Failed to decode image: cv2.imdecode returned None")

    return _to_raster(image, "in-memory image")


def load_raster(path: Union[str, Path]) -> Raster:
    """
    Read and decode an image file.

    Raises:
        ImageDecodeError: If the file is missing, unreadable or unsupported
    """
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageDecodeError(f"Failed to read image: {path}")

    logger.debug(f"Loaded {path}: shape={image.shape}")
    return _to_raster(image, str(path))
