"""
Stream Module
=============

Integration points for capture pipelines.

This module provides:
    - dedupe_frames / dedupe_stream: incremental duplicate filtering
    - decode_raster / load_raster: encoded image -> Raster (OpenCV)

Example:
    from frame_dedup.stream import dedupe_stream

    async for frame in dedupe_stream(source, settings.dedup):
        encoder.write(frame)
"""

from frame_dedup.stream.image_decoder import ImageDecodeError, decode_raster, load_raster
from frame_dedup.stream.pipeline import dedupe_frames, dedupe_stream


__all__ = [
    "dedupe_frames",
    "dedupe_stream",
    "decode_raster",
    "load_raster",
    "ImageDecodeError",
]
