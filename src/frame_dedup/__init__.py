"""
frame_dedup
===========

Collapse visually redundant consecutive frames before encoding.

Captured animations (screen recordings, GIF captures) often repeat the
same image for many ticks. This package compares neighbouring frames
pixel by pixel, drops the redundant ones and merges their display time
into the frame that is kept.

Components:
    - models: Raster, Frame, Rect, policies and pixel packing
    - similarity: per-pixel similarity ratio between two rasters
    - dedup: duplicate detection and run collapsing
    - stream: incremental filtering and image decoding
    - config: pydantic configuration, YAML persistence, logging setup

Example:
    from frame_dedup import DedupConfig, remove_duplicates

    result = remove_duplicates(frames, DedupConfig(similarity_threshold=0.98))
    encoder.write_all(result.frames)
"""

__version__ = "0.1.0"

from frame_dedup.config import DedupConfig, Settings, load_config, save_config
from frame_dedup.dedup import DedupResult, DuplicateGrouper, is_duplicate, remove_duplicates
from frame_dedup.models import DelayMergePolicy, Frame, KeepPolicy, Raster, Rect
from frame_dedup.similarity import calculate_similarity

__all__ = [
    "__version__",
    "DedupConfig",
    "Settings",
    "load_config",
    "save_config",
    "Frame",
    "Raster",
    "Rect",
    "KeepPolicy",
    "DelayMergePolicy",
    "calculate_similarity",
    "is_duplicate",
    "DuplicateGrouper",
    "DedupResult",
    "remove_duplicates",
]
