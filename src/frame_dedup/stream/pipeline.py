"""
Streaming Duplicate Filter
==========================

Duplicate removal for frames that arrive one at a time.

A capture loop does not have the whole sequence up front; it produces a
frame per timer tick and wants merged frames out as soon as a run closes.
These generators wrap DuplicateGrouper for that use:

    - dedupe_frames: synchronous iterables
    - dedupe_stream: async iterables (e.g. a queue fed by a capture task)

When ``config.enabled`` is False frames pass through untouched.

Example:
    async for frame in dedupe_stream(capture.frames(), settings.dedup):
        encoder.write(frame)
"""

import logging
from typing import AsyncIterable, AsyncIterator, Iterable, Iterator

from frame_dedup.config import DedupConfig
from frame_dedup.dedup.grouper import DuplicateGrouper
from frame_dedup.models.frame import Frame


logger = logging.getLogger(__name__)


def dedupe_frames(frames: Iterable[Frame], config: DedupConfig) -> Iterator[Frame]:
    """
    Yield merged frames as duplicate runs close.

    Args:
        frames: Frames in capture order
        config: Comparison settings

    Yields:
        Kept frames with merged delays
    """
    if not config.enabled:
        yield from frames
        return

    grouper = DuplicateGrouper(config)
    for frame in frames:
        emitted = grouper.feed(frame)
        if emitted is not None:
            yield emitted

    last = grouper.finish()
    if last is not None:
        yield last

    logger.info(f"Stream closed: {grouper.get_metrics()}")


async def dedupe_stream(
    frames: AsyncIterable[Frame],
    config: DedupConfig,
) -> AsyncIterator[Frame]:
    """
    Async variant of dedupe_frames.

    Cancelling the consumer stops iteration; a run still pending at that
    point is discarded.

    Args:
        frames: Async source of frames in capture order
        config: Comparison settings

    Yields:
        Kept frames with merged delays
    """
    if not config.enabled:
        async for frame in frames:
            yield frame
        return

    grouper = DuplicateGrouper(config)
    async for frame in frames:
        emitted = grouper.feed(frame)
        if emitted is not None:
            yield emitted

    last = grouper.finish()
    if last is not None:
        yield last

    logger.info(f"Stream closed: {grouper.get_metrics()}")
