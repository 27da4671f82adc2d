"""
Duplicate Grouper
=================

Single-pass collapsing of consecutive duplicate frames.

The grouper is a small state machine with one reference frame and a run
accumulator (member count and delay sum). Every incoming frame is tested
against the reference:

    duplicate:
        run grows by one frame; then, by keep policy,
            FIRST -> reference stays; incoming frame is removed.
                     Later frames keep comparing against the same
                     reference (anchored comparison).
            LAST  -> reference becomes the incoming frame; the frame
                     before it is removed. Later frames compare against
                     their immediate predecessor (chained comparison).

    not duplicate:
        run closes; the reference is emitted with its delay merged per
        DelayMergePolicy; the incoming frame starts a new run.

finish() closes the last run. Frames can be fed one at a time (streaming)
or in bulk through remove_duplicates().

Design Rules:
    - Input frames are never mutated; emitted frames are new records
      sharing the original rasters
    - Removed indices are positions in the fed sequence, ascending
"""

import logging
from typing import Iterable, List, NamedTuple, Optional

from frame_dedup.config import DedupConfig
from frame_dedup.dedup.detector import is_duplicate
from frame_dedup.models.frame import Frame
from frame_dedup.models.policy import KeepPolicy


logger = logging.getLogger(__name__)


class DedupResult(NamedTuple):
    """Filtered frames plus the positions of the frames that were dropped."""

    frames: List[Frame]
    removed_indices: List[int]

    @property
    def removed_count(self) -> int:
        return len(self.removed_indices)


class DuplicateGrouper:
    """
    Stateful consecutive-duplicate collapser.

    Attributes:
        config: Comparison and merge settings

    Example:
        grouper = DuplicateGrouper(config)

        for frame in captured:
            kept = grouper.feed(frame)
            if kept is not None:
                encoder.write(kept)

        last = grouper.finish()
        if last is not None:
            encoder.write(last)
    """

    def __init__(self, config: Optional[DedupConfig] = None) -> None:
        """
        Initialize grouper.

        Args:
            config: Comparison settings; defaults to DedupConfig()
        """
        self.config = config if config is not None else DedupConfig()

        # Current run
        self._reference: Optional[Frame] = None
        self._reference_position: int = -1
        self._run_count: int = 0
        self._run_delay_sum: int = 0

        # Totals
        self._position: int = 0
        self._emitted: int = 0
        self._removed: List[int] = []

    def feed(self, frame: Frame) -> Optional[Frame]:
        """
        Process the next frame in capture order.

        Args:
            frame: Next frame

        Returns:
            The merged frame of the run this frame closed, or None if the
            frame started or extended a run
        """
        position = self._position
        self._position += 1

        if self._reference is None:
            self._start_run(frame, position)
            return None

        check = is_duplicate(self._reference, frame, self.config)

        if check.is_duplicate:
            self._run_count += 1
            self._run_delay_sum += frame.delay_ms

            if self.config.keep_policy is KeepPolicy.LAST:
                dropped = self._reference_position
                self._reference = frame
                self._reference_position = position
            else:
                dropped = position
            self._removed.append(dropped)

            logger.debug(
                f"Frame {position} duplicates reference "
                f"(similarity={check.similarity:.4f}); dropped {dropped}"
            )
            return None

        emitted = self._close_run()
        self._start_run(frame, position)
        return emitted

    def finish(self) -> Optional[Frame]:
        """
        Close the final run.

        Returns:
            The merged last frame, or None if nothing is pending
        """
        if self._reference is None:
            return None
        emitted = self._close_run()
        self._reference = None
        self._reference_position = -1
        return emitted

    def _start_run(self, frame: Frame, position: int) -> None:
        self._reference = frame
        self._reference_position = position
        self._run_count = 1
        self._run_delay_sum = frame.delay_ms

    def _close_run(self) -> Frame:
        reference = self._reference
        delay = self.config.delay_merge.merge(
            reference.delay_ms,
            self._run_delay_sum,
            self._run_count,
        )
        self._emitted += 1
        return reference.with_delay(delay)

    def reset(self) -> None:
        """Discard all state, including any pending run."""
        self._reference = None
        self._reference_position = -1
        self._run_count = 0
        self._run_delay_sum = 0
        self._position = 0
        self._emitted = 0
        self._removed = []

    @property
    def removed_indices(self) -> List[int]:
        """Positions of removed frames so far, ascending."""
        return list(self._removed)

    @property
    def removed_count(self) -> int:
        return len(self._removed)

    @property
    def frame_count(self) -> int:
        """Number of frames fed."""
        return self._position

    def get_metrics(self) -> dict:
        """Get grouper metrics for observability."""
        return {
            "frames_in": self._position,
            "frames_out": self._emitted,
            "removed": len(self._removed),
            "pending_run": self._run_count if self._reference is not None else 0,
            "keep_policy": self.config.keep_policy.value,
            "delay_merge": self.config.delay_merge.value,
        }


def remove_duplicates(
    frames: Iterable[Frame],
    config: Optional[DedupConfig] = None,
) -> DedupResult:
    """
    Collapse consecutive duplicate frames.

    Args:
        frames: Frames in capture order
        config: Comparison and merge settings

    Returns:
        DedupResult with the filtered frames (delays merged) and the
        ascending positions of the dropped input frames. Empty input
        yields an empty result.
    """
    grouper = DuplicateGrouper(config)
    output: List[Frame] = []

    for frame in frames:
        emitted = grouper.feed(frame)
        if emitted is not None:
            output.append(emitted)

    last = grouper.finish()
    if last is not None:
        output.append(last)

    if grouper.frame_count:
        logger.info(
            f"Duplicate removal: {grouper.frame_count} frames in, "
            f"{len(output)} out, {grouper.removed_count} removed"
        )

    return DedupResult(frames=output, removed_indices=grouper.removed_indices)
