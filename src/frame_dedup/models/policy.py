"""
Removal Policies
================

Enumerations controlling how a duplicate run collapses.

    - KeepPolicy: which frame of a run survives
    - DelayMergePolicy: how the survivor's delay is derived from the run
"""

from enum import Enum


class KeepPolicy(str, Enum):
    """
    Which frame of a duplicate run is kept.

    Attributes:
        FIRST: Keep the first frame. Later frames are compared against it
            (anchored comparison).
        LAST: Keep the last frame. Each frame is compared against the one
            before it (chained comparison).
    """

    FIRST = "first"
    LAST = "last"


class DelayMergePolicy(str, Enum):
    """
    How the kept frame's delay is adjusted when a run collapses.

    Attributes:
        KEEP: Leave the kept frame's own delay untouched
        AVERAGE: Integer mean of the run's delays
        SUM: Total of the run's delays (preserves playback duration)
    """

    KEEP = "keep"
    AVERAGE = "average"
    SUM = "sum"

    def merge(self, own_delay: int, delay_sum: int, count: int) -> int:
        """
        Compute the merged delay for a closed run.

        Args:
            own_delay: Delay of the kept frame
            delay_sum: Sum of delays over the run
            count: Number of frames in the run

        Returns:
            Delay in milliseconds for the emitted frame
        """
        if self is DelayMergePolicy.SUM:
            return delay_sum
        if self is DelayMergePolicy.AVERAGE and count > 0:
            return delay_sum // count
        return own_delay
