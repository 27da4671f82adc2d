"""
Duplicate Removal Module
========================

Consecutive duplicate detection and collapsing.

This module provides:
    - is_duplicate: pairwise test with ROI selection
    - DuplicateGrouper: incremental state machine (feed/finish)
    - remove_duplicates: whole-sequence convenience wrapper

Only temporal neighbours are collapsed; there is no global dedup.
"""

from frame_dedup.dedup.detector import DuplicateCheck, is_duplicate, select_roi
from frame_dedup.dedup.grouper import DedupResult, DuplicateGrouper, remove_duplicates

__all__ = [
    # Detection
    "DuplicateCheck",
    "is_duplicate",
    "select_roi",
    # Grouping
    "DedupResult",
    "DuplicateGrouper",
    "remove_duplicates",
]
