"""
Market snapshot cache module.

Per-segment lazy fetch/reuse of ranked coin lists with in-flight coalescing.
"""

from .snapshot_cache import MarketSnapshotCache, SegmentEntry, SegmentStatus

__all__ = ["MarketSnapshotCache", "SegmentEntry", "SegmentStatus"]
