"""
Per-segment market snapshot cache.

Each segment key moves through EMPTY -> LOADING -> LOADED | FAILED. Callers
arriving while a segment is LOADING await the same in-flight fetch, so one
cache miss costs exactly one provider request. Failures leave the segment
without coins and are re-raised to every waiter; nothing is retried here.
"""

import asyncio
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..data.models import CoinSnapshot, Segment
from ..logging.config import get_cache_logger

cache_logger = get_cache_logger(__name__)

SegmentFetcher = Callable[[Segment], Awaitable[Sequence[CoinSnapshot]]]


class SegmentStatus(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class SegmentEntry:
    """Cached state of one segment."""
    segment: Segment
    status: SegmentStatus = SegmentStatus.EMPTY
    coins: tuple[CoinSnapshot, ...] = field(default=())
    error: Optional[BaseException] = None


class MarketSnapshotCache:
    """Lazy fetch-and-reuse cache of ranked coin lists keyed by segment."""

    def __init__(self, fetcher: SegmentFetcher):
        self.fetcher = fetcher
        self.logger = cache_logger
        self._entries: dict[str, SegmentEntry] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._epochs: dict[str, int] = {}

    def status(self, segment: Segment) -> SegmentStatus:
        entry = self._entries.get(segment.key)
        return entry.status if entry else SegmentStatus.EMPTY

    def peek(self, segment: Segment) -> tuple[CoinSnapshot, ...]:
        """Cached coins for a segment without fetching; empty unless LOADED."""
        entry = self._entries.get(segment.key)
        return entry.coins if entry else ()

    def error(self, segment: Segment) -> Optional[BaseException]:
        entry = self._entries.get(segment.key)
        return entry.error if entry else None

    def loaded_segments(self) -> list[Segment]:
        """Loaded segments in ascending rank order."""
        loaded = [e.segment for e in self._entries.values() if e.status is SegmentStatus.LOADED]
        return sorted(loaded, key=lambda s: s.first_rank)

    def all_loaded_coins(self) -> list[CoinSnapshot]:
        """Union of every loaded segment; the first occurrence of an id wins."""
        seen: set[str] = set()
        union = []
        for segment in self.loaded_segments():
            for coin in self._entries[segment.key].coins:
                if coin.id not in seen:
                    seen.add(coin.id)
                    union.append(coin)
        return union

    async def get_or_fetch(self, segment: Segment) -> tuple[CoinSnapshot, ...]:
        """
        Return a segment's coins, fetching them on a cache miss.

        Args:
            segment: Segment to read

        Returns:
            Snapshots in rank order

        Raises:
            Whatever the fetcher raised, for every caller sharing the fetch
        """
        entry = self._entries.get(segment.key)
        if entry is not None and entry.status is SegmentStatus.LOADED:
            return entry.coins

        task = self._inflight.get(segment.key)
        if task is None:
            epoch = self._epochs.get(segment.key, 0)
            self._entries[segment.key] = SegmentEntry(segment=segment, status=SegmentStatus.LOADING)
            self.logger.debug("Segment fetch issued", segment=segment.key, epoch=epoch)
            task = asyncio.ensure_future(self._fetch(segment, epoch))
            self._inflight[segment.key] = task
            task.add_done_callback(lambda t, key=segment.key: self._on_fetch_done(key, t))
        else:
            self.logger.debug("Joined in-flight segment fetch", segment=segment.key)

        # A cancelled caller must not cancel the fetch other callers share
        return await asyncio.shield(task)

    def invalidate(self, segment: Segment) -> None:
        """Drop a segment so the next read refetches; in-flight results are ignored."""
        self._epochs[segment.key] = self._epochs.get(segment.key, 0) + 1
        self._entries.pop(segment.key, None)
        self._inflight.pop(segment.key, None)
        self.logger.info("Segment invalidated", segment=segment.key)

    async def _fetch(self, segment: Segment, epoch: int) -> tuple[CoinSnapshot, ...]:
        try:
            coins = tuple(await self.fetcher(segment))
        except Exception as e:
            if self._epochs.get(segment.key, 0) == epoch:
                self._entries[segment.key] = SegmentEntry(
                    segment=segment, status=SegmentStatus.FAILED, error=e
                )
            self.logger.warning("Segment fetch failed", segment=segment.key, error=str(e))
            raise

        if self._epochs.get(segment.key, 0) == epoch:
            self._entries[segment.key] = SegmentEntry(
                segment=segment, status=SegmentStatus.LOADED, coins=coins
            )
            self.logger.info("Segment loaded", segment=segment.key, count=len(coins))
        else:
            self.logger.info("Discarded fetch for invalidated segment", segment=segment.key, epoch=epoch)
        return coins

    def _on_fetch_done(self, key: str, task: asyncio.Task) -> None:
        owned = self._inflight.get(key) is task
        if owned:
            del self._inflight[key]
        if task.cancelled():
            entry = self._entries.get(key)
            if owned and entry is not None and entry.status is SegmentStatus.LOADING:
                del self._entries[key]
            return
        # Retrieve the exception so an unawaited failure is not reported twice
        task.exception()
