"""
Content cache with freshness expiry and LRU eviction.

Keeps at most ``max_categories`` category pools resident, each holding at
most ``max_items_per_category`` items per difficulty tier. Entries expire
after ``expiration``. Concurrent requests for an uncached category share a
single repository load.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable

from loguru import logger

from trivia_core.content.models import CategoryPool, ContentCategory, ContentItem
from trivia_core.content.repository import ContentRepository
from trivia_core.core.diagnostics import DiagnosticsLog, ErrorSeverity
from trivia_core.core.exceptions import ContentLoadError, LoadFailureReason
from trivia_core.core.single_flight import SingleFlight


@dataclass
class CacheStatistics:
    """Snapshot of cache state for monitoring."""
    resident_categories: list[ContentCategory]  # least recently used first
    total_items: int
    memory_usage_kb: int
    in_flight: list[ContentCategory]
    source_loaded: bool
    hits: int
    misses: int
    loads: int
    evictions: int

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


class ContentCache:
    """
    LRU cache of category pools in front of a ContentRepository.

    Exposes only get/evict/clear/stats to callers; access-order bookkeeping
    lives in an OrderedDict (most recently used at the end).
    """

    cache_name = "content"

    def __init__(
        self,
        repository: ContentRepository,
        max_categories: int = len(ContentCategory),
        max_items_per_category: int = 200,
        expiration: timedelta = timedelta(hours=1),
        item_size_kb: int = 2,
        source_overhead_kb: int = 500,
        load_timeout: float | None = None,
        clock: Callable[[], datetime] = datetime.now,
        diagnostics: DiagnosticsLog | None = None,
    ):
        if max_categories < 1:
            raise ValueError("max_categories must be at least 1")
        if max_items_per_category < 1:
            raise ValueError("max_items_per_category must be at least 1")

        self.repository = repository
        self.max_categories = max_categories
        self.max_items_per_category = max_items_per_category
        self.expiration = expiration
        self.item_size_kb = item_size_kb
        self.source_overhead_kb = source_overhead_kb
        self.load_timeout = load_timeout
        self.diagnostics = diagnostics if diagnostics is not None else repository.diagnostics
        self._clock = clock

        self._entries: OrderedDict[ContentCategory, CategoryPool] = OrderedDict()
        self._flight: SingleFlight[CategoryPool] = SingleFlight()
        self._background: set[asyncio.Task] = set()
        # Bumped by clear(); loads started before a clear are not stored.
        self._generation = 0

        self._hits = 0
        self._misses = 0
        self._loads = 0
        self._evictions = 0

    # ========================================
    # Lookup
    # ========================================

    async def get_category(self, category: ContentCategory) -> list[ContentItem]:
        """Items of a category, loading through the repository on a miss."""
        pool = await self.get_pool(category)
        return pool.items()

    async def get_pool(self, category: ContentCategory) -> CategoryPool:
        """
        Category pool, from cache when present and fresh.

        Raises:
            ContentLoadError: If the repository cannot provide content
        """
        pool = self._entries.get(category)
        if pool is not None:
            if self._is_fresh(pool):
                self._entries.move_to_end(category)
                self._hits += 1
                return pool
            logger.debug("Cached category {} expired", category.value)
            del self._entries[category]

        self._misses += 1
        generation = self._generation
        return await self._flight.run(
            (category, generation), lambda: self._load(category, generation)
        )

    def is_cached(self, category: ContentCategory) -> bool:
        pool = self._entries.get(category)
        return pool is not None and self._is_fresh(pool)

    async def refresh(self, category: ContentCategory) -> list[ContentItem]:
        """Force a reload of one category."""
        self.evict(category)
        return await self.get_category(category)

    async def _load(self, category: ContentCategory, generation: int) -> CategoryPool:
        try:
            if self.load_timeout is not None:
                items = await asyncio.wait_for(
                    self.repository.load_category(category), timeout=self.load_timeout
                )
            else:
                items = await self.repository.load_category(category)
        except asyncio.TimeoutError as exc:
            error = ContentLoadError(
                f"Loading {category.value} timed out after {self.load_timeout}s",
                reason=LoadFailureReason.TIMEOUT,
            )
            self.diagnostics.record(error, severity=ErrorSeverity.HIGH)
            raise error from exc

        pool = CategoryPool.build(
            category=category,
            items=items,
            max_items_per_tier=self.max_items_per_category,
            loaded_at=self._clock(),
        )
        self._loads += 1

        if generation == self._generation:
            self._entries[category] = pool
            self._entries.move_to_end(category)
            self._enforce_category_limit()
        else:
            logger.debug("Discarding {} load that finished after a clear", category.value)

        return pool

    def _is_fresh(self, pool: CategoryPool) -> bool:
        return self._clock() - pool.loaded_at < self.expiration

    def _enforce_category_limit(self, limit: int | None = None) -> int:
        limit = self.max_categories if limit is None else limit
        evicted = 0
        while len(self._entries) > limit:
            category, _ = self._entries.popitem(last=False)
            self._evictions += 1
            evicted += 1
            logger.debug("Evicted least recently used category {}", category.value)
        return evicted

    # ========================================
    # Eviction
    # ========================================

    def evict(self, category: ContentCategory) -> bool:
        """Remove one category. Returns False if it was not resident."""
        if self._entries.pop(category, None) is None:
            return False
        self._evictions += 1
        logger.debug("Evicted category {}", category.value)
        return True

    def clear(self, drop_source: bool = True) -> None:
        """
        Full reset of the cache.

        Args:
            drop_source: Also release the repository's memoized document
        """
        released = len(self._entries)
        self._entries.clear()
        self._generation += 1
        if drop_source:
            self.repository.invalidate()
        logger.info("Cleared content cache ({} categories released)", released)

    def shrink(self, ratio: float) -> int:
        """
        Evict down toward ``ratio`` of the configured limits.

        Least recently used categories go first; remaining pools are trimmed
        per tier.

        Returns:
            Approximate KB released
        """
        before = self.memory_usage_kb()
        category_limit = max(1, int(self.max_categories * ratio))
        item_limit = max(1, int(self.max_items_per_category * ratio))

        self._enforce_category_limit(category_limit)
        for category, pool in list(self._entries.items()):
            if pool.largest_tier_size() > item_limit:
                self._entries[category] = pool.truncated(item_limit)

        released = before - self.memory_usage_kb()
        logger.info(
            "Shrunk content cache to {} categories / {} items per tier ({} KB released)",
            category_limit,
            item_limit,
            released,
        )
        return released

    # ========================================
    # Preloading
    # ========================================

    async def preload(self, categories: Iterable[ContentCategory]) -> int:
        """
        Load several categories; failures are recorded, not raised.

        Returns:
            Number of categories loaded successfully
        """
        categories = list(categories)
        results = await asyncio.gather(
            *(self.get_pool(category) for category in categories),
            return_exceptions=True,
        )
        loaded = 0
        for category, result in zip(categories, results):
            if isinstance(result, BaseException):
                self.diagnostics.record(
                    result,
                    severity=ErrorSeverity.LOW,
                    details=f"preload of {category.value} failed",
                )
            else:
                loaded += 1
        return loaded

    def schedule_preload(self, categories: Iterable[ContentCategory]) -> asyncio.Task:
        """Preload categories in the background."""
        task = asyncio.get_running_loop().create_task(self.preload(list(categories)))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def cancel_background_work(self) -> int:
        """Cancel speculative preloads. Returns how many were cancelled."""
        cancelled = 0
        for task in list(self._background):
            if not task.done():
                task.cancel()
                cancelled += 1
        self._background.clear()
        if cancelled:
            logger.info("Cancelled {} background preload(s)", cancelled)
        return cancelled

    # ========================================
    # Statistics
    # ========================================

    def total_items(self) -> int:
        return sum(pool.item_count for pool in self._entries.values())

    def memory_usage_kb(self) -> int:
        """Rough memory estimate: per-item size plus the source document."""
        usage = self.total_items() * self.item_size_kb
        if self.repository.is_loaded:
            usage += self.source_overhead_kb
        return usage

    def stats(self) -> CacheStatistics:
        return CacheStatistics(
            resident_categories=list(self._entries.keys()),
            total_items=self.total_items(),
            memory_usage_kb=self.memory_usage_kb(),
            in_flight=[c for c in ContentCategory if self._flight.in_flight((c, self._generation))],
            source_loaded=self.repository.is_loaded,
            hits=self._hits,
            misses=self._misses,
            loads=self._loads,
            evictions=self._evictions,
        )
