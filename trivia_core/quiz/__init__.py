"""
Quiz module for path question pools.

This module provides:
- ContentPoolManager: Non-repeating, difficulty-weighted batches per path

Expansion Tiers:
- relaxed_difficulty: any tier of the path's unseen items
- full_corpus: unseen items of every path
- repeat_reshuffle: previously seen items, reshuffled
"""

from .content_pool_manager import ContentPoolManager, ExpansionTier, PoolStatistics

__all__ = [
    "ContentPoolManager",
    "ExpansionTier",
    "PoolStatistics",
]
