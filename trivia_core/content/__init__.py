"""
Content module: trivia item model, source loading and caching.

This module provides:
- ContentRepository: Tiered loading of the content document
- ContentCache: LRU cache of category pools with expiry
"""

from .cache import CacheStatistics, ContentCache
from .models import (
    CategoryPool,
    ContentCategory,
    ContentItem,
    DifficultyTier,
    PathType,
)
from .repository import ContentRepository, ContentSourceTier, LoadReport

__all__ = [
    "CacheStatistics",
    "CategoryPool",
    "ContentCache",
    "ContentCategory",
    "ContentItem",
    "ContentRepository",
    "ContentSourceTier",
    "DifficultyTier",
    "LoadReport",
    "PathType",
]
