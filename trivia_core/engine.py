"""
Engine composition root.

Builds every component once from Settings and wires the references
explicitly. Nothing in the engine is a process-wide singleton; tests build
as many independent engines as they need.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

from loguru import logger

from config import Settings, get_settings
from trivia_core.adaptive.difficulty_selector import DifficultySelector, PlayerSignals
from trivia_core.content.cache import ContentCache
from trivia_core.content.models import ContentItem
from trivia_core.content.repository import ContentRepository
from trivia_core.core.diagnostics import DiagnosticsLog
from trivia_core.core.memory_pressure import MemoryPressureMonitor
from trivia_core.progression.checkpoint_rewards import CheckpointRewardCalculator
from trivia_core.progression.difficulty_progression import level_for_progress
from trivia_core.progression.fallback_controller import CheckpointFallbackController
from trivia_core.progression.models import PathProgressState
from trivia_core.quiz.content_pool_manager import ContentPoolManager


@dataclass
class TriviaEngine:
    """All engine components, wired together."""

    settings: Settings
    diagnostics: DiagnosticsLog
    repository: ContentRepository
    cache: ContentCache
    selector: DifficultySelector
    pool_manager: ContentPoolManager
    rewards: CheckpointRewardCalculator
    fallback: CheckpointFallbackController
    memory_monitor: MemoryPressureMonitor

    async def start(self, monitor_memory: bool = True) -> None:
        """Load content up front and start background monitoring."""
        await self.repository.load_all()
        if monitor_memory:
            self.memory_monitor.start()

    async def next_questions(
        self,
        progress: PathProgressState,
        count: int,
        signals: PlayerSignals | None = None,
    ) -> list[ContentItem]:
        """Next batch for a player's path, at the level their progress has reached."""
        return await self.pool_manager.draw(
            progress.path,
            exclude_ids=progress.answered_ids,
            count=count,
            difficulty_level=level_for_progress(progress),
            signals=signals,
        )

    async def shutdown(self) -> None:
        await self.memory_monitor.stop()
        self.cache.cancel_background_work()
        logger.debug("Engine shut down")


def build_engine(
    settings: Settings | None = None,
    primary_document: Mapping[str, Any] | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> TriviaEngine:
    """
    Construct a TriviaEngine.

    Args:
        settings: Settings to use (defaults to get_settings())
        primary_document: In-memory primary content, replacing the primary file
        clock: Time source for cache freshness

    Returns:
        Wired TriviaEngine
    """
    settings = settings or get_settings()
    diagnostics = DiagnosticsLog()

    repository = ContentRepository(
        primary_path=settings.content_primary_path,
        legacy_path=settings.content_legacy_path,
        use_builtin_samples=settings.content_use_builtin_samples,
        fallback_locale=settings.fallback_locale,
        diagnostics=diagnostics,
        primary_document=primary_document,
    )
    cache = ContentCache(
        repository,
        max_categories=settings.cache_max_categories,
        max_items_per_category=settings.cache_max_items_per_category,
        expiration=settings.cache_expiration,
        item_size_kb=settings.cache_item_size_kb,
        load_timeout=settings.content_load_timeout_seconds,
        clock=clock,
        diagnostics=diagnostics,
    )
    selector = DifficultySelector()
    pool_manager = ContentPoolManager(
        cache,
        selector=selector,
        diagnostics=diagnostics,
        seed=settings.shuffle_seed,
        filter_mode=settings.path_filter_mode,
    )
    rewards = CheckpointRewardCalculator(bonus_threshold=settings.bonus_accuracy_threshold)
    fallback = CheckpointFallbackController(
        pool_manager,
        calculator=rewards,
        max_lives=settings.session_max_lives,
        reward_accuracy=settings.fallback_reward_accuracy,
        diagnostics=diagnostics,
    )

    memory = settings.get_memory_config()
    monitor = MemoryPressureMonitor(
        medium_threshold_kb=memory["medium_threshold_kb"],
        high_threshold_kb=memory["high_threshold_kb"],
        interval_seconds=memory["interval_seconds"],
        shrink_ratio=memory["shrink_ratio"],
        diagnostics=diagnostics,
    )
    monitor.register(cache)

    return TriviaEngine(
        settings=settings,
        diagnostics=diagnostics,
        repository=repository,
        cache=cache,
        selector=selector,
        pool_manager=pool_manager,
        rewards=rewards,
        fallback=fallback,
        memory_monitor=monitor,
    )
