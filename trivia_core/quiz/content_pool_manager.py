"""
Content Pool Manager for path-based question selection.

Produces shuffled, non-repeating batches of questions for a themed path.
Selection runs in two phases:

1. Preferential pass: each slot picks a difficulty tier from the level
   distribution (or from live player signals) and takes an unused,
   path-relevant, non-excluded item of that tier.
2. Expansion: when the preferential pass leaves slots open, the pool is
   widened tier by tier (relaxed difficulty, full corpus, repeat with
   reshuffle) until the batch is full or nothing is left.

Shuffles are reproducible when a seed is configured; each path has its own
shuffle generation that reset() advances.
"""
from __future__ import annotations

import hashlib
import random
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from loguru import logger

from trivia_core.adaptive.difficulty_selector import DifficultySelector, PlayerSignals
from trivia_core.adaptive.path_relevance import PathFilterMode, PathRelevancePolicy, policy_for
from trivia_core.content.cache import ContentCache
from trivia_core.content.models import ContentCategory, ContentItem, DifficultyTier, PathType
from trivia_core.core.diagnostics import DiagnosticsLog, ErrorSeverity
from trivia_core.core.exceptions import PoolExhaustionError
from trivia_core.progression.models import Checkpoint

E, EP, M, H, X = (
    DifficultyTier.EASY,
    DifficultyTier.EASY_PLUS,
    DifficultyTier.MEDIUM,
    DifficultyTier.HARD,
    DifficultyTier.EXPERT,
)

# Tier distribution per progression level (1 = first checkpoint stretch).
LEVEL_WEIGHTS: dict[int, dict[DifficultyTier, float]] = {
    1: {E: 0.65, EP: 0.15, M: 0.20, H: 0.00, X: 0.00},
    2: {E: 0.45, EP: 0.15, M: 0.30, H: 0.10, X: 0.00},
    3: {E: 0.30, EP: 0.10, M: 0.40, H: 0.15, X: 0.05},
    4: {E: 0.20, EP: 0.10, M: 0.35, H: 0.25, X: 0.10},
    5: {E: 0.10, EP: 0.10, M: 0.30, H: 0.35, X: 0.15},
}

_ALL_CATEGORIES = frozenset(ContentCategory)


class ExpansionTier(str, Enum):
    """How far a draw had to widen the pool to fill the batch."""
    RELAXED_DIFFICULTY = "relaxed_difficulty"
    FULL_CORPUS = "full_corpus"
    REPEAT_RESHUFFLE = "repeat_reshuffle"


@dataclass
class PoolStatistics:
    """Statistics for one path's question pool."""
    path: PathType
    policy_name: str
    total_items: int
    relevant_items: int
    available_items: int
    tier_distribution: dict[str, int]  # tier label -> relevant items
    category_distribution: dict[str, int]  # category key -> relevant items
    generation: int
    preserved_ids: int
    last_expansion: ExpansionTier | None
    has_sufficient_questions: bool
    min_questions_required: int


@dataclass
class _PathState:
    generation: int
    rng: random.Random
    preserved_ids: frozenset[str] = frozenset()
    last_expansion: ExpansionTier | None = None
    draws: int = 0


@dataclass
class _Batch:
    count: int
    items: list[ContentItem] = field(default_factory=list)
    ids: set[str] = field(default_factory=set)

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.count

    def add(self, item: ContentItem) -> bool:
        if item.id in self.ids or self.is_full:
            return False
        self.items.append(item)
        self.ids.add(item.id)
        return True

    def fill_from(self, candidates: Iterable[ContentItem]) -> int:
        added = 0
        for item in candidates:
            if self.is_full:
                break
            if self.add(item):
                added += 1
        return added


class ContentPoolManager:
    """
    Manager for path question pools.

    Handles:
    - Path relevance filtering and exclusion of answered ids
    - Difficulty-weighted selection per slot
    - Pool expansion when too few items remain
    - Per-path shuffle state with reproducible seeds
    """

    def __init__(
        self,
        cache: ContentCache,
        selector: DifficultySelector | None = None,
        diagnostics: DiagnosticsLog | None = None,
        seed: str | int | None = None,
        filter_mode: PathFilterMode = "strict",
    ):
        """
        Initialize pool manager.

        Args:
            cache: Content cache providing category pools
            selector: Adaptive selector used when live player signals are given
            diagnostics: Shared diagnostics log
            seed: Seed for reproducible shuffles (None = system randomness)
            filter_mode: 'strict' per-path relevance or 'any' to match everything
        """
        self.cache = cache
        self.selector = selector or DifficultySelector()
        self.diagnostics = diagnostics if diagnostics is not None else cache.diagnostics
        self.seed = seed
        self.filter_mode = filter_mode
        self._states: dict[PathType, _PathState] = {}

    # ========================================
    # Question Selection
    # ========================================

    async def draw(
        self,
        path: PathType,
        exclude_ids: Iterable[str],
        count: int,
        difficulty_level: int,
        signals: PlayerSignals | None = None,
    ) -> list[ContentItem]:
        """
        Draw a shuffled batch of questions for a path.

        Args:
            path: Themed path
            exclude_ids: Ids already shown in this session
            count: Number of questions wanted
            difficulty_level: Progression level (1-5, out-of-range values clamp)
            signals: Live player signals; when given, tiers come from the
                adaptive selector instead of the level distribution

        Returns:
            Up to ``count`` items with no duplicate ids. Ids from
            ``exclude_ids`` only appear when the repeat tier was needed.

        Raises:
            ContentLoadError: If no content could be loaded at all
        """
        if count <= 0:
            return []

        state = self._state(path)
        state.draws += 1
        excluded = set(exclude_ids) | state.preserved_ids

        policy = self._policy(path)
        scope = policy.scope()
        corpus = await self._corpus(scope)
        relevant = [item for item in corpus if policy.matches(item)]
        candidates = [item for item in relevant if item.id not in excluded]

        batch = _Batch(count)
        self._preferential_pass(batch, candidates, difficulty_level, signals, state.rng)

        expansion = None
        if not batch.is_full:
            expansion = await self._expand(
                batch, path, corpus, scope, candidates, excluded, state.rng
            )
        state.last_expansion = expansion

        if len(candidates) < count:
            self.diagnostics.record(
                PoolExhaustionError(
                    f"Path {path.value}: {len(candidates)} unseen items for {count} requested",
                    requested=count,
                    available=len(candidates),
                ),
                severity=ErrorSeverity.LOW,
                details=f"expanded to {expansion.value}" if expansion else None,
            )
        if not batch.is_full:
            self.diagnostics.record(
                PoolExhaustionError(
                    f"Path {path.value}: corpus holds only {len(batch.items)} distinct items",
                    requested=count,
                    available=len(batch.items),
                ),
                severity=ErrorSeverity.MEDIUM,
            )

        state.rng.shuffle(batch.items)
        logger.debug(
            "Drew {} item(s) for {} (level {}, expansion: {})",
            len(batch.items),
            path.value,
            difficulty_level,
            expansion.value if expansion else "none",
        )
        return batch.items

    async def questions_for_checkpoint_restart(
        self,
        path: PathType,
        checkpoint: Checkpoint,
        exclude_ids: Iterable[str],
        count: int,
    ) -> list[ContentItem]:
        """Fresh batch after a checkpoint fallback, at the checkpoint's level."""
        items = await self.draw(
            path,
            exclude_ids=exclude_ids,
            count=count,
            difficulty_level=checkpoint.difficulty_level,
        )
        # Extra reshuffle for variety after a restart
        self._state(path).rng.shuffle(items)
        return items

    def _preferential_pass(
        self,
        batch: _Batch,
        candidates: list[ContentItem],
        difficulty_level: int,
        signals: PlayerSignals | None,
        rng: random.Random,
    ) -> None:
        buckets: dict[DifficultyTier, list[ContentItem]] = {}
        for item in candidates:
            buckets.setdefault(item.tier, []).append(item)
        for bucket in buckets.values():
            rng.shuffle(bucket)

        if signals is not None:
            weights = self.selector.weights_for(
                signals.player_level, signals.streak_count, signals.recent_mistakes
            )
        else:
            weights = self.level_weights(difficulty_level)

        for _ in range(batch.count):
            tier = DifficultySelector.sample(weights, rng)
            bucket = buckets.get(tier)
            if bucket:
                batch.add(bucket.pop())

    async def _expand(
        self,
        batch: _Batch,
        path: PathType,
        corpus: list[ContentItem],
        scope: frozenset[ContentCategory],
        candidates: list[ContentItem],
        excluded: set[str],
        rng: random.Random,
    ) -> ExpansionTier | None:
        reached: ExpansionTier | None = None
        for tier in ExpansionTier:
            if batch.is_full:
                break
            if tier is ExpansionTier.RELAXED_DIFFICULTY:
                pool = list(candidates)
            else:
                if scope != _ALL_CATEGORIES:
                    corpus = await self._corpus(_ALL_CATEGORIES)
                    scope = _ALL_CATEGORIES
                if tier is ExpansionTier.FULL_CORPUS:
                    pool = [i for i in corpus if i.id not in excluded]
                else:
                    pool = [i for i in corpus if i.id in excluded]
            rng.shuffle(pool)
            added = batch.fill_from(pool)
            reached = tier
            if added:
                logger.info("Pool for {} expanded via {} (+{} items)", path.value, tier.value, added)
        return reached

    @staticmethod
    def level_weights(difficulty_level: int) -> dict[DifficultyTier, float]:
        """Tier distribution for a progression level (clamped to 1-5)."""
        return dict(LEVEL_WEIGHTS[min(max(difficulty_level, 1), 5)])

    # ========================================
    # Availability
    # ========================================

    async def available_count(self, path: PathType, exclude_ids: Iterable[str]) -> int:
        """Number of path-relevant items not yet excluded."""
        excluded = set(exclude_ids) | self._state(path).preserved_ids
        policy = self._policy(path)
        corpus = await self._corpus(policy.scope())
        return sum(1 for item in corpus if policy.matches(item) and item.id not in excluded)

    async def has_enough(self, path: PathType, exclude_ids: Iterable[str], required_count: int) -> bool:
        """Pre-flight check before a draw."""
        return await self.available_count(path, exclude_ids) >= required_count

    # ========================================
    # Shuffle State
    # ========================================

    def reset(self, path: PathType, preserve_ids: Iterable[str] = frozenset()) -> None:
        """
        Discard the path's shuffle state and start a new generation.

        Args:
            path: Themed path
            preserve_ids: Ids that stay excluded from future draws on this path
        """
        previous = self._states.get(path)
        generation = previous.generation + 1 if previous else 1
        self._states[path] = _PathState(
            generation=generation,
            rng=self._make_rng(path, generation),
            preserved_ids=frozenset(preserve_ids),
        )
        logger.info(
            "Reset pool for {} (generation {}, {} preserved ids)",
            path.value,
            generation,
            len(self._states[path].preserved_ids),
        )

    def generation(self, path: PathType) -> int:
        return self._state(path).generation

    def last_expansion(self, path: PathType) -> ExpansionTier | None:
        state = self._states.get(path)
        return state.last_expansion if state else None

    def _state(self, path: PathType) -> _PathState:
        state = self._states.get(path)
        if state is None:
            state = _PathState(generation=0, rng=self._make_rng(path, 0))
            self._states[path] = state
        return state

    def _make_rng(self, path: PathType, generation: int) -> random.Random:
        if self.seed is None:
            return random.Random()
        return random.Random(self._create_seed(f"{self.seed}:{path.value}:{generation}"))

    def _create_seed(self, seed: str | int) -> int:
        """Create a reproducible integer seed from string or int."""
        if isinstance(seed, int):
            return seed

        hash_bytes = hashlib.sha256(str(seed).encode()).digest()
        return int.from_bytes(hash_bytes[:8], byteorder='big')

    # ========================================
    # Pool Statistics
    # ========================================

    async def pool_statistics(
        self,
        path: PathType,
        exclude_ids: Iterable[str] = (),
        min_questions: int = 10,
    ) -> PoolStatistics:
        """
        Statistics for a path's pool.

        Args:
            path: Themed path
            exclude_ids: Ids to treat as already shown
            min_questions: Threshold for has_sufficient_questions
        """
        state = self._state(path)
        excluded = set(exclude_ids) | state.preserved_ids
        policy = self._policy(path)
        corpus = await self._corpus(_ALL_CATEGORIES)
        relevant = [item for item in corpus if policy.matches(item)]
        available = sum(1 for item in relevant if item.id not in excluded)

        tier_counts = Counter(item.tier.value for item in relevant)
        category_counts = Counter(item.category.value for item in relevant)

        return PoolStatistics(
            path=path,
            policy_name=policy.name,
            total_items=len(corpus),
            relevant_items=len(relevant),
            available_items=available,
            tier_distribution={tier.value: tier_counts.get(tier.value, 0) for tier in DifficultyTier},
            category_distribution=dict(category_counts),
            generation=state.generation,
            preserved_ids=len(state.preserved_ids),
            last_expansion=state.last_expansion,
            has_sufficient_questions=available >= min_questions,
            min_questions_required=min_questions,
        )

    # ========================================
    # Corpus
    # ========================================

    def _policy(self, path: PathType) -> PathRelevancePolicy:
        return policy_for(path, self.filter_mode)

    async def _corpus(self, scope: frozenset[ContentCategory]) -> list[ContentItem]:
        """Cached items of the categories in scope, in stable order."""
        corpus: list[ContentItem] = []
        seen: set[str] = set()
        for category in ContentCategory:
            if category not in scope:
                continue
            for item in await self.cache.get_category(category):
                if item.id not in seen:
                    seen.add(item.id)
                    corpus.append(item)
        return corpus
