"""
Adaptive Difficulty Selector.

Picks the difficulty tier of the next question from three live signals:
- player level (1-5) selects a base distribution
- correct-answer streak pushes toward harder tiers
- recent mistakes push toward easier tiers

Adjustments are multiplicative, each weight is clamped, and the result is
renormalized before a cumulative-distribution draw.
"""
from __future__ import annotations

import random
from dataclasses import dataclass

from trivia_core.content.models import DifficultyTier

E, EP, M, H, X = (
    DifficultyTier.EASY,
    DifficultyTier.EASY_PLUS,
    DifficultyTier.MEDIUM,
    DifficultyTier.HARD,
    DifficultyTier.EXPERT,
)

BASE_DISTRIBUTIONS: dict[int, dict[DifficultyTier, float]] = {
    1: {E: 0.60, EP: 0.20, M: 0.15, H: 0.05, X: 0.00},
    2: {E: 0.40, EP: 0.20, M: 0.30, H: 0.10, X: 0.00},
    3: {E: 0.25, EP: 0.15, M: 0.40, H: 0.15, X: 0.05},
    4: {E: 0.15, EP: 0.15, M: 0.35, H: 0.25, X: 0.10},
    5: {E: 0.10, EP: 0.10, M: 0.30, H: 0.35, X: 0.15},
}

# Multipliers per signal band; tiers not listed are left unchanged.
STRONG_STREAK = {E: 0.5, EP: 0.8, M: 1.2, H: 1.3, X: 1.5}
MILD_STREAK = {E: 0.8, EP: 0.9, M: 1.1, H: 1.1}
STRONG_MISTAKES = {E: 1.5, EP: 1.2, M: 0.7, H: 0.5, X: 0.3}
MILD_MISTAKES = {E: 1.2, EP: 1.1, M: 0.9, H: 0.8}

EASY_FLOOR = 0.1


@dataclass(frozen=True)
class PlayerSignals:
    """Live performance signals of the current player."""
    player_level: int = 1
    streak_count: int = 0
    recent_mistakes: int = 0


class DifficultySelector:
    """
    Stateless scoring policy for the next question's difficulty.

    The only state is the random source, injectable for reproducible tests.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    @staticmethod
    def clamp_level(player_level: int) -> int:
        return min(max(player_level, 1), 5)

    def weights_for(
        self,
        player_level: int,
        streak_count: int = 0,
        recent_mistakes: int = 0,
    ) -> dict[DifficultyTier, float]:
        """
        Normalized tier weights for the given signals.

        Args:
            player_level: Player level, clamped to 1-5
            streak_count: Consecutive correct answers
            recent_mistakes: Mistakes in the recent window

        Returns:
            Mapping of every tier to a probability; values sum to 1.0
        """
        weights = dict(BASE_DISTRIBUTIONS[self.clamp_level(player_level)])

        if streak_count >= 5:
            self._apply(weights, STRONG_STREAK, easy_floor=True)
        elif streak_count >= 3:
            self._apply(weights, MILD_STREAK, easy_floor=True)

        if recent_mistakes >= 3:
            self._apply(weights, STRONG_MISTAKES)
        elif recent_mistakes >= 2:
            self._apply(weights, MILD_MISTAKES)

        total = sum(weights.values())
        if total <= 0:
            return {tier: (1.0 if tier == E else 0.0) for tier in DifficultyTier}
        return {tier: weights[tier] / total for tier in DifficultyTier}

    def select(
        self,
        player_level: int,
        streak_count: int = 0,
        recent_mistakes: int = 0,
    ) -> DifficultyTier:
        """Sample one tier for the given signals."""
        weights = self.weights_for(player_level, streak_count, recent_mistakes)
        return self.sample(weights, self._rng)

    def select_for(self, signals: PlayerSignals) -> DifficultyTier:
        return self.select(signals.player_level, signals.streak_count, signals.recent_mistakes)

    @staticmethod
    def sample(weights: dict[DifficultyTier, float], rng: random.Random) -> DifficultyTier:
        """Cumulative-distribution draw; falls back to EASY."""
        draw = rng.random()
        cumulative = 0.0
        for tier in DifficultyTier:
            weight = weights.get(tier, 0.0)
            if weight <= 0:
                continue
            cumulative += weight
            if draw <= cumulative:
                return tier
        return DifficultyTier.EASY

    @staticmethod
    def _apply(
        weights: dict[DifficultyTier, float],
        multipliers: dict[DifficultyTier, float],
        easy_floor: bool = False,
    ) -> None:
        for tier, factor in multipliers.items():
            lower = EASY_FLOOR if easy_floor and tier == E else 0.0
            weights[tier] = min(max(weights[tier] * factor, lower), 1.0)
