"""
Checkpoint Reward Calculator.

Power-up grants for completing a checkpoint: a guaranteed base schedule per
checkpoint plus a flat bonus of one of every kind for high accuracy.
"""
from __future__ import annotations

from typing import Mapping

from trivia_core.progression.models import Checkpoint, PowerUpKind

FF, HI, ET, SK, SC = (
    PowerUpKind.FIFTY_FIFTY,
    PowerUpKind.HINT,
    PowerUpKind.EXTRA_TIME,
    PowerUpKind.SKIP,
    PowerUpKind.SECOND_CHANCE,
)

BASE_SCHEDULE: dict[Checkpoint, dict[PowerUpKind, int]] = {
    Checkpoint.CHIHUAHUA: {FF: 2, HI: 2, ET: 1, SK: 0, SC: 0},
    Checkpoint.PUG: {FF: 2, HI: 2, ET: 1, SK: 1, SC: 0},
    Checkpoint.COCKER_SPANIEL: {FF: 2, HI: 2, ET: 2, SK: 1, SC: 0},
    Checkpoint.GERMAN_SHEPHERD: {FF: 2, HI: 2, ET: 2, SK: 2, SC: 1},
    Checkpoint.GREAT_DANE: {FF: 3, HI: 3, ET: 3, SK: 3, SC: 3},
    Checkpoint.DEUTSCHE_DOGGE: {FF: 4, HI: 4, ET: 4, SK: 4, SC: 4},
}

BONUS_PER_KIND = 1
BONUS_ACCURACY_THRESHOLD = 0.8


class CheckpointRewardCalculator:
    """Pure reward computation; no side effects."""

    def __init__(
        self,
        bonus_threshold: float = BONUS_ACCURACY_THRESHOLD,
        schedule: Mapping[Checkpoint, Mapping[PowerUpKind, int]] | None = None,
    ):
        self.bonus_threshold = bonus_threshold
        self.schedule = schedule if schedule is not None else BASE_SCHEDULE

    def rewards_for(self, checkpoint: Checkpoint, accuracy: float) -> dict[PowerUpKind, int]:
        """
        Power-ups awarded for completing a checkpoint.

        Args:
            checkpoint: Completed checkpoint
            accuracy: Accuracy in [0.0, 1.0] reached on the way

        Returns:
            Count for every PowerUpKind (base plus bonus)
        """
        base = self.base_rewards(checkpoint)
        bonus = self.bonus_rewards(accuracy)
        return {kind: base[kind] + bonus[kind] for kind in PowerUpKind}

    def base_rewards(self, checkpoint: Checkpoint) -> dict[PowerUpKind, int]:
        """Guaranteed rewards regardless of performance."""
        row = self.schedule.get(checkpoint, {})
        return {kind: row.get(kind, 0) for kind in PowerUpKind}

    def bonus_rewards(self, accuracy: float) -> dict[PowerUpKind, int]:
        amount = BONUS_PER_KIND if accuracy >= self.bonus_threshold else 0
        return {kind: amount for kind in PowerUpKind}

    def total_reward_count(self, checkpoint: Checkpoint, accuracy: float) -> int:
        return sum(self.rewards_for(checkpoint, accuracy).values())

    def reward_preview(self, checkpoint: Checkpoint) -> dict[str, dict[PowerUpKind, int]]:
        """Base rewards and the bonus available at the accuracy threshold."""
        return {
            "base": self.base_rewards(checkpoint),
            "bonus": self.bonus_rewards(self.bonus_threshold),
        }

    def distribution_problems(self) -> list[str]:
        """
        Problems in the base schedule.

        Every kind must be awarded at the final checkpoint, and a kind's
        count never drops once it has been introduced.
        """
        problems: list[str] = []
        checkpoints = list(Checkpoint)

        final = self.base_rewards(checkpoints[-1])
        for kind in PowerUpKind:
            if final[kind] == 0:
                problems.append(f"{kind.value} is not awarded at {checkpoints[-1].display_name}")

        for previous, current in zip(checkpoints, checkpoints[1:]):
            before = self.base_rewards(previous)
            after = self.base_rewards(current)
            for kind in PowerUpKind:
                if before[kind] > 0 and after[kind] < before[kind]:
                    problems.append(
                        f"{kind.value} drops from {before[kind]} at {previous.display_name} "
                        f"to {after[kind]} at {current.display_name}"
                    )
        return problems

    def validate_distribution(self) -> bool:
        """Self-check of the base schedule, meant for tests."""
        return not self.distribution_problems()
