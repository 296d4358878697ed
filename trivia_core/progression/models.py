"""
Progression data model: checkpoints, power-ups, path progress and
fallback outcomes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Mapping

from trivia_core.content.models import PathType
from trivia_core.core.exceptions import RecoveryError


class PowerUpKind(str, Enum):
    FIFTY_FIFTY = "fiftyFifty"
    HINT = "hint"
    EXTRA_TIME = "extraTime"
    SKIP = "skip"
    SECOND_CHANCE = "secondChance"


class Checkpoint(str, Enum):
    """Ordered progression milestones of a path."""
    CHIHUAHUA = "chihuahua"
    PUG = "pug"
    COCKER_SPANIEL = "cockerSpaniel"
    GERMAN_SHEPHERD = "germanShepherd"
    GREAT_DANE = "greatDane"
    DEUTSCHE_DOGGE = "deutscheDogge"

    @property
    def questions_required(self) -> int:
        return _CHECKPOINT_QUESTIONS[self]

    @property
    def display_name(self) -> str:
        return _CHECKPOINT_NAMES[self]

    @property
    def difficulty_level(self) -> int:
        """Progression level (1-6) for questions after this checkpoint."""
        return list(Checkpoint).index(self) + 1

    @property
    def next(self) -> "Checkpoint | None":
        ordered = list(Checkpoint)
        index = ordered.index(self)
        return ordered[index + 1] if index + 1 < len(ordered) else None

    @property
    def is_final(self) -> bool:
        return self.next is None

    @classmethod
    def reached_at(cls, questions_answered: int) -> "Checkpoint | None":
        """Highest checkpoint whose threshold is met, or None."""
        reached = None
        for checkpoint in cls:
            if checkpoint.questions_required <= questions_answered:
                reached = checkpoint
        return reached


_CHECKPOINT_QUESTIONS = {
    Checkpoint.CHIHUAHUA: 10,
    Checkpoint.PUG: 15,
    Checkpoint.COCKER_SPANIEL: 25,
    Checkpoint.GERMAN_SHEPHERD: 35,
    Checkpoint.GREAT_DANE: 45,
    Checkpoint.DEUTSCHE_DOGGE: 60,
}

_CHECKPOINT_NAMES = {
    Checkpoint.CHIHUAHUA: "Chihuahua",
    Checkpoint.PUG: "Pug",
    Checkpoint.COCKER_SPANIEL: "Cocker Spaniel",
    Checkpoint.GERMAN_SHEPHERD: "German Shepherd",
    Checkpoint.GREAT_DANE: "Great Dane",
    Checkpoint.DEUTSCHE_DOGGE: "Deutsche Dogge",
}


# =============================================================================
# Path Progress
# =============================================================================


@dataclass
class PathProgressState:
    """
    Progress of a player on one themed path.

    Persistence is the caller's concern; to_dict()/from_dict() give a
    JSON-safe form.
    """

    path: PathType
    current_checkpoint: Checkpoint | None = None  # last completed checkpoint
    answered_ids: list[str] = field(default_factory=list)
    power_up_inventory: dict[PowerUpKind, int] = field(default_factory=dict)
    lives_remaining: int = 3

    questions_answered: int = 0
    correct_answers: int = 0
    fallback_count: int = 0

    @property
    def accuracy(self) -> float:
        if self.questions_answered == 0:
            return 0.0
        return self.correct_answers / self.questions_answered

    @property
    def next_checkpoint(self) -> Checkpoint | None:
        if self.current_checkpoint is None:
            return Checkpoint.CHIHUAHUA
        return self.current_checkpoint.next

    @property
    def is_completed(self) -> bool:
        return self.current_checkpoint is Checkpoint.DEUTSCHE_DOGGE

    def has_answered(self, item_id: str) -> bool:
        return item_id in self.answered_ids

    def record_answer(self, item_id: str, correct: bool) -> Checkpoint | None:
        """
        Record one answered question.

        Returns:
            The checkpoint reached by this answer, if any
        """
        if not self.has_answered(item_id):
            self.answered_ids.append(item_id)
        self.questions_answered += 1
        if correct:
            self.correct_answers += 1

        upcoming = self.next_checkpoint
        if upcoming is not None and self.questions_answered >= upcoming.questions_required:
            self.current_checkpoint = upcoming
            return upcoming
        return None

    def add_power_ups(self, rewards: Mapping[PowerUpKind, int]) -> None:
        for kind, amount in rewards.items():
            self.power_up_inventory[kind] = self.power_up_inventory.get(kind, 0) + amount

    def use_power_up(self, kind: PowerUpKind) -> bool:
        """Consume one power-up. Returns False if none is left."""
        available = self.power_up_inventory.get(kind, 0)
        if available <= 0:
            return False
        self.power_up_inventory[kind] = available - 1
        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["path"] = self.path.value
        data["current_checkpoint"] = self.current_checkpoint.value if self.current_checkpoint else None
        data["power_up_inventory"] = {kind.value: count for kind, count in self.power_up_inventory.items()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PathProgressState":
        """
        Create from dictionary.

        Unknown power-up kinds and unknown checkpoints are dropped.

        Raises:
            ValueError: If the path is missing or unknown
        """
        if "path" not in data:
            raise ValueError("Progress data has no 'path'")

        inventory: dict[PowerUpKind, int] = {}
        for key, count in (data.get("power_up_inventory") or {}).items():
            try:
                inventory[PowerUpKind(key)] = int(count)
            except ValueError:
                continue

        checkpoint = None
        raw_checkpoint = data.get("current_checkpoint")
        if raw_checkpoint:
            try:
                checkpoint = Checkpoint(raw_checkpoint)
            except ValueError:
                checkpoint = None

        return cls(
            path=PathType(data["path"]),
            current_checkpoint=checkpoint,
            answered_ids=list(data.get("answered_ids") or []),
            power_up_inventory=inventory,
            lives_remaining=int(data.get("lives_remaining", 3)),
            questions_answered=int(data.get("questions_answered", 0)),
            correct_answers=int(data.get("correct_answers", 0)),
            fallback_count=int(data.get("fallback_count", 0)),
        )


# =============================================================================
# Fallback Outcomes
# =============================================================================


class FallbackState(str, Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"
    RECOVERING = "recovering"
    RESUMED = "resumed"


class FallbackAction(str, Enum):
    RESET_TO_CHECKPOINT = "reset_to_checkpoint"
    RESTART_FROM_BEGINNING = "restart_from_beginning"
    ERROR = "error"


@dataclass(frozen=True)
class FallbackResult(ABC):
    """Outcome of a game-over recovery decision."""
    message: str
    restored_lives: int
    trace: tuple[FallbackState, ...] = ()  # states visited while recovering

    @property
    @abstractmethod
    def action(self) -> FallbackAction:
        ...

    @property
    def checkpoint(self) -> Checkpoint | None:
        return None

    @property
    def awarded_power_ups(self) -> dict[PowerUpKind, int]:
        return {}


@dataclass(frozen=True)
class ResetToCheckpoint(FallbackResult):
    reset_checkpoint: Checkpoint = Checkpoint.CHIHUAHUA
    rewards: dict[PowerUpKind, int] = field(default_factory=dict)
    progress: PathProgressState | None = None

    @property
    def action(self) -> FallbackAction:
        return FallbackAction.RESET_TO_CHECKPOINT

    @property
    def checkpoint(self) -> Checkpoint | None:
        return self.reset_checkpoint

    @property
    def awarded_power_ups(self) -> dict[PowerUpKind, int]:
        return dict(self.rewards)


@dataclass(frozen=True)
class RestartFromBeginning(FallbackResult):
    progress: PathProgressState | None = None

    @property
    def action(self) -> FallbackAction:
        return FallbackAction.RESTART_FROM_BEGINNING


@dataclass(frozen=True)
class RecoveryFailure(FallbackResult):
    """Terminal outcome: both rollback and restart failed."""
    error: RecoveryError | None = None

    @property
    def action(self) -> FallbackAction:
        return FallbackAction.ERROR
