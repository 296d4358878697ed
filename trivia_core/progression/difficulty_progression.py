"""
Difficulty progression along a path.

Maps how far a player has come (questions answered, checkpoint reached) to
the progression level used by the pool manager's tier distribution.
"""
from __future__ import annotations

from trivia_core.progression.models import Checkpoint, PathProgressState

MAX_LEVEL = 5

# Upper bound of answered questions for each level; beyond the last is MAX_LEVEL.
_LEVEL_BOUNDS = (10, 20, 30, 40)


def difficulty_level_for_question_count(question_count: int) -> int:
    """Level 1-5 for the number of questions answered on a path."""
    for level, bound in enumerate(_LEVEL_BOUNDS, start=1):
        if question_count <= bound:
            return level
    return MAX_LEVEL


def checkpoint_difficulty_level(checkpoint: Checkpoint | None) -> int:
    """Level 1-6 to resume at after a checkpoint (1 with no checkpoint)."""
    return checkpoint.difficulty_level if checkpoint is not None else 1


def level_for_progress(progress: PathProgressState) -> int:
    """Level for the next draw, never below the current checkpoint's."""
    by_count = difficulty_level_for_question_count(progress.questions_answered)
    by_checkpoint = min(checkpoint_difficulty_level(progress.current_checkpoint), MAX_LEVEL)
    return max(by_count, by_checkpoint)
