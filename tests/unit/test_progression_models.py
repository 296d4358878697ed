"""
Unit tests for progression models and difficulty progression.
"""

import pytest

from trivia_core.content.models import PathType
from trivia_core.progression.difficulty_progression import (
    checkpoint_difficulty_level,
    difficulty_level_for_question_count,
    level_for_progress,
)
from trivia_core.progression.models import (
    Checkpoint,
    FallbackAction,
    FallbackResult,
    PathProgressState,
    PowerUpKind,
    RestartFromBeginning,
)


class TestCheckpoint:
    def test_thresholds(self):
        assert [cp.questions_required for cp in Checkpoint] == [10, 15, 25, 35, 45, 60]

    def test_order(self):
        assert Checkpoint.CHIHUAHUA.next is Checkpoint.PUG
        assert Checkpoint.DEUTSCHE_DOGGE.next is None
        assert Checkpoint.DEUTSCHE_DOGGE.is_final

    @pytest.mark.parametrize(
        "answered, expected",
        [(0, None), (9, None), (10, Checkpoint.CHIHUAHUA), (24, Checkpoint.PUG), (99, Checkpoint.DEUTSCHE_DOGGE)],
    )
    def test_reached_at(self, answered, expected):
        assert Checkpoint.reached_at(answered) is expected


class TestPathProgressState:
    def test_serialization_round_trip(self, sample_progress_dict):
        progress = PathProgressState.from_dict(sample_progress_dict)

        assert progress.path is PathType.DOG_TRAINING
        assert progress.current_checkpoint is Checkpoint.PUG
        # Unknown power-up kinds are dropped
        assert progress.power_up_inventory == {PowerUpKind.FIFTY_FIFTY: 2, PowerUpKind.HINT: 1}

        data = progress.to_dict()
        assert data["path"] == "dogTraining"
        assert data["current_checkpoint"] == "pug"
        assert data["power_up_inventory"] == {"fiftyFifty": 2, "hint": 1}
        assert PathProgressState.from_dict(data) == progress

    def test_from_dict_requires_path(self):
        with pytest.raises(ValueError):
            PathProgressState.from_dict({"questions_answered": 3})

    def test_unknown_checkpoint_is_dropped(self):
        progress = PathProgressState.from_dict({"path": "dogBreeds", "current_checkpoint": "wolf"})
        assert progress.current_checkpoint is None

    def test_record_answer_reaches_checkpoint(self):
        progress = PathProgressState(path=PathType.DOG_BREEDS)

        reached = [progress.record_answer(f"q-{n}", correct=n % 2 == 0) for n in range(10)]

        assert reached[:9] == [None] * 9
        assert reached[9] is Checkpoint.CHIHUAHUA
        assert progress.next_checkpoint is Checkpoint.PUG
        assert progress.accuracy == pytest.approx(0.5)

    def test_repeated_answer_is_not_duplicated(self):
        progress = PathProgressState(path=PathType.DOG_BREEDS)
        progress.record_answer("q-1", correct=False)
        progress.record_answer("q-1", correct=True)

        assert progress.answered_ids == ["q-1"]
        assert progress.questions_answered == 2

    def test_power_ups(self):
        progress = PathProgressState(path=PathType.DOG_BREEDS)
        progress.add_power_ups({PowerUpKind.SKIP: 2})

        assert progress.use_power_up(PowerUpKind.SKIP) is True
        assert progress.use_power_up(PowerUpKind.SKIP) is True
        assert progress.use_power_up(PowerUpKind.SKIP) is False
        assert progress.use_power_up(PowerUpKind.HINT) is False

    def test_completed(self):
        progress = PathProgressState(path=PathType.DOG_BREEDS, current_checkpoint=Checkpoint.DEUTSCHE_DOGGE)
        assert progress.is_completed
        assert progress.next_checkpoint is None


class TestFallbackResult:
    def test_base_result_cannot_be_built(self):
        with pytest.raises(TypeError):
            FallbackResult(message="x", restored_lives=3)

    def test_variant_defines_action(self):
        result = RestartFromBeginning(message="x", restored_lives=3)

        assert result.action is FallbackAction.RESTART_FROM_BEGINNING
        assert result.trace == ()
        assert result.checkpoint is None


class TestDifficultyProgression:
    @pytest.mark.parametrize(
        "count, level",
        [(0, 1), (10, 1), (11, 2), (20, 2), (21, 3), (35, 4), (41, 5), (500, 5)],
    )
    def test_level_for_question_count(self, count, level):
        assert difficulty_level_for_question_count(count) == level

    def test_checkpoint_level(self):
        assert checkpoint_difficulty_level(None) == 1
        assert checkpoint_difficulty_level(Checkpoint.PUG) == 2
        assert checkpoint_difficulty_level(Checkpoint.DEUTSCHE_DOGGE) == 6

    def test_level_never_below_checkpoint(self):
        # Count alone would give level 2
        progress = PathProgressState(
            path=PathType.DOG_BREEDS,
            current_checkpoint=Checkpoint.GERMAN_SHEPHERD,
            questions_answered=12,
        )
        assert level_for_progress(progress) == 4

    def test_level_is_capped(self):
        progress = PathProgressState(
            path=PathType.DOG_BREEDS,
            current_checkpoint=Checkpoint.DEUTSCHE_DOGGE,
            questions_answered=60,
        )
        assert level_for_progress(progress) == 5
