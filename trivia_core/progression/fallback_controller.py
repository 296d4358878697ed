"""
Checkpoint Fallback Controller.

Decides how a path continues after the player runs out of lives:

- With a completed checkpoint: roll back to it, restore lives, re-grant the
  checkpoint's power-ups and reshuffle the pool.
- Without one, or when the rollback fails: restart the path from scratch.
- When the restart fails too: return a terminal RecoveryFailure.

handle_game_over() never raises; every failure is recorded in the
diagnostics log and reflected in the returned FallbackResult.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Protocol

from loguru import logger

from trivia_core.content.models import PathType
from trivia_core.core.diagnostics import DiagnosticsLog, ErrorSeverity
from trivia_core.core.exceptions import CheckpointResetError, RecoveryError
from trivia_core.progression.checkpoint_rewards import CheckpointRewardCalculator
from trivia_core.progression.models import (
    Checkpoint,
    FallbackResult,
    FallbackState,
    PathProgressState,
    RecoveryFailure,
    ResetToCheckpoint,
    RestartFromBeginning,
)

RECOVERY_ERROR_MESSAGE = "An error occurred. Please restart the game."

CHECKPOINT_MESSAGES = {
    Checkpoint.CHIHUAHUA: (
        "Don't worry! You've been reset to the Chihuahua checkpoint. "
        "Your progress and power-ups have been restored. Keep going!"
    ),
    Checkpoint.PUG: (
        "You've been reset to the Pug checkpoint. "
        "Your earned power-ups are still with you. Keep pushing forward!"
    ),
    Checkpoint.COCKER_SPANIEL: (
        "You've been reset to the Cocker Spaniel checkpoint. "
        "Your earned power-ups are still with you. Try again!"
    ),
    Checkpoint.GERMAN_SHEPHERD: (
        "Back to the German Shepherd checkpoint! "
        "You've kept all your earned power-ups. You can do this!"
    ),
    Checkpoint.GREAT_DANE: (
        "Reset to the Great Dane checkpoint. "
        "You're so close to the end! Use your power-ups wisely."
    ),
    Checkpoint.DEUTSCHE_DOGGE: (
        "You've reached the final checkpoint! "
        "All your power-ups are restored. One more push to victory!"
    ),
}


def path_restart_message(path: PathType) -> str:
    return (
        f"Starting fresh on the {path.display_name} path. "
        "You haven't reached any checkpoints yet, but every expert started here. "
        "Good luck on your treasure hunt!"
    )


class PoolResetter(Protocol):
    def reset(self, path: PathType, preserve_ids: Iterable[str] = ...) -> None:
        ...

    async def has_enough(self, path: PathType, exclude_ids: Iterable[str], required_count: int) -> bool:
        ...


class CheckpointFallbackController:
    """
    Game-over recovery state machine.

    Holds no state between calls; each result carries the states it went
    through in ``trace``.
    """

    def __init__(
        self,
        pool_manager: PoolResetter,
        calculator: CheckpointRewardCalculator | None = None,
        max_lives: int = 3,
        reward_accuracy: float = 0.8,
        diagnostics: DiagnosticsLog | None = None,
    ):
        """
        Initialize controller.

        Args:
            pool_manager: Pool whose shuffle state is reset on recovery
            calculator: Reward calculator for re-granted checkpoint power-ups
            max_lives: Lives restored on every recovery
            reward_accuracy: Accuracy assumed when re-granting checkpoint rewards
            diagnostics: Shared diagnostics log
        """
        self.pool_manager = pool_manager
        self.calculator = calculator or CheckpointRewardCalculator()
        self.max_lives = max_lives
        self.reward_accuracy = reward_accuracy
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()

    def handle_game_over(self, progress: PathProgressState) -> FallbackResult:
        """
        Recover a path after the player ran out of lives.

        Args:
            progress: Progress on the path at game over (not modified)

        Returns:
            ResetToCheckpoint, RestartFromBeginning or RecoveryFailure
        """
        trace = (FallbackState.GAME_OVER, FallbackState.RECOVERING)
        checkpoint = progress.current_checkpoint

        if checkpoint is not None:
            try:
                result: FallbackResult = self._reset_to_checkpoint(progress, checkpoint)
            except Exception as exc:
                error = exc if isinstance(exc, CheckpointResetError) else CheckpointResetError(
                    f"Reset of {progress.path.value} to {checkpoint.value} failed: {exc}"
                )
                self.diagnostics.record(
                    error,
                    severity=ErrorSeverity.MEDIUM,
                    details="falling back to path restart",
                )
            else:
                return replace(result, trace=trace + (FallbackState.RESUMED,))

        result = self._restart_from_beginning(progress)
        if isinstance(result, RecoveryFailure):
            return replace(result, trace=trace)
        return replace(result, trace=trace + (FallbackState.RESUMED,))

    def _reset_to_checkpoint(self, progress: PathProgressState, checkpoint: Checkpoint) -> ResetToCheckpoint:
        threshold = checkpoint.questions_required
        if progress.questions_answered < threshold:
            raise CheckpointResetError(
                f"{checkpoint.display_name} needs {threshold} answers, "
                f"progress has {progress.questions_answered}"
            )

        rewards = self.calculator.rewards_for(checkpoint, self.reward_accuracy)
        rolled_back = PathProgressState(
            path=progress.path,
            current_checkpoint=checkpoint,
            answered_ids=list(progress.answered_ids[:threshold]),
            power_up_inventory=dict(progress.power_up_inventory),
            lives_remaining=self.max_lives,
            questions_answered=threshold,
            correct_answers=min(progress.correct_answers, threshold),
            fallback_count=progress.fallback_count + 1,
        )
        rolled_back.add_power_ups(rewards)

        self.pool_manager.reset(progress.path, preserve_ids=frozenset())

        logger.info(
            "Reset {} to checkpoint {} ({} lives, {} power-ups granted)",
            progress.path.value,
            checkpoint.display_name,
            self.max_lives,
            sum(rewards.values()),
        )
        return ResetToCheckpoint(
            message=CHECKPOINT_MESSAGES[checkpoint],
            restored_lives=self.max_lives,
            reset_checkpoint=checkpoint,
            rewards=rewards,
            progress=rolled_back,
        )

    def _restart_from_beginning(self, progress: PathProgressState) -> FallbackResult:
        try:
            fresh = PathProgressState(
                path=progress.path,
                lives_remaining=self.max_lives,
                fallback_count=progress.fallback_count + 1,
            )
            self.pool_manager.reset(progress.path, preserve_ids=frozenset())
        except Exception as exc:
            error = RecoveryError(f"Restart of {progress.path.value} failed: {exc}")
            self.diagnostics.record(error, severity=ErrorSeverity.CRITICAL)
            return RecoveryFailure(
                message=RECOVERY_ERROR_MESSAGE,
                restored_lives=self.max_lives,
                error=error,
            )

        logger.info("Restarted path {} from the beginning", progress.path.value)
        return RestartFromBeginning(
            message=path_restart_message(progress.path),
            restored_lives=self.max_lives,
            progress=fresh,
        )

    # ========================================
    # Queries
    # ========================================

    @staticmethod
    def can_perform_checkpoint_fallback(progress: PathProgressState) -> bool:
        return progress.current_checkpoint is not None

    async def has_enough_for_restart(
        self,
        path: PathType,
        exclude_ids: Iterable[str],
        required_count: int,
    ) -> bool:
        return await self.pool_manager.has_enough(path, exclude_ids, required_count)

    @staticmethod
    def fallback_statistics(result: FallbackResult) -> dict[str, Any]:
        """Summary of a fallback outcome for debugging."""
        progress = getattr(result, "progress", None)
        return {
            "action": result.action.value,
            "checkpoint": result.checkpoint.display_name if result.checkpoint else None,
            "path": progress.path.value if progress else None,
            "questions_answered": progress.questions_answered if progress else None,
            "restored_lives": result.restored_lives,
            "awarded_power_ups": sum(result.awarded_power_ups.values()),
            "message": result.message,
        }
