"""
Progression module: checkpoints, power-up rewards and game-over recovery.

This module provides:
- CheckpointRewardCalculator: Base and bonus power-ups per checkpoint
- CheckpointFallbackController: Rollback or restart after a game over

Checkpoints (questions required):
- Chihuahua (10), Pug (15), Cocker Spaniel (25)
- German Shepherd (35), Great Dane (45), Deutsche Dogge (60)
"""

from .checkpoint_rewards import CheckpointRewardCalculator
from .fallback_controller import CheckpointFallbackController
from .models import (
    Checkpoint,
    FallbackResult,
    PathProgressState,
    PowerUpKind,
    RecoveryFailure,
    ResetToCheckpoint,
    RestartFromBeginning,
)

__all__ = [
    "Checkpoint",
    "CheckpointFallbackController",
    "CheckpointRewardCalculator",
    "FallbackResult",
    "PathProgressState",
    "PowerUpKind",
    "RecoveryFailure",
    "ResetToCheckpoint",
    "RestartFromBeginning",
]
