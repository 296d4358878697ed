"""
Core infrastructure shared by every engine component.
"""

from .diagnostics import DiagnosticsLog, ErrorSeverity
from .exceptions import (
    CheckpointResetError,
    ContentLoadError,
    ItemParseError,
    LoadFailureReason,
    PoolExhaustionError,
    RecoveryError,
    TriviaEngineError,
)

__all__ = [
    "CheckpointResetError",
    "ContentLoadError",
    "DiagnosticsLog",
    "ErrorSeverity",
    "ItemParseError",
    "LoadFailureReason",
    "PoolExhaustionError",
    "RecoveryError",
    "TriviaEngineError",
]
