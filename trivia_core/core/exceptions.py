"""
Error taxonomy for the content engine.

Only two conditions interrupt the player-visible flow: a ContentLoadError
after every content source tier failed, and a RecoveryError result from the
fallback controller. Everything else is recorded and recovered locally.
"""

from __future__ import annotations

from enum import Enum


class TriviaEngineError(Exception):
    """Base class for all engine errors."""


class LoadFailureReason(str, Enum):
    """Why a content source could not be used."""
    MISSING = "missing"
    EMPTY = "empty"
    UNPARSEABLE = "unparseable"
    NO_VALID_ITEMS = "no_valid_items"
    TIMEOUT = "timeout"


class ContentLoadError(TriviaEngineError):
    """Raised when a content source cannot be read or parsed at all."""

    def __init__(
        self,
        message: str,
        reason: LoadFailureReason = LoadFailureReason.UNPARSEABLE,
        source: str | None = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.source = source


class ItemParseError(TriviaEngineError):
    """A single content record is malformed; the record is skipped."""

    def __init__(self, message: str, item_id: str | None = None, category: str | None = None):
        super().__init__(message)
        self.item_id = item_id
        self.category = category


class PoolExhaustionError(TriviaEngineError):
    """Fewer matching items exist than requested."""

    def __init__(self, message: str, requested: int, available: int):
        super().__init__(message)
        self.requested = requested
        self.available = available


class CheckpointResetError(TriviaEngineError):
    """Rolling a path back to its last checkpoint failed."""


class RecoveryError(TriviaEngineError):
    """Both checkpoint rollback and path restart failed."""
