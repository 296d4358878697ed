"""
Adaptive selection: difficulty tiers from player signals and per-path
relevance policies.
"""

from .difficulty_selector import DifficultySelector, PlayerSignals
from .path_relevance import (
    AnyCategoryPolicy,
    CategoryKeywordPolicy,
    PathRelevancePolicy,
    policy_for,
)

__all__ = [
    "AnyCategoryPolicy",
    "CategoryKeywordPolicy",
    "DifficultySelector",
    "PathRelevancePolicy",
    "PlayerSignals",
    "policy_for",
]
