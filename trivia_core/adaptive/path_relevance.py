"""
Path relevance policies.

Each themed path owns an explicit predicate deciding which content items
belong to it. Matching everything is a named policy (AnyCategoryPolicy),
never an implicit trailing clause, so the behaviour of every path is
visible and testable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from trivia_core.content.models import ContentCategory, ContentItem, PathType

PathFilterMode = Literal["strict", "any"]


class PathRelevancePolicy(Protocol):
    name: str

    def matches(self, item: ContentItem) -> bool:
        ...

    def scope(self) -> frozenset[ContentCategory]:
        """Categories whose items can match."""
        ...


@dataclass(frozen=True)
class AnyCategoryPolicy:
    """Every item is relevant."""
    name: str = "any-category"

    def matches(self, item: ContentItem) -> bool:
        return True

    def scope(self) -> frozenset[ContentCategory]:
        return frozenset(ContentCategory)


@dataclass(frozen=True)
class CategoryKeywordPolicy:
    """Item belongs to one of the categories, or mentions one of the keywords."""
    name: str
    categories: frozenset[ContentCategory]
    keywords: tuple[str, ...] = ()

    def matches(self, item: ContentItem) -> bool:
        if item.category in self.categories:
            return True
        if not self.keywords:
            return False
        haystack = item.searchable_text()
        return any(keyword in haystack for keyword in self.keywords)

    def scope(self) -> frozenset[ContentCategory]:
        # Keywords can match items of any category
        if self.keywords:
            return frozenset(ContentCategory)
        return self.categories


ANY_CATEGORY = AnyCategoryPolicy()

PATH_POLICIES: dict[PathType, PathRelevancePolicy] = {
    PathType.DOG_BREEDS: CategoryKeywordPolicy(
        name="dog-breeds",
        categories=frozenset({ContentCategory.DOG_BREEDS}),
        keywords=(
            "rasse", "breed", "chihuahua", "golden retriever", "dalmatiner",
            "dalmatian", "bernhardiner", "border collie", "dackel", "chow chow",
            "bulldogge", "mops",
        ),
    ),
    PathType.DOG_TRAINING: CategoryKeywordPolicy(
        name="dog-training",
        categories=frozenset({ContentCategory.DOG_TRAINING}),
        keywords=("training", "kommando", "command", "erziehung", "gehorsam", "obedience"),
    ),
    PathType.HEALTH_CARE: CategoryKeywordPolicy(
        name="health-care",
        categories=frozenset({ContentCategory.DOG_HEALTH}),
        keywords=(
            "gesund", "krank", "health", "temperatur", "zähne", "teeth",
            "schwangerschaft", "pregnan", "hecheln", "pant",
        ),
    ),
    PathType.DOG_BEHAVIOR: CategoryKeywordPolicy(
        name="dog-behavior",
        categories=frozenset({ContentCategory.DOG_BEHAVIOR}),
        keywords=("verhalten", "behavior", "wedeln", "wag", "bellen", "bark", "riechen", "smell"),
    ),
    PathType.DOG_HISTORY: CategoryKeywordPolicy(
        name="dog-history",
        categories=frozenset({ContentCategory.DOG_HISTORY}),
        keywords=(
            "ursprünglich", "geschichte", "history", "gezüchtet", "chromosom",
            "kynologie", "evolution", "origin",
        ),
    ),
    PathType.DOG_TRIVIA: ANY_CATEGORY,
}


def policy_for(path: PathType, mode: PathFilterMode = "strict") -> PathRelevancePolicy:
    """
    Relevance policy of a path.

    Args:
        path: Themed path
        mode: 'strict' uses the path's own predicate, 'any' matches everything
    """
    if mode == "any":
        return ANY_CATEGORY
    return PATH_POLICIES[path]
