"""
Content Data Models.

Typed representations of trivia content:
- DifficultyTier / ContentCategory / PathType enums
- ContentItem: immutable, localized trivia question
- CategoryPool: per-category, per-tier item buckets owned by the cache
- ContentItemRecord / LegacyItemRecord: wire schemas validated with Pydantic
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

FALLBACK_LOCALE = "de"


# =============================================================================
# Enums
# =============================================================================


class DifficultyTier(str, Enum):
    """Ordered difficulty tier of a content item."""
    EASY = "easy"
    EASY_PLUS = "easy+"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    @property
    def points(self) -> int:
        """Points awarded for a correct answer at this tier."""
        return _TIER_POINTS[self]

    @property
    def scoring_weight(self) -> float:
        return _TIER_WEIGHTS[self]

    @classmethod
    def from_label(cls, label: str) -> "DifficultyTier":
        """Parse a wire label ('easy', 'easy+', 'easy_plus', ...)."""
        normalized = label.strip().lower().replace("_plus", "+").replace("-plus", "+")
        for tier in cls:
            if tier.value == normalized:
                return tier
        raise ValueError(f"Unknown difficulty tier: {label!r}")

    def harder(self) -> "DifficultyTier":
        return _TIER_ORDER[min(self.rank + 1, len(_TIER_ORDER) - 1)]

    def easier(self) -> "DifficultyTier":
        return _TIER_ORDER[max(self.rank - 1, 0)]


_TIER_ORDER: tuple[DifficultyTier, ...] = tuple(DifficultyTier)

_TIER_POINTS = {
    DifficultyTier.EASY: 10,
    DifficultyTier.EASY_PLUS: 12,
    DifficultyTier.MEDIUM: 15,
    DifficultyTier.HARD: 20,
    DifficultyTier.EXPERT: 25,
}

_TIER_WEIGHTS = {
    DifficultyTier.EASY: 1.0,
    DifficultyTier.EASY_PLUS: 1.2,
    DifficultyTier.MEDIUM: 1.5,
    DifficultyTier.HARD: 2.0,
    DifficultyTier.EXPERT: 2.5,
}


class ContentCategory(str, Enum):
    """Content category; the value is the key used in content documents."""
    DOG_TRAINING = "dogTraining"
    DOG_BREEDS = "dogBreeds"
    DOG_BEHAVIOR = "dogBehavior"
    DOG_HEALTH = "dogHealth"
    DOG_HISTORY = "dogHistory"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]["en"]

    def localized_name(self, locale: str) -> str:
        names = _CATEGORY_NAMES[self]
        return names.get(locale, names["en"])

    @classmethod
    def from_label(cls, label: str) -> "ContentCategory":
        """
        Parse a document key or a display name in any supported locale.

        Raises:
            ValueError: If the label names no known category
        """
        normalized = label.strip().lower()
        for category in cls:
            if category.value.lower() == normalized:
                return category
            if normalized in (name.lower() for name in _CATEGORY_NAMES[category].values()):
                return category
        raise ValueError(f"Unknown content category: {label!r}")


_CATEGORY_NAMES: dict[ContentCategory, dict[str, str]] = {
    ContentCategory.DOG_TRAINING: {
        "en": "Dog Training", "de": "Hundetraining", "es": "Entrenamiento Canino",
    },
    ContentCategory.DOG_BREEDS: {
        "en": "Dog Breeds", "de": "Hunderassen", "es": "Razas de Perros",
    },
    ContentCategory.DOG_BEHAVIOR: {
        "en": "Dog Behavior", "de": "Hundeverhalten", "es": "Comportamiento Canino",
    },
    ContentCategory.DOG_HEALTH: {
        "en": "Dog Health", "de": "Hundegesundheit", "es": "Salud Canina",
    },
    ContentCategory.DOG_HISTORY: {
        "en": "Dog History", "de": "Hundegeschichte", "es": "Historia Canina",
    },
}


class PathType(str, Enum):
    """Themed path a player travels through checkpoints."""
    DOG_BREEDS = "dogBreeds"
    DOG_TRAINING = "dogTraining"
    HEALTH_CARE = "healthCare"
    DOG_BEHAVIOR = "dogBehavior"
    DOG_HISTORY = "dogHistory"
    DOG_TRIVIA = "dogTrivia"

    @property
    def display_name(self) -> str:
        return {
            PathType.DOG_BREEDS: "Dog Breeds",
            PathType.DOG_TRAINING: "Dog Training",
            PathType.HEALTH_CARE: "Health & Care",
            PathType.DOG_BEHAVIOR: "Dog Behavior",
            PathType.DOG_HISTORY: "Dog History",
            PathType.DOG_TRIVIA: "Dog Trivia",
        }[self]


# =============================================================================
# Content Items
# =============================================================================


def _localized(values: Mapping[str, object], locale: str, fallback_locale: str):
    if locale in values:
        return values[locale]
    if fallback_locale in values:
        return values[fallback_locale]
    return next(iter(values.values()))


@dataclass(frozen=True, eq=False)
class ContentItem:
    """
    A localized trivia question.

    Immutable once loaded. Identity is the id together with category and tier.
    """
    id: str
    category: ContentCategory
    tier: DifficultyTier
    text: Mapping[str, str]
    answers: Mapping[str, tuple[str, ...]]
    correct_answer_index: int
    hint: Mapping[str, str] = field(default_factory=dict)
    fun_fact: Mapping[str, str] = field(default_factory=dict)
    age_range: str = "8-12"
    tags: frozenset[str] = frozenset()

    def text_for(self, locale: str, fallback_locale: str = FALLBACK_LOCALE) -> str:
        return _localized(self.text, locale, fallback_locale)

    def answers_for(self, locale: str, fallback_locale: str = FALLBACK_LOCALE) -> tuple[str, ...]:
        return _localized(self.answers, locale, fallback_locale)

    def correct_answer(self, locale: str, fallback_locale: str = FALLBACK_LOCALE) -> str:
        return self.answers_for(locale, fallback_locale)[self.correct_answer_index]

    def hint_for(self, locale: str, fallback_locale: str = FALLBACK_LOCALE) -> str:
        return _localized(self.hint, locale, fallback_locale) if self.hint else ""

    def fun_fact_for(self, locale: str, fallback_locale: str = FALLBACK_LOCALE) -> str:
        return _localized(self.fun_fact, locale, fallback_locale) if self.fun_fact else ""

    @property
    def points(self) -> int:
        return self.tier.points

    def searchable_text(self) -> str:
        """Lower-cased text of every locale plus tags, for keyword matching."""
        parts = list(self.text.values()) + sorted(self.tags)
        return " ".join(parts).lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentItem):
            return NotImplemented
        return (self.id, self.category, self.tier) == (other.id, other.category, other.tier)

    def __hash__(self) -> int:
        return hash((self.id, self.category, self.tier))

    def __repr__(self) -> str:
        return f"ContentItem(id={self.id!r}, category={self.category.value}, tier={self.tier.value})"


ContentDocument = dict[ContentCategory, list[ContentItem]]


@dataclass(frozen=True)
class CategoryPool:
    """Cached content of one category, bucketed by difficulty tier."""
    category: ContentCategory
    tiers: Mapping[DifficultyTier, tuple[ContentItem, ...]]
    loaded_at: datetime

    @classmethod
    def build(
        cls,
        category: ContentCategory,
        items: list[ContentItem],
        max_items_per_tier: int,
        loaded_at: datetime,
    ) -> "CategoryPool":
        """Bucket items by tier, keeping at most max_items_per_tier per bucket."""
        buckets: dict[DifficultyTier, list[ContentItem]] = {}
        for item in items:
            bucket = buckets.setdefault(item.tier, [])
            if len(bucket) < max_items_per_tier:
                bucket.append(item)
        tiers = {tier: tuple(buckets[tier]) for tier in DifficultyTier if tier in buckets}
        return cls(category=category, tiers=MappingProxyType(tiers), loaded_at=loaded_at)

    def items(self) -> list[ContentItem]:
        """All items, easiest tier first."""
        result: list[ContentItem] = []
        for tier in DifficultyTier:
            result.extend(self.tiers.get(tier, ()))
        return result

    @property
    def item_count(self) -> int:
        return sum(len(bucket) for bucket in self.tiers.values())

    def largest_tier_size(self) -> int:
        return max((len(bucket) for bucket in self.tiers.values()), default=0)

    def truncated(self, max_items_per_tier: int) -> "CategoryPool":
        """Copy keeping only the first max_items_per_tier items of each tier."""
        tiers = {tier: bucket[:max_items_per_tier] for tier, bucket in self.tiers.items()}
        return CategoryPool(
            category=self.category,
            tiers=MappingProxyType(tiers),
            loaded_at=self.loaded_at,
        )


# =============================================================================
# Wire Schemas
# =============================================================================


class ContentItemRecord(BaseModel):
    """A content record as stored in the primary (localized) document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    category: str = ""
    difficulty: str
    text: dict[str, str] = Field(min_length=1)
    answers: dict[str, list[str]] = Field(min_length=1)
    correct_answer_index: int = Field(alias="correctAnswerIndex", ge=0)
    hint: dict[str, str] = Field(default_factory=dict)
    fun_fact: dict[str, str] = Field(default_factory=dict, alias="funFact")
    age_range: str | None = Field(default=None, alias="ageRange")
    tags: list[str] = Field(default_factory=list)

    @field_validator("difficulty")
    @classmethod
    def _known_difficulty(cls, value: str) -> str:
        return DifficultyTier.from_label(value).value

    @model_validator(mode="after")
    def _answer_index_in_range(self) -> "ContentItemRecord":
        for locale, options in self.answers.items():
            if self.correct_answer_index >= len(options):
                raise ValueError(
                    f"correctAnswerIndex {self.correct_answer_index} out of range "
                    f"for {len(options)} '{locale}' answers"
                )
        return self

    def to_item(self, default_category: ContentCategory) -> ContentItem:
        category = default_category
        if self.category:
            try:
                category = ContentCategory.from_label(self.category)
            except ValueError:
                category = default_category

        return ContentItem(
            id=self.id,
            category=category,
            tier=DifficultyTier.from_label(self.difficulty),
            text=MappingProxyType(dict(self.text)),
            answers=MappingProxyType({k: tuple(v) for k, v in self.answers.items()}),
            correct_answer_index=self.correct_answer_index,
            hint=MappingProxyType(dict(self.hint)),
            fun_fact=MappingProxyType(dict(self.fun_fact)),
            age_range=self.age_range or "8-12",
            tags=frozenset(self.tags),
        )


class LegacyItemRecord(BaseModel):
    """A single-language record from the legacy difficulty-keyed document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    answers: list[str] = Field(min_length=2)
    correct_answer_index: int = Field(alias="correctAnswerIndex", ge=0)
    fun_fact: str = Field(default="", alias="funFact")
    category: str = ""
    hint: str | None = None

    @model_validator(mode="after")
    def _answer_index_in_range(self) -> "LegacyItemRecord":
        if self.correct_answer_index >= len(self.answers):
            raise ValueError(
                f"correctAnswerIndex {self.correct_answer_index} out of range "
                f"for {len(self.answers)} answers"
            )
        return self

    def to_item(self, tier: DifficultyTier, locale: str) -> ContentItem:
        try:
            category = ContentCategory.from_label(self.category)
        except ValueError:
            category = ContentCategory.DOG_BREEDS

        return ContentItem(
            id=self.id,
            category=category,
            tier=tier,
            text=MappingProxyType({locale: self.text}),
            answers=MappingProxyType({locale: tuple(self.answers)}),
            correct_answer_index=self.correct_answer_index,
            hint=MappingProxyType({locale: self.hint} if self.hint else {}),
            fun_fact=MappingProxyType({locale: self.fun_fact} if self.fun_fact else {}),
        )
