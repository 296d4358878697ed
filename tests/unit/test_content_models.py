"""
Unit tests for content data models and wire schemas.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from trivia_core.content.models import (
    CategoryPool,
    ContentCategory,
    ContentItemRecord,
    DifficultyTier,
    LegacyItemRecord,
)


class TestDifficultyTier:
    def test_tiers_are_ordered(self):
        ranks = [tier.rank for tier in DifficultyTier]
        assert ranks == sorted(ranks)
        assert DifficultyTier.EASY.rank < DifficultyTier.EXPERT.rank

    @pytest.mark.parametrize("label", ["easy+", "easy_plus", "EASY-PLUS", " easy+ "])
    def test_easy_plus_spellings(self, label):
        assert DifficultyTier.from_label(label) is DifficultyTier.EASY_PLUS

    def test_unknown_label_rejected(self):
        with pytest.raises(ValueError):
            DifficultyTier.from_label("impossible")

    def test_points(self):
        assert DifficultyTier.EASY.points == 10
        assert DifficultyTier.EASY_PLUS.points == 12
        assert DifficultyTier.MEDIUM.points == 15
        assert DifficultyTier.HARD.points == 20

    def test_harder_and_easier_saturate(self):
        assert DifficultyTier.EXPERT.harder() is DifficultyTier.EXPERT
        assert DifficultyTier.EASY.easier() is DifficultyTier.EASY
        assert DifficultyTier.MEDIUM.harder() is DifficultyTier.HARD


class TestContentCategory:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("dogBreeds", ContentCategory.DOG_BREEDS),
            ("Dog Breeds", ContentCategory.DOG_BREEDS),
            ("Hunderassen", ContentCategory.DOG_BREEDS),
            ("Salud Canina", ContentCategory.DOG_HEALTH),
            ("dogtraining", ContentCategory.DOG_TRAINING),
        ],
    )
    def test_from_label(self, label, expected):
        assert ContentCategory.from_label(label) is expected

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            ContentCategory.from_label("Cat Facts")

    def test_localized_name_falls_back_to_english(self):
        assert ContentCategory.DOG_HISTORY.localized_name("de") == "Hundegeschichte"
        assert ContentCategory.DOG_HISTORY.localized_name("fr") == "Dog History"


class TestContentItem:
    def test_locale_fallback(self, make_record):
        record = make_record("q-1", text_en="Which dog?", text_de="Welcher Hund?")
        item = ContentItemRecord.model_validate(record).to_item(ContentCategory.DOG_BREEDS)

        assert item.text_for("en") == "Which dog?"
        # Missing locale falls back to German
        assert item.text_for("es") == "Welcher Hund?"
        # Hint only exists in English: any available locale is used
        assert item.hint_for("de") == "Hint for q-1"

    def test_correct_answer(self, make_record):
        item = ContentItemRecord.model_validate(make_record("q-1")).to_item(ContentCategory.DOG_BREEDS)
        assert item.correct_answer("en") == "B"

    def test_identity(self, make_record):
        first = ContentItemRecord.model_validate(make_record("q-1")).to_item(ContentCategory.DOG_BREEDS)
        second = ContentItemRecord.model_validate(
            make_record("q-1", text_en="Different wording")
        ).to_item(ContentCategory.DOG_BREEDS)

        assert first == second
        assert len({first, second}) == 1

    def test_defaults(self, make_record):
        item = ContentItemRecord.model_validate(make_record("q-1")).to_item(ContentCategory.DOG_BREEDS)
        assert item.age_range == "8-12"
        assert item.points == 10

    def test_empty_hint_is_blank(self, make_record):
        record = make_record("q-1")
        record["hint"] = {}
        item = ContentItemRecord.model_validate(record).to_item(ContentCategory.DOG_BREEDS)
        assert item.hint_for("en") == ""


class TestContentItemRecord:
    def test_aliases(self, make_record):
        record = make_record("q-1")
        record["ageRange"] = "6-8"
        parsed = ContentItemRecord.model_validate(record)
        assert parsed.correct_answer_index == 1
        assert parsed.age_range == "6-8"
        assert parsed.fun_fact["en"] == "Fact about q-1"

    def test_answer_index_out_of_range(self, make_record):
        record = make_record("q-1")
        record["correctAnswerIndex"] = 7
        with pytest.raises(ValidationError):
            ContentItemRecord.model_validate(record)

    def test_unknown_difficulty(self, make_record):
        with pytest.raises(ValidationError):
            ContentItemRecord.model_validate(make_record("q-1", difficulty="legendary"))

    def test_empty_text_rejected(self, make_record):
        record = make_record("q-1")
        record["text"] = {}
        with pytest.raises(ValidationError):
            ContentItemRecord.model_validate(record)

    def test_record_category_overrides_document_key(self, make_record):
        record = make_record("q-1", category="Hundeverhalten")
        item = ContentItemRecord.model_validate(record).to_item(ContentCategory.DOG_BREEDS)
        assert item.category is ContentCategory.DOG_BEHAVIOR

    def test_unknown_record_category_uses_document_key(self, make_record):
        record = make_record("q-1", category="Mystery")
        item = ContentItemRecord.model_validate(record).to_item(ContentCategory.DOG_HEALTH)
        assert item.category is ContentCategory.DOG_HEALTH


class TestLegacyItemRecord:
    def test_to_item_uses_single_locale(self):
        record = LegacyItemRecord.model_validate({
            "id": "legacy-1",
            "text": "Wie viele Zähne hat ein Hund?",
            "answers": ["28", "42"],
            "correctAnswerIndex": 1,
            "funFact": "Welpen haben 28 Milchzähne.",
            "category": "Hundegesundheit",
        })
        item = record.to_item(DifficultyTier.MEDIUM, "de")

        assert item.category is ContentCategory.DOG_HEALTH
        assert item.tier is DifficultyTier.MEDIUM
        assert item.text_for("en") == "Wie viele Zähne hat ein Hund?"
        assert item.correct_answer("de") == "42"
        assert item.hint_for("de") == ""

    def test_needs_two_answers(self):
        with pytest.raises(ValidationError):
            LegacyItemRecord.model_validate({
                "id": "legacy-1",
                "text": "?",
                "answers": ["only"],
                "correctAnswerIndex": 0,
            })


class TestCategoryPool:
    def test_build_limits_each_tier(self, make_record):
        records = [make_record(f"e-{n}", difficulty="easy") for n in range(5)]
        records += [make_record(f"h-{n}", difficulty="hard") for n in range(2)]
        items = [ContentItemRecord.model_validate(r).to_item(ContentCategory.DOG_BREEDS) for r in records]

        pool = CategoryPool.build(ContentCategory.DOG_BREEDS, items, 3, datetime(2024, 1, 1))

        assert len(pool.tiers[DifficultyTier.EASY]) == 3
        assert len(pool.tiers[DifficultyTier.HARD]) == 2
        assert pool.item_count == 5
        assert pool.largest_tier_size() == 3

    def test_items_easiest_first(self, make_record):
        records = [make_record("h", difficulty="hard"), make_record("e", difficulty="easy")]
        items = [ContentItemRecord.model_validate(r).to_item(ContentCategory.DOG_BREEDS) for r in records]

        pool = CategoryPool.build(ContentCategory.DOG_BREEDS, items, 10, datetime(2024, 1, 1))

        assert [item.id for item in pool.items()] == ["e", "h"]

    def test_truncated(self, make_record):
        items = [
            ContentItemRecord.model_validate(make_record(f"e-{n}")).to_item(ContentCategory.DOG_BREEDS)
            for n in range(4)
        ]
        pool = CategoryPool.build(ContentCategory.DOG_BREEDS, items, 10, datetime(2024, 1, 1))

        smaller = pool.truncated(2)

        assert smaller.item_count == 2
        assert pool.item_count == 4
        assert smaller.loaded_at == pool.loaded_at
