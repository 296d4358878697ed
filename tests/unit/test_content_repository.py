"""
Unit tests for ContentRepository source tiers and parsing.
"""

import asyncio
import json

import pytest

from trivia_core.content.models import ContentCategory, DifficultyTier
from trivia_core.content.repository import ContentRepository, ContentSourceTier
from trivia_core.core.diagnostics import DiagnosticsLog, ErrorSeverity
from trivia_core.core.exceptions import ContentLoadError, LoadFailureReason


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class GatedPrimaryRepository(ContentRepository):
    """Primary load waits on a gate so tests can interleave calls."""

    def __init__(self, document):
        super().__init__(primary_document=document, use_builtin_samples=False)
        self.gate = asyncio.Event()

    async def _load_primary(self):
        await self.gate.wait()
        return await super()._load_primary()


class TestPrimaryDocument:
    @pytest.mark.asyncio
    async def test_loads_items_by_category(self, twelve_item_document):
        repository = ContentRepository.from_document(twelve_item_document)

        document = await repository.load_all()

        assert len(document[ContentCategory.DOG_BREEDS]) == 6
        assert len(document[ContentCategory.DOG_TRAINING]) == 6
        assert repository.load_report.source is ContentSourceTier.PRIMARY
        assert repository.load_report.loaded_items == 12
        assert repository.load_report.used_fallback is False

    @pytest.mark.asyncio
    async def test_categories_wrapper(self, twelve_item_document):
        repository = ContentRepository.from_document({"categories": twelve_item_document})
        document = await repository.load_all()
        assert sum(len(items) for items in document.values()) == 12

    @pytest.mark.asyncio
    async def test_load_is_memoized(self, twelve_item_document):
        repository = ContentRepository.from_document(twelve_item_document)

        first = await repository.load_all()
        second = await repository.load_all()

        assert first is second
        assert repository.load_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_loads_share_one_load(self, twelve_item_document):
        repository = ContentRepository.from_document(twelve_item_document)

        results = await asyncio.gather(*(repository.load_all() for _ in range(5)))

        assert repository.load_count == 1
        assert all(result is results[0] for result in results)

    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self, twelve_item_document):
        repository = ContentRepository.from_document(twelve_item_document)
        await repository.load_all()

        repository.invalidate()
        assert repository.is_loaded is False

        await repository.load_all()
        assert repository.load_count == 2

    @pytest.mark.asyncio
    async def test_invalidate_during_load_is_not_memoized(self, twelve_item_document):
        repository = GatedPrimaryRepository(twelve_item_document)
        pending = asyncio.ensure_future(repository.load_all())
        await asyncio.sleep(0)

        repository.invalidate()
        repository.gate.set()
        document = await pending

        assert len(document[ContentCategory.DOG_BREEDS]) == 6
        assert repository.is_loaded is False
        assert repository.load_report is None

    @pytest.mark.asyncio
    async def test_load_category(self, twelve_item_document):
        repository = ContentRepository.from_document(twelve_item_document)

        breeds = await repository.load_category(ContentCategory.DOG_BREEDS)
        history = await repository.load_category(ContentCategory.DOG_HISTORY)

        assert {item.id for item in breeds} == {f"breeds-{n:02d}" for n in range(6)}
        assert history == []


class TestMalformedRecords:
    @pytest.mark.asyncio
    async def test_bad_records_are_skipped_and_recorded(self, make_record):
        broken = make_record("broken")
        broken["correctAnswerIndex"] = 9
        document = {
            "dogBreeds": [make_record("good-1"), broken, "not a record"],
            "dogHealth": [make_record("good-2", category="dogHealth")],
        }
        diagnostics = DiagnosticsLog()
        repository = ContentRepository.from_document(document, diagnostics=diagnostics)

        loaded = await repository.load_all()

        assert sum(len(items) for items in loaded.values()) == 2
        assert repository.load_report.skipped_items == 2
        assert diagnostics.count("ItemParseError") == 2

    @pytest.mark.asyncio
    async def test_duplicate_ids_are_skipped(self, make_record):
        document = {
            "dogBreeds": [make_record("same")],
            "dogTraining": [make_record("same", category="dogTraining")],
        }
        repository = ContentRepository.from_document(document)

        loaded = await repository.load_all()

        assert sum(len(items) for items in loaded.values()) == 1
        assert repository.load_report.skipped_items == 1

    @pytest.mark.asyncio
    async def test_unknown_category_group_is_skipped(self, make_record):
        document = {
            "catFacts": [make_record("c-1"), make_record("c-2")],
            "dogBreeds": [make_record("d-1")],
        }
        repository = ContentRepository.from_document(document)

        await repository.load_all()

        assert repository.load_report.loaded_items == 1
        assert repository.load_report.skipped_items == 2

    @pytest.mark.asyncio
    async def test_only_malformed_records_fails_the_tier(self, make_record):
        broken = make_record("broken", difficulty="legendary")
        repository = ContentRepository.from_document({"dogBreeds": [broken]})

        with pytest.raises(ContentLoadError) as exc_info:
            await repository.load_all()

        assert exc_info.value.reason is LoadFailureReason.NO_VALID_ITEMS


class TestSourceFallback:
    @pytest.mark.asyncio
    async def test_missing_primary_uses_legacy(self, tmp_path):
        legacy = _write(tmp_path / "questions.json", {
            "easy": [
                {
                    "id": "legacy-1",
                    "text": "Welche Farbe hat ein Dalmatiner?",
                    "answers": ["Weiß mit Punkten", "Braun"],
                    "correctAnswerIndex": 0,
                    "funFact": "Welpen sind weiß.",
                    "category": "Hunderassen",
                },
            ],
            "mystery": [
                {
                    "id": "legacy-2",
                    "text": "Was ist ein Welpe?",
                    "answers": ["Junger Hund", "Katze"],
                    "correctAnswerIndex": 0,
                    "category": "Hundeverhalten",
                },
            ],
        })
        diagnostics = DiagnosticsLog()
        repository = ContentRepository(
            primary_path=tmp_path / "missing.json",
            legacy_path=legacy,
            use_builtin_samples=False,
            diagnostics=diagnostics,
        )

        document = await repository.load_all()

        assert repository.load_report.source is ContentSourceTier.LEGACY
        assert repository.load_report.failed_sources == ["primary: missing"]
        breeds = document[ContentCategory.DOG_BREEDS]
        assert breeds[0].text_for("de") == "Welche Farbe hat ein Dalmatiner?"
        # Unknown legacy difficulty keys default to easy
        assert document[ContentCategory.DOG_BEHAVIOR][0].tier is DifficultyTier.EASY
        severities = [entry.severity for entry in diagnostics.recent(10)]
        assert ErrorSeverity.HIGH in severities
        assert ErrorSeverity.MEDIUM in severities

    @pytest.mark.asyncio
    async def test_unparseable_primary_and_missing_legacy_use_samples(self, tmp_path):
        primary = tmp_path / "questions_fixed.json"
        primary.write_text("{not json", encoding="utf-8")
        repository = ContentRepository(
            primary_path=primary,
            legacy_path=tmp_path / "questions.json",
        )

        document = await repository.load_all()

        assert repository.load_report.source is ContentSourceTier.SAMPLE
        assert repository.load_report.failed_sources == ["primary: unparseable", "legacy: missing"]
        assert set(document) == set(ContentCategory)

    @pytest.mark.asyncio
    async def test_all_sources_failing_raises(self, tmp_path):
        primary = tmp_path / "questions_fixed.json"
        primary.write_text("   ", encoding="utf-8")
        diagnostics = DiagnosticsLog()
        repository = ContentRepository(
            primary_path=primary,
            legacy_path=None,
            use_builtin_samples=False,
            diagnostics=diagnostics,
        )

        with pytest.raises(ContentLoadError) as exc_info:
            await repository.load_all()

        assert "All content sources failed" in str(exc_info.value)
        assert exc_info.value.reason is LoadFailureReason.MISSING
        assert diagnostics.recent(1)[0].severity is ErrorSeverity.CRITICAL
        assert repository.is_loaded is False

    @pytest.mark.asyncio
    async def test_empty_file_reason(self, tmp_path):
        primary = tmp_path / "questions_fixed.json"
        primary.write_text("", encoding="utf-8")
        repository = ContentRepository(primary_path=primary, use_builtin_samples=True)

        await repository.load_all()

        assert repository.load_report.failed_sources[0] == "primary: empty"

    @pytest.mark.asyncio
    async def test_non_object_document(self, tmp_path):
        primary = _write(tmp_path / "questions_fixed.json", ["just", "a", "list"])
        repository = ContentRepository(primary_path=primary, use_builtin_samples=True)

        await repository.load_all()

        assert repository.load_report.failed_sources[0] == "primary: unparseable"
