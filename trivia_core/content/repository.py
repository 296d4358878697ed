"""
Content repository for trivia questions.

Loads the raw content document once, lazily, and parses it into typed
ContentItem values indexed by category. Sources are tried in order:

1. Primary localized document (category -> list of records)
2. Legacy difficulty-keyed document
3. Built-in sample set

Malformed records are skipped and recorded; only when every source fails is
ContentLoadError raised to the caller.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from loguru import logger
from pydantic import ValidationError

from trivia_core.content.models import (
    FALLBACK_LOCALE,
    ContentCategory,
    ContentDocument,
    ContentItem,
    ContentItemRecord,
    DifficultyTier,
    LegacyItemRecord,
)
from trivia_core.content.samples import SAMPLE_DOCUMENT
from trivia_core.core.diagnostics import DiagnosticsLog, ErrorSeverity
from trivia_core.core.exceptions import ContentLoadError, ItemParseError, LoadFailureReason
from trivia_core.core.single_flight import SingleFlight


class ContentSourceTier(str, Enum):
    PRIMARY = "primary"
    LEGACY = "legacy"
    SAMPLE = "sample"


@dataclass
class LoadReport:
    """Outcome of the last document load."""
    source: ContentSourceTier
    source_name: str
    loaded_items: int
    skipped_items: int
    failed_sources: list[str] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.source != ContentSourceTier.PRIMARY


@dataclass
class _ParseOutcome:
    document: ContentDocument
    loaded: int = 0
    skipped: int = 0


class ContentRepository:
    """
    Lazily loads and memoizes the content document.

    Both load_all() and load_category() are idempotent: the second call
    returns memoized data until invalidate() is called. Concurrent first
    calls share a single underlying load.
    """

    def __init__(
        self,
        primary_path: Path | str | None = None,
        legacy_path: Path | str | None = None,
        use_builtin_samples: bool = True,
        fallback_locale: str = FALLBACK_LOCALE,
        diagnostics: DiagnosticsLog | None = None,
        primary_document: Mapping[str, Any] | None = None,
    ):
        """
        Initialize repository.

        Args:
            primary_path: Localized content document
            legacy_path: Legacy difficulty-keyed document
            use_builtin_samples: Whether the sample set may be used as last resort
            fallback_locale: Locale assigned to legacy single-language records
            diagnostics: Shared diagnostics log
            primary_document: Already-decoded primary document (skips file I/O)
        """
        self.primary_path = Path(primary_path) if primary_path else None
        self.legacy_path = Path(legacy_path) if legacy_path else None
        self.use_builtin_samples = use_builtin_samples
        self.fallback_locale = fallback_locale
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()
        self._primary_document = primary_document

        self._document: ContentDocument | None = None
        self._report: LoadReport | None = None
        self._flight: SingleFlight[ContentDocument] = SingleFlight()
        # Bumped by invalidate(); loads started before it are not memoized.
        self._generation = 0
        self.load_count = 0

    @classmethod
    def from_document(
        cls,
        document: Mapping[str, Any],
        diagnostics: DiagnosticsLog | None = None,
        use_builtin_samples: bool = False,
    ) -> "ContentRepository":
        """Repository over an in-memory primary document."""
        return cls(
            primary_document=document,
            use_builtin_samples=use_builtin_samples,
            diagnostics=diagnostics,
        )

    # ========================================
    # Public API
    # ========================================

    @property
    def is_loaded(self) -> bool:
        return self._document is not None

    @property
    def load_report(self) -> LoadReport | None:
        return self._report

    async def load_all(self) -> ContentDocument:
        """
        Load the full document (memoized).

        Raises:
            ContentLoadError: If every content source failed
        """
        if self._document is not None:
            return self._document
        generation = self._generation
        return await self._flight.run(
            ("document", generation), lambda: self._load_document(generation)
        )

    async def load_category(self, category: ContentCategory) -> list[ContentItem]:
        """Items of one category (empty list if the document has none)."""
        document = await self.load_all()
        return list(document.get(category, []))

    def invalidate(self) -> None:
        """Drop memoized data; the next call reloads from the sources."""
        self._document = None
        self._report = None
        self._generation += 1

    # ========================================
    # Source Tiers
    # ========================================

    async def _load_document(self, generation: int) -> ContentDocument:
        self.load_count += 1
        failures: list[str] = []
        last_error: ContentLoadError | None = None

        for tier, loader in (
            (ContentSourceTier.PRIMARY, self._load_primary),
            (ContentSourceTier.LEGACY, self._load_legacy),
            (ContentSourceTier.SAMPLE, self._load_samples),
        ):
            try:
                outcome, source_name = await loader()
            except ContentLoadError as exc:
                last_error = exc
                failures.append(f"{tier.value}: {exc.reason.value}")
                self.diagnostics.record(
                    exc,
                    severity=ErrorSeverity.HIGH,
                    details=f"content source tier '{tier.value}' failed",
                )
                continue

            report = LoadReport(
                source=tier,
                source_name=source_name,
                loaded_items=outcome.loaded,
                skipped_items=outcome.skipped,
                failed_sources=failures,
            )
            if generation == self._generation:
                self._document = outcome.document
                self._report = report
            else:
                logger.debug("Discarding document load that finished after an invalidate")
            if tier != ContentSourceTier.PRIMARY:
                self.diagnostics.record(
                    f"Using {tier.value} content as fallback ({source_name})",
                    severity=ErrorSeverity.MEDIUM,
                )
            logger.info(
                "Loaded {} items from {} ({} skipped)",
                outcome.loaded,
                source_name,
                outcome.skipped,
            )
            return outcome.document

        error = ContentLoadError(
            "All content sources failed: " + "; ".join(failures),
            reason=last_error.reason if last_error else LoadFailureReason.MISSING,
        )
        self.diagnostics.record(error, severity=ErrorSeverity.CRITICAL)
        raise error

    async def _load_primary(self) -> tuple[_ParseOutcome, str]:
        if self._primary_document is not None:
            raw: Any = self._primary_document
            source_name = "<memory>"
        elif self.primary_path is not None:
            raw = await self._read_json(self.primary_path)
            source_name = str(self.primary_path)
        else:
            raise ContentLoadError(
                "No primary content source configured",
                reason=LoadFailureReason.MISSING,
            )
        return self._parse_localized(raw, source_name), source_name

    async def _load_legacy(self) -> tuple[_ParseOutcome, str]:
        if self.legacy_path is None:
            raise ContentLoadError(
                "No legacy content source configured",
                reason=LoadFailureReason.MISSING,
            )
        raw = await self._read_json(self.legacy_path)
        source_name = str(self.legacy_path)
        return self._parse_legacy(raw, source_name), source_name

    async def _load_samples(self) -> tuple[_ParseOutcome, str]:
        if not self.use_builtin_samples:
            raise ContentLoadError(
                "Built-in sample content disabled",
                reason=LoadFailureReason.MISSING,
                source="builtin",
            )
        return self._parse_localized(SAMPLE_DOCUMENT, "builtin"), "builtin"

    # ========================================
    # Reading & Parsing
    # ========================================

    async def _read_json(self, path: Path) -> Any:
        if not path.exists():
            raise ContentLoadError(
                f"Content file not found: {path}",
                reason=LoadFailureReason.MISSING,
                source=str(path),
            )
        try:
            raw_text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as exc:
            raise ContentLoadError(
                f"Cannot read {path}: {exc}",
                reason=LoadFailureReason.MISSING,
                source=str(path),
            ) from exc

        if not raw_text.strip():
            raise ContentLoadError(
                f"Content file is empty: {path}",
                reason=LoadFailureReason.EMPTY,
                source=str(path),
            )
        try:
            return json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise ContentLoadError(
                f"Invalid JSON in {path}: {exc}",
                reason=LoadFailureReason.UNPARSEABLE,
                source=str(path),
            ) from exc

    def _parse_localized(self, raw: Any, source_name: str) -> _ParseOutcome:
        if isinstance(raw, Mapping) and isinstance(raw.get("categories"), Mapping):
            raw = raw["categories"]
        self._require_mapping(raw, source_name)

        outcome = _ParseOutcome(document={})
        seen_ids: set[str] = set()

        for key, records in raw.items():
            try:
                category = ContentCategory.from_label(str(key))
            except ValueError:
                skipped = len(records) if isinstance(records, list) else 1
                outcome.skipped += skipped
                self._record_skip(ItemParseError(f"Unknown category '{key}'", category=str(key)))
                continue

            if not isinstance(records, list):
                outcome.skipped += 1
                self._record_skip(ItemParseError(f"Category '{key}' is not a list", category=str(key)))
                continue

            for index, record in enumerate(records):
                try:
                    item = ContentItemRecord.model_validate(record).to_item(category)
                except ValidationError as exc:
                    outcome.skipped += 1
                    self._record_skip(ItemParseError(
                        f"Invalid record {key}[{index}]: {exc.error_count()} error(s)",
                        item_id=record.get("id") if isinstance(record, Mapping) else None,
                        category=str(key),
                    ))
                    continue

                if item.id in seen_ids:
                    outcome.skipped += 1
                    self._record_skip(ItemParseError(
                        f"Duplicate id '{item.id}' in {key}[{index}]",
                        item_id=item.id,
                        category=str(key),
                    ))
                    continue

                seen_ids.add(item.id)
                outcome.document.setdefault(item.category, []).append(item)
                outcome.loaded += 1

        return self._require_items(outcome, source_name)

    def _parse_legacy(self, raw: Any, source_name: str) -> _ParseOutcome:
        self._require_mapping(raw, source_name)

        outcome = _ParseOutcome(document={})
        seen_ids: set[str] = set()

        for difficulty, records in raw.items():
            try:
                tier = DifficultyTier.from_label(str(difficulty))
            except ValueError:
                tier = DifficultyTier.EASY

            if not isinstance(records, list):
                outcome.skipped += 1
                self._record_skip(ItemParseError(f"Difficulty '{difficulty}' is not a list"))
                continue

            for index, record in enumerate(records):
                try:
                    item = LegacyItemRecord.model_validate(record).to_item(tier, self.fallback_locale)
                except ValidationError as exc:
                    outcome.skipped += 1
                    self._record_skip(ItemParseError(
                        f"Invalid legacy record {difficulty}[{index}]: {exc.error_count()} error(s)",
                        item_id=record.get("id") if isinstance(record, Mapping) else None,
                    ))
                    continue

                if item.id in seen_ids:
                    outcome.skipped += 1
                    self._record_skip(ItemParseError(f"Duplicate id '{item.id}'", item_id=item.id))
                    continue

                seen_ids.add(item.id)
                outcome.document.setdefault(item.category, []).append(item)
                outcome.loaded += 1

        return self._require_items(outcome, source_name)

    @staticmethod
    def _require_mapping(raw: Any, source_name: str) -> None:
        if not isinstance(raw, Mapping):
            raise ContentLoadError(
                f"Content document {source_name} is not an object",
                reason=LoadFailureReason.UNPARSEABLE,
                source=source_name,
            )
        if not raw:
            raise ContentLoadError(
                f"Content document {source_name} contains no data",
                reason=LoadFailureReason.EMPTY,
                source=source_name,
            )

    @staticmethod
    def _require_items(outcome: _ParseOutcome, source_name: str) -> _ParseOutcome:
        if outcome.loaded == 0:
            raise ContentLoadError(
                f"No valid items in {source_name} ({outcome.skipped} malformed)",
                reason=LoadFailureReason.NO_VALID_ITEMS,
                source=source_name,
            )
        return outcome

    def _record_skip(self, error: ItemParseError) -> None:
        self.diagnostics.record(error, severity=ErrorSeverity.LOW)
