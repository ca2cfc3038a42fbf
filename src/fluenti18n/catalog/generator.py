"""Catalog generation: merge an extraction result into per-locale PO files.

For each locale the generator writes ``messages_<locale>.po`` holding every
extracted message, keyed by identifier:

- Default locale: the translation is the natural text itself, so key-only
  lookups resolve in the source language too.
- Other locales: an existing translation (plus translator comments and
  flags) is carried over by identifier; source locations are replaced with
  the freshly extracted ones.
- Entries that exist in the old file but no longer occur in source are kept
  as obsolete records, unless ``keep_obsolete`` is off.

After writing, every locale file is read back and must hold exactly the
extracted entry count.

Python 3.13+.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from fluenti18n.catalog.models import CatalogEntry, TranslationData
from fluenti18n.catalog.pofile import catalog_path, read_catalog, write_catalog
from fluenti18n.core.plural import parse_icu_plural
from fluenti18n.diagnostics import CatalogConsistencyError
from fluenti18n.enums import MessageType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fluenti18n.core.hashing import HashGenerator
    from fluenti18n.extraction.models import DiscoveredMessage, ExtractionResult

__all__ = [
    "CatalogGenerationSummary",
    "CatalogGenerator",
    "LocaleCatalogSummary",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocaleCatalogSummary:
    """Outcome of writing one locale's catalog.

    Attributes:
        locale: Locale code
        path: Written PO file
        entry_count: Active entries written
        translated_count: Active entries carrying a translation
        new_count: Entries not present in the previous file
        obsolete_count: Obsolete entries kept in the file
    """

    locale: str
    path: Path
    entry_count: int
    translated_count: int
    new_count: int
    obsolete_count: int


@dataclass(frozen=True, slots=True)
class CatalogGenerationSummary:
    """Outcome of a generation run across all locales."""

    entry_count: int
    locales: tuple[LocaleCatalogSummary, ...]

    @property
    def files(self) -> tuple[Path, ...]:
        """Every written catalog file."""
        return tuple(summary.path for summary in self.locales)

    @property
    def total_obsolete(self) -> int:
        return sum(summary.obsolete_count for summary in self.locales)

    def for_locale(self, locale: str) -> LocaleCatalogSummary | None:
        """Summary of one locale, if it was generated."""
        return next((s for s in self.locales if s.locale == locale), None)


class CatalogGenerator:
    """Writes and updates per-locale PO catalogs from an extraction result."""

    def __init__(
        self,
        catalog_dir: str | Path,
        supported_locales: Iterable[str],
        default_locale: str,
        *,
        preserve_existing: bool = True,
        keep_obsolete: bool = True,
        hash_generator: HashGenerator | None = None,
    ) -> None:
        """Initialize generator.

        Args:
            catalog_dir: Directory holding messages_<locale>.po files
            supported_locales: Locales to generate (the default locale is always included)
            default_locale: Source language of the natural texts
            preserve_existing: Merge with existing files instead of overwriting
            keep_obsolete: Keep entries that no longer occur in source
            hash_generator: Identifier generator for entries lacking a hash comment
        """
        self.catalog_dir = Path(catalog_dir)
        locales = list(dict.fromkeys(supported_locales))
        if default_locale not in locales:
            locales.insert(0, default_locale)
        self.supported_locales: tuple[str, ...] = tuple(locales)
        self.default_locale = default_locale
        self.preserve_existing = preserve_existing
        self.keep_obsolete = keep_obsolete
        self._hash_generator = hash_generator

    def generate(self, result: ExtractionResult) -> CatalogGenerationSummary:
        """Write one catalog per locale and verify their entry counts.

        Raises:
            CatalogParseError: If an existing catalog cannot be parsed
            CatalogConsistencyError: If a written catalog lost or gained entries
            OSError: If a catalog cannot be written
        """
        self.catalog_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "Generating catalogs for %d message(s) in %s", result.message_count, self.catalog_dir
        )
        summaries = [self._generate_locale(locale, result) for locale in self.supported_locales]
        self.validate_consistency(result.message_count)
        logger.info(
            "Generated %d catalog(s) with %d entries each",
            len(summaries),
            result.message_count,
        )
        return CatalogGenerationSummary(entry_count=result.message_count, locales=tuple(summaries))

    def build_locale(
        self,
        locale: str,
        result: ExtractionResult,
        existing: TranslationData | None = None,
    ) -> TranslationData:
        """Merge result with an existing catalog for locale, without writing."""
        is_default = locale == self.default_locale
        previous: dict[str, CatalogEntry] = {}
        if existing is not None:
            previous.update((entry.identifier, entry) for entry in existing.obsolete)
            previous.update(existing.entries)

        entries = [
            self._entry_for(message, previous.get(message.identifier or ""), is_default=is_default)
            for message in result
        ]
        if self.keep_obsolete and existing is not None:
            entries.extend(
                CatalogEntry(
                    identifier=entry.identifier,
                    original_text=entry.original_text,
                    translation=entry.translation,
                    context=entry.context,
                    plural_forms=entry.plural_forms,
                    translated_forms=entry.translated_forms,
                    flags=entry.flags,
                    user_comments=entry.user_comments,
                    obsolete=True,
                )
                for identifier, entry in previous.items()
                if identifier not in result
            )
        return TranslationData.from_entries(
            locale,
            entries,
            metadata=dict(existing.metadata) if existing is not None else {},
            creation_date=existing.creation_date if existing is not None else None,
            revision_date=existing.revision_date if existing is not None else None,
        )

    def validate_consistency(self, expected: int) -> None:
        """Check every generated catalog holds expected active entries.

        Raises:
            CatalogConsistencyError: On the first catalog with another count
        """
        for locale in self.supported_locales:
            path = catalog_path(self.catalog_dir, locale)
            actual = read_catalog(path, locale, hash_generator=self._hash_generator).entry_count
            if actual != expected:
                msg = f"Catalog {path} has {actual} entries, expected {expected}"
                raise CatalogConsistencyError(msg)

    def _generate_locale(self, locale: str, result: ExtractionResult) -> LocaleCatalogSummary:
        path = catalog_path(self.catalog_dir, locale)
        existing: TranslationData | None = None
        if self.preserve_existing and path.is_file():
            existing = read_catalog(path, locale, hash_generator=self._hash_generator)
            logger.debug("Loaded %d existing entries for %s", existing.entry_count, locale)

        data = self.build_locale(locale, result, existing)
        write_catalog(data, path)
        known = set(existing.entries) if existing is not None else set()
        summary = LocaleCatalogSummary(
            locale=locale,
            path=path,
            entry_count=data.entry_count,
            translated_count=data.translated_count,
            new_count=sum(1 for identifier in data.entries if identifier not in known),
            obsolete_count=len(data.obsolete),
        )
        logger.debug(
            "Wrote %s: %d entries, %d new, %d obsolete",
            path,
            summary.entry_count,
            summary.new_count,
            summary.obsolete_count,
        )
        return summary

    @staticmethod
    def _entry_for(
        message: DiscoveredMessage, previous: CatalogEntry | None, *, is_default: bool
    ) -> CatalogEntry:
        if message.identifier is None:
            msg = f"Message {message.natural_text!r} has no identifier"
            raise ValueError(msg)
        plural_forms = None
        if message.type is MessageType.PLURAL:
            plural_forms = dict(message.plural_forms or parse_icu_plural(message.natural_text))

        if is_default:
            translation = message.natural_text
        elif previous is not None:
            translation = previous.translation
        else:
            translation = ""

        return CatalogEntry(
            identifier=message.identifier,
            original_text=message.natural_text,
            translation=translation,
            context=message.context if message.type is MessageType.CONTEXTUAL else None,
            plural_forms=plural_forms,
            translated_forms=parse_icu_plural(translation) if plural_forms else None,
            source_locations=tuple(message.locations),
            flags=previous.flags if previous is not None else frozenset(),
            user_comments=previous.user_comments if previous is not None else (),
        )
