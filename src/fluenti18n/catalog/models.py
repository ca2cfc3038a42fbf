"""Translation catalog data model.

CatalogEntry is one translation unit as stored in a locale's PO file.
TranslationData is the parsed, immutable view of one locale's catalog that
the compiler and every output codec consume.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from fluenti18n.core.plural import is_icu_plural

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from datetime import datetime

    from fluenti18n.enums import PluralForm
    from fluenti18n.extraction.models import SourceLocation

__all__ = ["CatalogEntry", "TranslationData"]


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One translation unit.

    Attributes:
        identifier: Content identifier of the original text
        original_text: Natural text (canonical plural string for plural entries)
        translation: Translated text, "" when untranslated
        context: Context label, if the message is contextual
        plural_forms: Original form texts for plural entries
        translated_forms: Translated form texts for plural entries
        source_locations: Where the original text occurs
        flags: Gettext flags ("fuzzy", ...)
        user_comments: Translator comments
        obsolete: True when the message no longer occurs in source
    """

    identifier: str
    original_text: str
    translation: str = ""
    context: str | None = None
    plural_forms: Mapping[PluralForm, str] | None = None
    translated_forms: Mapping[PluralForm, str] | None = None
    source_locations: tuple[SourceLocation, ...] = ()
    flags: frozenset[str] = frozenset()
    user_comments: tuple[str, ...] = ()
    obsolete: bool = False

    @property
    def has_translation(self) -> bool:
        """True if the translation field holds non-blank text."""
        return bool(self.translation.strip())

    @property
    def is_plural(self) -> bool:
        """True for plural entries."""
        return self.plural_forms is not None or is_icu_plural(self.original_text)

    @property
    def is_fuzzy(self) -> bool:
        return "fuzzy" in self.flags

    def with_translation(self, translation: str) -> CatalogEntry:
        """Copy of this entry with a different translation."""
        return replace(self, translation=translation)


@dataclass(frozen=True, slots=True)
class TranslationData:
    """Parsed catalog for one locale.

    Attributes:
        locale: Locale code of the catalog
        entries: identifier -> active entry, ordered by identifier
        obsolete: Entries kept for reference that no longer occur in source
        metadata: PO header fields
        creation_date: Catalog creation date from the header, if present
        revision_date: Revision date from the header (a datetime, or the
            gettext placeholder string)
    """

    locale: str
    entries: Mapping[str, CatalogEntry] = field(default_factory=dict)
    obsolete: tuple[CatalogEntry, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=dict)
    creation_date: datetime | None = None
    revision_date: datetime | str | None = None

    def __post_init__(self) -> None:
        ordered = {identifier: self.entries[identifier] for identifier in sorted(self.entries)}
        object.__setattr__(self, "entries", MappingProxyType(ordered))
        object.__setattr__(
            self, "obsolete", tuple(sorted(self.obsolete, key=lambda e: e.identifier))
        )
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def from_entries(
        cls, locale: str, entries: Iterable[CatalogEntry], **kwargs: object
    ) -> TranslationData:
        """Build from an entry iterable, splitting off obsolete entries.

        Later entries win when identifiers repeat.
        """
        active: dict[str, CatalogEntry] = {}
        obsolete: dict[str, CatalogEntry] = {}
        for entry in entries:
            (obsolete if entry.obsolete else active)[entry.identifier] = entry
        for identifier in active:
            obsolete.pop(identifier, None)
        return cls(locale, active, tuple(obsolete.values()), **kwargs)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.entries

    def get(self, identifier: str) -> CatalogEntry | None:
        """Active entry with the given identifier."""
        return self.entries.get(identifier)

    def has_translation(self, identifier: str) -> bool:
        """True if identifier has a non-blank translation."""
        entry = self.entries.get(identifier)
        return entry is not None and entry.has_translation

    @property
    def entry_count(self) -> int:
        """Number of active entries."""
        return len(self.entries)

    @property
    def translated_count(self) -> int:
        """Number of active entries with a translation."""
        return sum(1 for entry in self.entries.values() if entry.has_translation)
