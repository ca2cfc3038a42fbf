"""Compilation result types.

A compile run never raises for per-locale problems. Missing catalogs,
parse failures and untranslated entries are collected into an immutable
CompilationResult, so callers can tell "succeeded with N missing catalogs"
from "failed with errors" and decide which of them fails their build.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from fluenti18n.diagnostics import ValidationIssue
    from fluenti18n.enums import OutputFormat

__all__ = [
    "CompilationFailure",
    "CompilationResult",
    "GeneratedArtifact",
    "OverallTranslationStats",
    "TranslationStats",
]


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100.0 if whole else 100.0


@dataclass(frozen=True, slots=True)
class TranslationStats:
    """Completeness of one locale's catalog.

    Attributes:
        locale: Locale code
        total: Active entries in the catalog
        translated: Entries with a translation (all of them for the default locale)
    """

    locale: str
    total: int
    translated: int

    @property
    def missing(self) -> int:
        """Entries without a translation."""
        return self.total - self.translated

    @property
    def completion_percentage(self) -> float:
        """Translated share in percent (100.0 for an empty catalog)."""
        return _percentage(self.translated, self.total)

    def __str__(self) -> str:
        return (
            f"{self.locale}: {self.translated}/{self.total} translated "
            f"({self.completion_percentage:.1f}%)"
        )


@dataclass(frozen=True, slots=True)
class OverallTranslationStats:
    """Completeness across all compiled locales."""

    locale_count: int
    total_entries: int
    translated_entries: int

    @property
    def missing_entries(self) -> int:
        return self.total_entries - self.translated_entries

    @property
    def completion_percentage(self) -> float:
        return _percentage(self.translated_entries, self.total_entries)


@dataclass(frozen=True, slots=True)
class CompilationFailure:
    """A locale whose compilation was aborted.

    Attributes:
        locale: Locale code
        message: Human-readable description
        error: The exception that aborted the locale
    """

    locale: str
    message: str
    error: Exception | None = None

    def __str__(self) -> str:
        return f"{self.locale}: {self.message}"


@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    """One artifact written by the compiler."""

    locale: str
    format: OutputFormat
    path: Path


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """Immutable outcome of a compile run.

    Attributes:
        processed_locales: Locales whose artifacts were written
        generated_files: Every written artifact
        errors: Locales aborted by parse or I/O errors
        missing_catalogs: locale -> expected catalog path, for absent catalogs
        translation_stats: locale -> completeness
        missing_translations: Untranslated entries in non-default locales

    Example:
        >>> result = TranslationCompiler(config).compile()
        >>> if not result.is_successful:
        ...     for failure in result.errors:
        ...         print(failure)
        >>> result.summary("nb")
        'nb: 8/10 translated (80.0%)'
    """

    processed_locales: tuple[str, ...] = ()
    generated_files: tuple[GeneratedArtifact, ...] = ()
    errors: tuple[CompilationFailure, ...] = ()
    missing_catalogs: Mapping[str, Path] = field(default_factory=dict)
    translation_stats: Mapping[str, TranslationStats] = field(default_factory=dict)
    missing_translations: tuple[ValidationIssue, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "missing_catalogs", MappingProxyType(dict(self.missing_catalogs)))
        object.__setattr__(
            self, "translation_stats", MappingProxyType(dict(self.translation_stats))
        )

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"CompilationResult(locales={len(self.processed_locales)}, "
            f"files={self.total_generated_files}, "
            f"errors={len(self.errors)}, "
            f"missing_catalogs={len(self.missing_catalogs)})"
        )

    @property
    def is_successful(self) -> bool:
        """True when no locale was aborted. Missing catalogs do not count."""
        return len(self.errors) == 0

    @property
    def has_missing_catalogs(self) -> bool:
        return len(self.missing_catalogs) > 0

    @property
    def total_generated_files(self) -> int:
        return len(self.generated_files)

    @property
    def overall_stats(self) -> OverallTranslationStats:
        """Totals across every compiled locale."""
        stats = self.translation_stats.values()
        return OverallTranslationStats(
            locale_count=len(stats),
            total_entries=sum(s.total for s in stats),
            translated_entries=sum(s.translated for s in stats),
        )

    def files_for(self, locale: str) -> tuple[Path, ...]:
        """Artifacts written for locale."""
        return tuple(f.path for f in self.generated_files if f.locale == locale)

    def summary(self, locale: str) -> str:
        """One-line completeness summary for locale."""
        stats = self.translation_stats.get(locale)
        if stats is not None:
            return str(stats)
        if locale in self.missing_catalogs:
            return f"{locale}: catalog not found"
        failure = next((e for e in self.errors if e.locale == locale), None)
        if failure is not None:
            return f"{locale}: failed ({failure.message})"
        return f"{locale}: not compiled"
