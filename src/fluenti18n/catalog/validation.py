"""Catalog validation.

Reports problems translators can fix before a release:

- ``missing-translation``: a non-default locale entry whose translation is
  empty or identical to the original text
- ``placeholder-mismatch``: translation and original disagree on the number
  of ``{n}`` / ``{}`` placeholders
- ``catalog-not-found``: a configured locale has no catalog file

Validation never raises for catalog content; callers decide whether a
non-empty report fails their build.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from fluenti18n.catalog.pofile import catalog_path, read_catalog
from fluenti18n.diagnostics import ValidationIssue, ValidationReport
from fluenti18n.enums import PluralForm

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fluenti18n.catalog.models import CatalogEntry, TranslationData

__all__ = [
    "CATALOG_NOT_FOUND",
    "MISSING_TRANSLATION",
    "PLACEHOLDER_MISMATCH",
    "count_placeholders",
    "validate_catalog",
    "validate_catalogs",
]

logger = logging.getLogger(__name__)

MISSING_TRANSLATION = "missing-translation"
PLACEHOLDER_MISMATCH = "placeholder-mismatch"
CATALOG_NOT_FOUND = "catalog-not-found"

_INDEXED_PLACEHOLDER = re.compile(r"\{\d")


def count_placeholders(text: str) -> int:
    """Number of ``{n...}`` and ``{}`` placeholders in text."""
    return len(_INDEXED_PLACEHOLDER.findall(text)) + text.count("{}")


def _placeholder_texts(entry: CatalogEntry) -> tuple[str, str]:
    # Form counts vary by locale; compare the "other" forms.
    if entry.is_plural and entry.plural_forms and entry.translated_forms:
        original = entry.plural_forms.get(PluralForm.OTHER, "")
        translated = entry.translated_forms.get(PluralForm.OTHER, "")
        if original and translated:
            return original, translated
    return entry.original_text, entry.translation


def validate_catalog(
    data: TranslationData,
    default_locale: str,
    *,
    check_missing: bool = True,
    check_placeholders: bool = True,
) -> ValidationReport:
    """Validate one locale's catalog.

    The default locale is never reported for missing translations: its
    natural text is its translation.
    """
    issues: list[ValidationIssue] = []
    is_default = data.locale == default_locale
    for entry in data:
        if not entry.has_translation or (
            not is_default and entry.translation == entry.original_text
        ):
            if check_missing and not is_default:
                issues.append(
                    ValidationIssue(
                        code=MISSING_TRANSLATION,
                        locale=data.locale,
                        message="Missing translation",
                        identifier=entry.identifier,
                        text=entry.original_text,
                    )
                )
            continue
        if check_placeholders:
            original, translated = _placeholder_texts(entry)
            expected = count_placeholders(original)
            actual = count_placeholders(translated)
            if expected != actual:
                issues.append(
                    ValidationIssue(
                        code=PLACEHOLDER_MISMATCH,
                        locale=data.locale,
                        message=f"Placeholder count mismatch: expected {expected}, found {actual}",
                        identifier=entry.identifier,
                        text=entry.original_text,
                    )
                )
    return ValidationReport(issues=tuple(issues))


def validate_catalogs(
    catalog_dir: str | Path,
    locales: Iterable[str],
    default_locale: str,
    *,
    check_missing: bool = True,
    check_placeholders: bool = True,
) -> ValidationReport:
    """Validate the catalog of every locale in catalog_dir.

    Raises:
        CatalogParseError: If a catalog file is malformed
    """
    report = ValidationReport()
    for locale in locales:
        path = catalog_path(catalog_dir, locale)
        if not path.is_file():
            report = report.merge(
                ValidationReport(
                    issues=(
                        ValidationIssue(
                            code=CATALOG_NOT_FOUND,
                            locale=locale,
                            message=f"Catalog not found: {path}",
                        ),
                    )
                )
            )
            continue
        report = report.merge(
            validate_catalog(
                read_catalog(path, locale),
                default_locale,
                check_missing=check_missing,
                check_placeholders=check_placeholders,
            )
        )
    logger.info("Validated catalogs in %s: %d issue(s)", Path(catalog_dir), report.issue_count)
    return report
