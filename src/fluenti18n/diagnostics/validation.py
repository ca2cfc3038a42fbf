"""Validation result types for translation catalogs.

Catalog validation reports problems a translator can fix: missing
translations, placeholder mismatches, missing catalog files. Nothing here
raises; callers decide whether issues fail a build.

Python 3.13+.
"""

from dataclasses import dataclass

__all__ = [
    "ValidationIssue",
    "ValidationReport",
]


# Maximum message text shown before truncation when sanitizing
_SANITIZE_MAX_TEXT_LENGTH: int = 80


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One problem found in a locale's catalog.

    Attributes:
        code: Issue code ("missing-translation", "placeholder-mismatch",
            "catalog-not-found")
        locale: Locale whose catalog has the problem
        message: Human-readable description
        identifier: Affected message identifier, if entry-level
        text: Original natural-language text of the entry, if entry-level
    """

    code: str
    locale: str
    message: str
    identifier: str | None = None
    text: str | None = None

    def format(self, *, sanitize: bool = False) -> str:
        """Format issue as a single log-friendly line.

        Args:
            sanitize: Truncate the quoted original text to keep log lines short.
        """
        text = self.text
        if text is not None and sanitize and len(text) > _SANITIZE_MAX_TEXT_LENGTH:
            text = text[:_SANITIZE_MAX_TEXT_LENGTH] + "..."
        where = f" [{self.identifier}]" if self.identifier else ""
        suffix = f" ({text!r})" if text is not None else ""
        return f"{self.locale}{where}: {self.message}{suffix}"


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Immutable aggregate of catalog validation issues.

    Attributes:
        issues: All issues found, in catalog order per locale
    """

    issues: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        """True when no issues were found."""
        return len(self.issues) == 0

    @property
    def issue_count(self) -> int:
        """Total number of issues."""
        return len(self.issues)

    def by_code(self, code: str) -> tuple[ValidationIssue, ...]:
        """Issues with the given code."""
        return tuple(issue for issue in self.issues if issue.code == code)

    def by_locale(self, locale: str) -> tuple[ValidationIssue, ...]:
        """Issues reported for one locale."""
        return tuple(issue for issue in self.issues if issue.locale == locale)

    def merge(self, other: "ValidationReport") -> "ValidationReport":
        """Combine two reports, preserving order."""
        return ValidationReport(issues=self.issues + other.issues)
