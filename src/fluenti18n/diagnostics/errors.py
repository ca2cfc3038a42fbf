"""fluenti18n exception hierarchy.

Errors follow the pipeline's taxonomy:
- Input errors: unreadable source file, malformed pattern configuration
- Format errors: bad binary artifact header, catalog parse failure
- Formatting errors: argument/template mismatch at translate time
- Configuration errors: invalid values in a configuration file

Resolution misses are not errors: they take the documented fallback path.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from pathlib import Path


class FluentI18nError(Exception):
    """Base exception for all fluenti18n errors."""


class ExtractionError(FluentI18nError):
    """Source file could not be scanned.

    Attributes:
        file_path: Path of the file whose extraction was aborted
    """

    def __init__(self, message: str, *, file_path: str | Path | None = None) -> None:
        super().__init__(message)
        self.file_path = str(file_path) if file_path is not None else None


class InvalidPatternError(ExtractionError):
    """An extraction pattern from configuration does not compile."""


class CatalogError(FluentI18nError):
    """Base class for translation catalog (PO file) errors."""


class CatalogParseError(CatalogError):
    """Catalog file is malformed. Fatal for that file.

    Attributes:
        path: Catalog file path, if known
        line: 1-based line number of the offending record, if known
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        line: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None
        self.line = line


class CatalogConsistencyError(CatalogError):
    """Generated catalogs disagree on the number of entries."""


class ArtifactFormatError(FluentI18nError):
    """Runtime artifact content cannot be trusted.

    Distinct from FileNotFoundError, which signals an absent artifact.

    Attributes:
        path: Artifact path, if the payload came from a file
    """

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class UnsupportedArtifactVersionError(ArtifactFormatError):
    """Binary artifact carries a version this reader does not understand."""

    def __init__(
        self, version: int, supported: int, *, path: str | Path | None = None
    ) -> None:
        msg = f"Unsupported binary artifact version {version} (supported: {supported})"
        super().__init__(msg, path=path)
        self.version = version


class TruncatedArtifactError(ArtifactFormatError):
    """Binary artifact ends before its declared content (or has trailing bytes)."""


class FormattingError(FluentI18nError):
    """Template arguments could not be formatted with locale rules.

    Caught inside the formatter, which falls back to simple substitution.

    Attributes:
        fallback_value: Text to use when the caller cannot recover
    """

    def __init__(self, message: str, fallback_value: str = "") -> None:
        super().__init__(message)
        self.fallback_value = fallback_value


class ConfigError(FluentI18nError):
    """Configuration value is invalid."""


__all__ = [
    "ArtifactFormatError",
    "CatalogConsistencyError",
    "CatalogError",
    "CatalogParseError",
    "ConfigError",
    "ExtractionError",
    "FluentI18nError",
    "FormattingError",
    "InvalidPatternError",
    "TruncatedArtifactError",
    "UnsupportedArtifactVersionError",
]
