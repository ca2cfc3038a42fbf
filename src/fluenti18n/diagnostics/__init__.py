"""Error types and validation results for fluenti18n.

Python 3.13+. Zero external dependencies.
"""

from .errors import (
    ArtifactFormatError,
    CatalogConsistencyError,
    CatalogError,
    CatalogParseError,
    ConfigError,
    ExtractionError,
    FluentI18nError,
    FormattingError,
    InvalidPatternError,
    TruncatedArtifactError,
    UnsupportedArtifactVersionError,
)
from .validation import ValidationIssue, ValidationReport

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
    "ValidationIssue",
    "ValidationReport",
]
