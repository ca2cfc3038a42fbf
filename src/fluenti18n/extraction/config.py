"""Extraction configuration.

Patterns are plain regular expression strings supplied by configuration and
compiled once when the configuration is built, so a malformed pattern fails
the run up front instead of midway through a tree walk.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from fluenti18n.constants import (
    DEFAULT_ANNOTATION_PATTERNS,
    DEFAULT_CALL_PATTERNS,
    DEFAULT_CONTEXT_PATTERN,
    DEFAULT_ENCODING,
    DEFAULT_FILE_PATTERNS,
    DEFAULT_PLURAL_MARKER,
    DEFAULT_SOURCE_DIRECTORIES,
    DEFAULT_TEMPLATE_PATTERNS,
    SOURCE_EXTENSIONS,
    TEMPLATE_EXTENSIONS,
)
from fluenti18n.diagnostics import InvalidPatternError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fluenti18n.extraction.extractors import SourceExtractor

__all__ = ["ExtractionConfig", "compile_patterns"]


def compile_patterns(patterns: Iterable[str], *, kind: str) -> tuple[re.Pattern[str], ...]:
    """Compile configured patterns, requiring one capturing group each.

    Raises:
        InvalidPatternError: If a pattern does not compile or lacks a group
    """
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            regex = re.compile(pattern)
        except re.error as e:
            msg = f"Invalid {kind} pattern {pattern!r}: {e}"
            raise InvalidPatternError(msg) from e
        if regex.groups < 1:
            msg = f"{kind.capitalize()} pattern {pattern!r} needs a capturing group for the text"
            raise InvalidPatternError(msg)
        compiled.append(regex)
    return tuple(compiled)


@dataclass(frozen=True, slots=True)
class ExtractionConfig:
    """Immutable configuration for a source tree extraction run.

    Relative source directories are resolved against ``project_root``.
    Reported source locations are relative to ``project_root``.

    Attributes:
        project_root: Root that source locations are relativized against
        source_directories: Trees to walk
        supported_locales: Locales catalogs will be generated for
        encoding: Source file encoding
        file_patterns: File-name regexes (fullmatch) selecting files to scan
        call_patterns: Method-call patterns, group 1 = natural text
        annotation_patterns: Decorator/annotation literal patterns
        template_patterns: Template expression patterns
        context_pattern: Pulls the context label out of a contextual call
        plural_marker: Marks the start of a plural builder chain
        source_extensions: Extensions handled by call/annotation extractors
        template_extensions: Extensions handled by the template extractor
        custom_extractors: Additional extractors applied to every file
        max_workers: Threads used to scan files (1 = sequential)

    Example:
        >>> config = ExtractionConfig(
        ...     project_root=Path("."),
        ...     source_directories=(Path("app"),),
        ...     supported_locales=("en", "nb"),
        ... )
    """

    project_root: Path = field(default_factory=Path)
    source_directories: tuple[Path, ...] = tuple(Path(d) for d in DEFAULT_SOURCE_DIRECTORIES)
    supported_locales: tuple[str, ...] = ()
    encoding: str = DEFAULT_ENCODING
    file_patterns: tuple[str, ...] = DEFAULT_FILE_PATTERNS
    call_patterns: tuple[str, ...] = DEFAULT_CALL_PATTERNS
    annotation_patterns: tuple[str, ...] = DEFAULT_ANNOTATION_PATTERNS
    template_patterns: tuple[str, ...] = DEFAULT_TEMPLATE_PATTERNS
    context_pattern: str = DEFAULT_CONTEXT_PATTERN
    plural_marker: str = DEFAULT_PLURAL_MARKER
    source_extensions: tuple[str, ...] = SOURCE_EXTENSIONS
    template_extensions: tuple[str, ...] = TEMPLATE_EXTENSIONS
    custom_extractors: tuple[SourceExtractor, ...] = ()
    max_workers: int = 1
    _file_regexes: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Normalize collections and validate patterns.

        Raises:
            InvalidPatternError: If any pattern is malformed
            ValueError: If max_workers < 1
        """
        object.__setattr__(self, "project_root", Path(self.project_root))
        object.__setattr__(
            self, "source_directories", tuple(Path(d) for d in self.source_directories)
        )
        for name in (
            "supported_locales",
            "file_patterns",
            "call_patterns",
            "annotation_patterns",
            "template_patterns",
            "source_extensions",
            "template_extensions",
            "custom_extractors",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if self.max_workers < 1:
            msg = f"max_workers must be >= 1, got {self.max_workers}"
            raise ValueError(msg)

        file_regexes: list[re.Pattern[str]] = []
        for pattern in self.file_patterns:
            try:
                file_regexes.append(re.compile(pattern))
            except re.error as e:
                msg = f"Invalid file pattern {pattern!r}: {e}"
                raise InvalidPatternError(msg) from e
        object.__setattr__(self, "_file_regexes", tuple(file_regexes))

        # Fail fast on malformed content patterns; extractors compile their own copy.
        compile_patterns(self.call_patterns, kind="call")
        compile_patterns(self.annotation_patterns, kind="annotation")
        compile_patterns(self.template_patterns, kind="template")
        compile_patterns((self.context_pattern,), kind="context")
        try:
            re.compile(self.plural_marker)
        except re.error as e:
            msg = f"Invalid plural marker {self.plural_marker!r}: {e}"
            raise InvalidPatternError(msg) from e

    def matches_file(self, file_name: str) -> bool:
        """True if file_name matches any configured file pattern."""
        return any(regex.fullmatch(file_name) for regex in self._file_regexes)

    def resolved_source_directories(self) -> tuple[Path, ...]:
        """Source directories resolved against the project root."""
        return tuple(
            d if d.is_absolute() else self.project_root / d for d in self.source_directories
        )
