"""Pattern-driven source extractors.

Each extractor owns a list of regular expressions supplied by configuration
and turns raw file text into DiscoveredMessage objects. Extraction is purely
textual: nothing here parses Python or template syntax.

Components:
    SourceExtractor - Protocol every extractor satisfies
    PatternExtractor - Shared match loop (group = literal body, decoded; blank skipped)
    MethodCallExtractor - Call sites, contextual calls and plural builder chains
    AnnotationExtractor - Decorator/annotation literals
    TemplateExtractor - Template expressions

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol

from fluenti18n.constants import (
    CONTEXT_MARKER,
    DEFAULT_ANNOTATION_PATTERNS,
    DEFAULT_CALL_PATTERNS,
    DEFAULT_CONTEXT_PATTERN,
    DEFAULT_PLURAL_MARKER,
    DEFAULT_TEMPLATE_PATTERNS,
    SOURCE_EXTENSIONS,
    TEMPLATE_EXTENSIONS,
)
from fluenti18n.enums import MessageType
from fluenti18n.extraction.config import compile_patterns
from fluenti18n.extraction.literals import decode_literal
from fluenti18n.extraction.models import DiscoveredMessage, SourceLocation
from fluenti18n.extraction.plural_blocks import PluralBlockScanner

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fluenti18n.extraction.config import ExtractionConfig

__all__ = [
    "AnnotationExtractor",
    "MethodCallExtractor",
    "PatternExtractor",
    "SourceExtractor",
    "TemplateExtractor",
    "default_extractors",
]

logger = logging.getLogger(__name__)


class SourceExtractor(Protocol):
    """Protocol for file content scanners."""

    def can_process(self, path: Path) -> bool:
        """True if this extractor handles the given file."""

    def extract(self, content: str, file_path: str) -> list[DiscoveredMessage]:
        """Messages found in content, each carrying one location in file_path."""


def _first_group(match: re.Match[str]) -> str | None:
    return next((group for group in match.groups() if group is not None), None)


class PatternExtractor:
    """Base extractor: every match of every pattern becomes a message.

    The first participating capturing group is the body of a string literal;
    its escapes are decoded to give the natural text. Matches whose text is
    blank are skipped. Subclasses set ``message_type`` and may
    refine a match through ``_build_message``.
    """

    message_type: ClassVar[MessageType] = MessageType.SIMPLE
    pattern_kind: ClassVar[str] = "extraction"

    __slots__ = ("_extensions", "_patterns")

    def __init__(self, patterns: Iterable[str], extensions: Iterable[str]) -> None:
        """Compile patterns once.

        Raises:
            InvalidPatternError: If a pattern is malformed
        """
        self._patterns = compile_patterns(patterns, kind=self.pattern_kind)
        self._extensions = frozenset(ext.lower() for ext in extensions)

    @property
    def patterns(self) -> tuple[re.Pattern[str], ...]:
        """Compiled patterns, in configuration order."""
        return self._patterns

    def can_process(self, path: Path) -> bool:
        return Path(path).suffix.lower() in self._extensions

    def extract(self, content: str, file_path: str) -> list[DiscoveredMessage]:
        return self._extract_matches(content, file_path, skip_lines=frozenset())

    def _extract_matches(
        self, content: str, file_path: str, *, skip_lines: set[int] | frozenset[int]
    ) -> list[DiscoveredMessage]:
        messages: list[DiscoveredMessage] = []
        for pattern in self._patterns:
            for match in pattern.finditer(content):
                raw = _first_group(match)
                if raw is None:
                    continue
                text = decode_literal(raw)
                if not text.strip():
                    continue
                location = SourceLocation.from_offset(file_path, content, match.start())
                if location.line in skip_lines:
                    continue
                message = self._build_message(text, match)
                message.add_location(location)
                messages.append(message)
        return messages

    def _build_message(self, text: str, match: re.Match[str]) -> DiscoveredMessage:  # noqa: ARG002
        return DiscoveredMessage(natural_text=text, type=self.message_type)


class MethodCallExtractor(PatternExtractor):
    """Extracts ``i18n.translate("...")``-style calls and plural builder chains.

    A match whose text contains ``context(`` is CONTEXTUAL and its label is
    read from the same span with the context pattern. Plural blocks are
    folded first; plain matches on any line a block covers are skipped so
    form texts are never counted twice.
    """

    pattern_kind = "call"

    __slots__ = ("_context_pattern", "_plural_scanner")

    def __init__(
        self,
        patterns: Iterable[str] = DEFAULT_CALL_PATTERNS,
        extensions: Iterable[str] = SOURCE_EXTENSIONS,
        *,
        context_pattern: str = DEFAULT_CONTEXT_PATTERN,
        plural_marker: str = DEFAULT_PLURAL_MARKER,
    ) -> None:
        super().__init__(patterns, extensions)
        self._context_pattern = compile_patterns((context_pattern,), kind="context")[0]
        self._plural_scanner = PluralBlockScanner(plural_marker)

    def extract(self, content: str, file_path: str) -> list[DiscoveredMessage]:
        plural_messages, covered = self._plural_scanner.scan(content, file_path)
        return plural_messages + self._extract_matches(content, file_path, skip_lines=covered)

    def _build_message(self, text: str, match: re.Match[str]) -> DiscoveredMessage:
        span = match.group(0)
        if CONTEXT_MARKER in span:
            label = self._context_pattern.search(span)
            if label is not None and label.group(1):
                return DiscoveredMessage(
                    natural_text=text, context=label.group(1), type=MessageType.CONTEXTUAL
                )
            logger.debug("Context label not found in %r; treating as simple", span)
        return DiscoveredMessage(natural_text=text, type=MessageType.SIMPLE)


class AnnotationExtractor(PatternExtractor):
    """Extracts decorator literals such as ``@translatable("Order status")``."""

    message_type = MessageType.ANNOTATION
    pattern_kind = "annotation"

    __slots__ = ()

    def __init__(
        self,
        patterns: Iterable[str] = DEFAULT_ANNOTATION_PATTERNS,
        extensions: Iterable[str] = SOURCE_EXTENSIONS,
    ) -> None:
        super().__init__(patterns, extensions)


class TemplateExtractor(PatternExtractor):
    """Extracts template expressions such as ``{{ _('Welcome') }}``."""

    pattern_kind = "template"

    __slots__ = ()

    def __init__(
        self,
        patterns: Iterable[str] = DEFAULT_TEMPLATE_PATTERNS,
        extensions: Iterable[str] = TEMPLATE_EXTENSIONS,
    ) -> None:
        super().__init__(patterns, extensions)


def default_extractors(config: ExtractionConfig) -> tuple[SourceExtractor, ...]:
    """Call, annotation and template extractors built from config."""
    return (
        MethodCallExtractor(
            config.call_patterns,
            config.source_extensions,
            context_pattern=config.context_pattern,
            plural_marker=config.plural_marker,
        ),
        AnnotationExtractor(config.annotation_patterns, config.source_extensions),
        TemplateExtractor(config.template_patterns, config.template_extensions),
    )
