"""Data model for messages discovered in source trees.

Components:
    SourceLocation - Immutable file/line/column of one occurrence
    DiscoveredMessage - One translatable message and all its occurrences
    FileExtractionFailure - A file whose extraction was aborted
    ExtractionResult - Immutable, identifier-keyed result of an extraction run

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fluenti18n.enums import MessageType, PluralForm

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

__all__ = [
    "DiscoveredMessage",
    "ExtractionResult",
    "FileExtractionFailure",
    "SourceLocation",
]


@dataclass(frozen=True, slots=True, order=True)
class SourceLocation:
    """Where a message literal occurs.

    Attributes:
        file_path: Path relative to the project root, posix separators
        line: 1-based line number
        column: 0-based offset within the line (0 when unknown)
    """

    file_path: str
    line: int
    column: int = 0

    def __post_init__(self) -> None:
        """Validate coordinates.

        Raises:
            ValueError: If line < 1 or column < 0
        """
        if self.line < 1:
            msg = f"line must be >= 1, got {self.line}"
            raise ValueError(msg)
        if self.column < 0:
            msg = f"column must be >= 0, got {self.column}"
            raise ValueError(msg)

    def __str__(self) -> str:
        if self.column > 0:
            return f"{self.file_path}:{self.line}:{self.column}"
        return f"{self.file_path}:{self.line}"

    @classmethod
    def from_offset(cls, file_path: str, content: str, offset: int) -> SourceLocation:
        """Location of a character offset within content.

        The line is the number of newlines before offset plus one; the column
        is the offset from the start of that line.
        """
        line_start = content.rfind("\n", 0, offset) + 1
        return cls(file_path, content.count("\n", 0, offset) + 1, offset - line_start)


@dataclass(slots=True)
class DiscoveredMessage:
    """A translatable message found by an extractor.

    Mutable only in the two ways the merge step needs: the identifier is
    assigned once, and locations accumulate as duplicates are folded in.

    Attributes:
        natural_text: Literal text; for PLURAL messages the canonical ICU string
        context: Context label for CONTEXTUAL messages
        type: Message shape
        locations: Occurrences in encounter order
        identifier: Content hash, assigned by the orchestrator
        plural_forms: Folded form texts for PLURAL messages
    """

    natural_text: str
    context: str | None = None
    type: MessageType = MessageType.SIMPLE
    locations: list[SourceLocation] = field(default_factory=list)
    identifier: str | None = None
    plural_forms: dict[PluralForm, str] | None = None

    def add_location(self, location: SourceLocation) -> None:
        """Record another occurrence (duplicates are kept out)."""
        if location not in self.locations:
            self.locations.append(location)

    def assign_identifier(self, identifier: str) -> None:
        """Set the identifier exactly once.

        Raises:
            ValueError: If a different identifier was already assigned
        """
        if self.identifier is not None and self.identifier != identifier:
            msg = (
                f"Identifier already assigned ({self.identifier}); "
                f"refusing to reassign to {identifier}"
            )
            raise ValueError(msg)
        self.identifier = identifier

    def hash_input(self) -> tuple[str, str | None]:
        """(text, context) pair the identifier is computed from.

        Contextual messages hash with their context. Plural messages hash
        their canonical string, everything else hashes the raw text.
        """
        if self.type is MessageType.CONTEXTUAL and self.context:
            return self.natural_text, self.context
        return self.natural_text, None

    @property
    def is_plural(self) -> bool:
        """True for folded plural builder messages."""
        return self.type is MessageType.PLURAL


@dataclass(frozen=True, slots=True)
class FileExtractionFailure:
    """A file whose extraction was aborted.

    Attributes:
        file_path: Path relative to the project root
        error: The exception that stopped extraction
    """

    file_path: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.file_path}: {type(self.error).__name__}: {self.error}"


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Identifier-keyed catalog produced by one extraction run.

    Attributes:
        messages: identifier -> message, ordered by identifier
        supported_locales: Locales catalogs should be generated for
        files_scanned: Number of files read successfully
        errors: Files whose extraction was aborted
    """

    messages: Mapping[str, DiscoveredMessage]
    supported_locales: tuple[str, ...] = ()
    files_scanned: int = 0
    errors: tuple[FileExtractionFailure, ...] = ()

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"ExtractionResult(messages={self.message_count}, "
            f"occurrences={self.total_occurrences}, "
            f"files={self.files_scanned}, "
            f"errors={len(self.errors)})"
        )

    def __iter__(self) -> Iterator[DiscoveredMessage]:
        return iter(self.messages.values())

    def __len__(self) -> int:
        return len(self.messages)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.messages

    def get(self, identifier: str) -> DiscoveredMessage | None:
        """Message with the given identifier, if discovered."""
        return self.messages.get(identifier)

    @property
    def message_count(self) -> int:
        """Number of unique messages."""
        return len(self.messages)

    @property
    def total_occurrences(self) -> int:
        """Number of source locations across all messages."""
        return sum(len(m.locations) for m in self.messages.values())

    @property
    def has_errors(self) -> bool:
        """True if any file could not be processed."""
        return len(self.errors) > 0
