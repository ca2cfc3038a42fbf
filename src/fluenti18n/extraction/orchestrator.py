"""Source tree extraction.

MessageExtractor walks the configured source roots, runs every extractor
that accepts a file, and merges the discovered messages into one catalog
keyed by content identifier. Repeated literals fold into a single entry
that accumulates locations.

Determinism:
    Files are processed in sorted path order and merged in that order, also
    when they are scanned by a thread pool, so two runs over an unchanged
    tree yield the same identifiers and the same location lists.

Failure handling:
    A file that cannot be read or decoded is recorded as a
    FileExtractionFailure and logged; the rest of the tree is still scanned.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from fluenti18n.core.hashing import Sha256HashGenerator
from fluenti18n.diagnostics import ExtractionError
from fluenti18n.extraction.extractors import default_extractors
from fluenti18n.extraction.models import (
    DiscoveredMessage,
    ExtractionResult,
    FileExtractionFailure,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fluenti18n.core.hashing import HashGenerator
    from fluenti18n.extraction.config import ExtractionConfig
    from fluenti18n.extraction.extractors import SourceExtractor

__all__ = ["MessageExtractor"]

logger = logging.getLogger(__name__)


class MessageExtractor:
    """Extracts and deduplicates translatable messages from a source tree.

    Example:
        >>> config = ExtractionConfig(project_root=root, source_directories=("src",))
        >>> result = MessageExtractor(config).extract()
        >>> result.message_count
        42
    """

    __slots__ = ("_config", "_extractors", "_hash_generator")

    def __init__(
        self,
        config: ExtractionConfig,
        hash_generator: HashGenerator | None = None,
        extractors: Iterable[SourceExtractor] | None = None,
    ) -> None:
        """Initialize extractor.

        Args:
            config: Roots, patterns and locales for the run
            hash_generator: Identifier generator (default: SHA-256)
            extractors: Replaces the configured extractor set when given
        """
        self._config = config
        self._hash_generator: HashGenerator = hash_generator or Sha256HashGenerator()
        if extractors is not None:
            self._extractors: tuple[SourceExtractor, ...] = tuple(extractors)
        else:
            self._extractors = (*default_extractors(config), *config.custom_extractors)

    @property
    def config(self) -> ExtractionConfig:
        """Configuration of this extractor."""
        return self._config

    @property
    def extractors(self) -> tuple[SourceExtractor, ...]:
        """Extractors applied to each file."""
        return self._extractors

    def discover_files(self) -> list[Path]:
        """Files under the source roots whose name matches a file pattern, sorted."""
        found: set[Path] = set()
        for root in self._config.resolved_source_directories():
            if not root.is_dir():
                logger.debug("Source directory %s does not exist, skipping", root)
                continue
            found.update(
                path
                for path in root.rglob("*")
                if path.is_file() and self._config.matches_file(path.name)
            )
        return sorted(found)

    def extract(self) -> ExtractionResult:
        """Scan every discovered file and merge the results.

        Returns:
            ExtractionResult keyed by identifier, with per-file failures
        """
        files = self.discover_files()
        logger.debug("Scanning %d file(s) with %d worker(s)", len(files), self._config.max_workers)

        if self._config.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self._config.max_workers) as executor:
                outcomes = list(executor.map(self._scan_file, files))
        else:
            outcomes = [self._scan_file(path) for path in files]

        catalog: dict[str, DiscoveredMessage] = {}
        failures: list[FileExtractionFailure] = []
        scanned = 0
        for messages, failure in outcomes:
            if failure is not None:
                failures.append(failure)
                continue
            scanned += 1
            self._merge(catalog, messages)

        result = self._build_result(catalog, scanned, failures)
        logger.info(
            "Extracted %d message(s) with %d occurrence(s) from %d file(s), %d failure(s)",
            result.message_count,
            result.total_occurrences,
            scanned,
            len(failures),
        )
        return result

    def extract_content(self, content: str, file_path: str) -> ExtractionResult:
        """Run the extractors that accept file_path over in-memory content."""
        catalog: dict[str, DiscoveredMessage] = {}
        self._merge(catalog, self._apply_extractors(content, Path(file_path), file_path))
        return self._build_result(catalog, 1, [])

    def _relative_path(self, path: Path) -> str:
        try:
            return path.relative_to(self._config.project_root).as_posix()
        except ValueError:
            pass
        try:
            return path.resolve().relative_to(self._config.project_root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()

    def _apply_extractors(
        self, content: str, path: Path, relative: str
    ) -> list[DiscoveredMessage]:
        messages: list[DiscoveredMessage] = []
        for extractor in self._extractors:
            if extractor.can_process(path):
                messages.extend(extractor.extract(content, relative))
        return messages

    def _scan_file(
        self, path: Path
    ) -> tuple[list[DiscoveredMessage], FileExtractionFailure | None]:
        relative = self._relative_path(path)
        try:
            content = path.read_text(encoding=self._config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            error = ExtractionError(f"Cannot read {relative}: {e}", file_path=relative)
            error.__cause__ = e
            logger.warning("Skipping %s: %s", relative, e)
            return [], FileExtractionFailure(relative, error)
        messages = self._apply_extractors(content, path, relative)
        logger.debug("Found %d message(s) in %s", len(messages), relative)
        return messages, None

    def _merge(
        self, catalog: dict[str, DiscoveredMessage], messages: Iterable[DiscoveredMessage]
    ) -> None:
        for message in messages:
            text, context = message.hash_input()
            identifier = self._hash_generator.generate(text, context)
            existing = catalog.get(identifier)
            if existing is not None:
                for location in message.locations:
                    existing.add_location(location)
                continue
            message.assign_identifier(identifier)
            catalog[identifier] = message

    def _build_result(
        self,
        catalog: dict[str, DiscoveredMessage],
        scanned: int,
        failures: list[FileExtractionFailure],
    ) -> ExtractionResult:
        ordered = {identifier: catalog[identifier] for identifier in sorted(catalog)}
        return ExtractionResult(
            messages=MappingProxyType(ordered),
            supported_locales=self._config.supported_locales,
            files_scanned=scanned,
            errors=tuple(failures),
        )
