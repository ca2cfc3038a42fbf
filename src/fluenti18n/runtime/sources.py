"""Runtime message sources.

A message source maps ``(identifier, locale)`` to a translation, backed by
the artifacts the compiler writes. All sources share one resolution rule:
an identifier that is absent, or whose translation is empty, is reported
as not found. A source never substitutes another locale's text; fallback
is the facade's job.

Loading:
    Artifacts load lazily on first lookup or eagerly through ``warm_up``.
    Each locale's table is cached behind a readers-writer lock. An optional
    TTL expires tables and an optional auto-reload checks the artifact's
    modification time at most once per interval. Both are off by default,
    so no file I/O happens on the lookup path once a locale is loaded.

Artifact lookup:
    ``<base_path>/messages_<locale>.<ext>``; a regional locale without its
    own artifact is served by its base language (``pt_BR`` -> ``pt``).

Load failures:
    A corrupt artifact is logged at ERROR and reported through the
    LoadSummary returned by ``warm_up`` / ``get_load_summary``; lookups for
    that locale then resolve as not found.

Python 3.13+.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar, Protocol, cast

from fluenti18n.compiler.codecs import artifact_filename, get_codec
from fluenti18n.constants import ARTIFACT_BASENAME, DEFAULT_AUTO_RELOAD_INTERVAL, DEFAULT_ENCODING
from fluenti18n.diagnostics import ArtifactFormatError
from fluenti18n.enums import LoadStatus, OutputFormat
from fluenti18n.locale_utils import locale_candidates
from fluenti18n.runtime.rwlock import RWLock

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from fluenti18n.compiler.binary_codec import BinaryCodec
    from fluenti18n.compiler.codecs import ArtifactCodec

__all__ = [
    "ArtifactMessageSource",
    "BinaryMessageSource",
    "JsonMessageSource",
    "LoadSummary",
    "LocaleLoadResult",
    "MessageSource",
    "NullMessageSource",
    "PropertiesMessageSource",
    "TranslationResult",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """Outcome of one lookup.

    Attributes:
        found: True if a non-empty translation exists
        translation: The translation, "" when not found
    """

    found: bool
    translation: str = ""

    @classmethod
    def hit(cls, translation: str) -> TranslationResult:
        return cls(found=True, translation=translation)

    @classmethod
    def miss(cls) -> TranslationResult:
        return _MISS


_MISS = TranslationResult(found=False)


@dataclass(frozen=True, slots=True)
class LocaleLoadResult:
    """Result of loading one locale's artifact.

    Attributes:
        locale: Requested locale
        status: success, not_found or error
        entry_count: Entries loaded (0 unless successful)
        error: Exception if status is ERROR
        source_path: Artifact path, when one was found
    """

    locale: str
    status: LoadStatus
    entry_count: int = 0
    error: Exception | None = None
    source_path: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of locale load results.

    Example:
        >>> summary = source.warm_up()
        >>> for result in summary.get_errors():
        ...     print(f"{result.locale}: {result.error}")
    """

    results: tuple[LocaleLoadResult, ...] = ()

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        return sum(1 for r in self.results if r.is_error)

    @property
    def has_errors(self) -> bool:
        return self.errors > 0

    @property
    def all_successful(self) -> bool:
        """True if every locale loaded: no errors and nothing missing."""
        return self.errors == 0 and self.not_found == 0

    @property
    def total_entries(self) -> int:
        return sum(r.entry_count for r in self.results)

    def get_errors(self) -> tuple[LocaleLoadResult, ...]:
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[LocaleLoadResult, ...]:
        return tuple(r for r in self.results if r.is_not_found)

    def get_by_locale(self, locale: str) -> LocaleLoadResult | None:
        return next((r for r in self.results if r.locale == locale), None)


class MessageSource(Protocol):
    """Protocol for runtime translation lookup."""

    @property
    def supported_locales(self) -> tuple[str, ...]:
        """Locales this source can serve."""

    def resolve(self, identifier: str, fallback_text: str, locale: str) -> TranslationResult:
        """Look up identifier in locale. fallback_text is informational only."""

    def exists(self, identifier: str, locale: str) -> bool:
        """True if identifier has a non-empty translation in locale."""

    def warm_up(self, locales: Iterable[str] | None = None) -> LoadSummary:
        """Load locales eagerly (all supported locales when None)."""

    def reload(self) -> LoadSummary:
        """Drop cached tables and load the previously loaded locales again."""


@dataclass(slots=True)
class _LocaleTable:
    translations: Mapping[str, str]
    loaded_at: float
    checked_at: float
    path: Path | None
    mtime: float | None


class ArtifactMessageSource:
    """Message source backed by compiler artifacts of one format.

    Subclasses set ``output_format``.

    Thread Safety:
        Lookups take the read lock; loading and reloading take the write
        lock. Safe to share across request threads.
    """

    output_format: ClassVar[OutputFormat]

    def __init__(
        self,
        base_path: str | Path,
        supported_locales: Iterable[str] = (),
        *,
        encoding: str = DEFAULT_ENCODING,
        enable_caching: bool = True,
        cache_timeout_seconds: float = 0.0,
        auto_reload: bool = False,
        auto_reload_interval_seconds: float = DEFAULT_AUTO_RELOAD_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize source.

        Args:
            base_path: Directory holding messages_<locale>.<ext> artifacts
            supported_locales: Locales to serve; discovered from files when empty
            encoding: Text artifact encoding
            enable_caching: Keep loaded tables (False re-reads on every lookup)
            cache_timeout_seconds: Table lifetime; 0 means no expiry
            auto_reload: Reload a table when its artifact changes on disk
            auto_reload_interval_seconds: Minimum time between change checks
            clock: Monotonic time source
        """
        if cache_timeout_seconds < 0:
            msg = f"cache_timeout_seconds must be >= 0, got {cache_timeout_seconds}"
            raise ValueError(msg)
        if auto_reload_interval_seconds < 0:
            msg = f"auto_reload_interval_seconds must be >= 0, got {auto_reload_interval_seconds}"
            raise ValueError(msg)
        self.base_path = Path(base_path)
        self._configured_locales = tuple(dict.fromkeys(supported_locales))
        self._codec: ArtifactCodec = get_codec(self.output_format, encoding)
        self._enable_caching = enable_caching
        self._cache_timeout = cache_timeout_seconds
        self._auto_reload = auto_reload
        self._auto_reload_interval = auto_reload_interval_seconds
        self._clock = clock
        self._lock = RWLock()
        self._tables: dict[str, _LocaleTable] = {}
        self._results: dict[str, LocaleLoadResult] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_path={str(self.base_path)!r})"

    # ------------------------------------------------------------------ lookup

    @property
    def supported_locales(self) -> tuple[str, ...]:
        if self._configured_locales:
            return self._configured_locales
        return self.discover_locales(self.base_path)

    def resolve(
        self, identifier: str, fallback_text: str, locale: str  # noqa: ARG002
    ) -> TranslationResult:
        translation = self._table(locale).translations.get(identifier)
        if translation:
            return TranslationResult.hit(translation)
        return TranslationResult.miss()

    def exists(self, identifier: str, locale: str) -> bool:
        return bool(self._table(locale).translations.get(identifier))

    def translations(self, locale: str) -> Mapping[str, str]:
        """Read-only view of every loaded entry for locale."""
        return self._table(locale).translations

    # ----------------------------------------------------------------- loading

    def warm_up(self, locales: Iterable[str] | None = None) -> LoadSummary:
        targets = tuple(locales) if locales is not None else self.supported_locales
        results = tuple(self._load(locale, force=True)[1] for locale in targets)
        summary = LoadSummary(results)
        logger.info("Warmed up %s: %r", type(self).__name__, summary)
        return summary

    def reload(self) -> LoadSummary:
        with self._lock.write():
            loaded = tuple(self._tables) or tuple(self._results)
            self._tables.clear()
            self._results.clear()
        logger.info("Reloading %d locale(s) from %s", len(loaded), self.base_path)
        return self.warm_up(loaded)

    def get_load_summary(self) -> LoadSummary:
        """Results of the most recent load of every locale touched so far."""
        with self._lock.read():
            return LoadSummary(tuple(self._results.values()))

    def artifact_path(self, locale: str) -> Path | None:
        """First existing artifact for locale or its base language."""
        for candidate in locale_candidates(locale):
            path = self.base_path / artifact_filename(candidate, self.output_format)
            if path.is_file():
                return path
        return None

    @classmethod
    def discover_locales(cls, base_path: str | Path) -> tuple[str, ...]:
        """Locales with an artifact of this format in base_path, sorted."""
        base = Path(base_path)
        if not base.is_dir():
            return ()
        prefix = f"{ARTIFACT_BASENAME}_"
        suffix = f".{cls.output_format.extension}"
        return tuple(
            sorted(
                path.name[len(prefix) : -len(suffix)]
                for path in base.glob(f"{prefix}*{suffix}")
                if path.is_file()
            )
        )

    @classmethod
    def has_artifacts(cls, base_path: str | Path) -> bool:
        """True if base_path holds at least one artifact of this format."""
        return bool(cls.discover_locales(base_path))

    def _read_translations(self, path: Path) -> dict[str, str]:
        return self._codec.read(path)

    def _table(self, locale: str) -> _LocaleTable:
        with self._lock.read():
            table = self._tables.get(locale)
        if table is not None and not self._is_stale(table):
            return table
        return self._load(locale, stale=table)[0]

    def _is_stale(self, table: _LocaleTable) -> bool:
        now = self._clock()
        if self._cache_timeout and now - table.loaded_at >= self._cache_timeout:
            return True
        if not self._auto_reload or now - table.checked_at < self._auto_reload_interval:
            return False
        table.checked_at = now
        path = table.path
        current = path if path is not None and path.is_file() else None
        if current is None:
            return path is not None
        try:
            return current.stat().st_mtime != table.mtime
        except OSError:
            return True

    def _load(
        self, locale: str, *, force: bool = False, stale: _LocaleTable | None = None
    ) -> tuple[_LocaleTable, LocaleLoadResult]:
        with self._lock.write():
            if not force:
                # Another thread may have reloaded while we waited for the lock.
                table = self._tables.get(locale)
                if table is not None and table is not stale and not self._is_stale(table):
                    return table, self._results[locale]
            table, result = self._read_locale(locale)
            self._results[locale] = result
            if self._enable_caching:
                self._tables[locale] = table
            return table, result

    def _read_locale(self, locale: str) -> tuple[_LocaleTable, LocaleLoadResult]:
        now = self._clock()
        path = self.artifact_path(locale)
        if path is None:
            logger.debug(
                "No %s artifact for locale %s in %s", self.output_format, locale, self.base_path
            )
            empty = _LocaleTable(MappingProxyType({}), now, now, None, None)
            return empty, LocaleLoadResult(locale, LoadStatus.NOT_FOUND)

        try:
            mtime: float | None = path.stat().st_mtime
        except OSError:
            mtime = None
        try:
            translations = self._read_translations(path)
        except FileNotFoundError:
            empty = _LocaleTable(MappingProxyType({}), now, now, None, None)
            return empty, LocaleLoadResult(locale, LoadStatus.NOT_FOUND)
        except (ArtifactFormatError, OSError) as e:
            logger.error(
                "Cannot load %s artifact %s for %s: %s", self.output_format, path, locale, e
            )
            empty = _LocaleTable(MappingProxyType({}), now, now, path, mtime)
            return empty, LocaleLoadResult(
                locale, LoadStatus.ERROR, error=e, source_path=str(path)
            )

        logger.debug("Loaded %d translations for %s from %s", len(translations), locale, path)
        table = _LocaleTable(MappingProxyType(translations), now, now, path, mtime)
        return table, LocaleLoadResult(
            locale, LoadStatus.SUCCESS, entry_count=len(translations), source_path=str(path)
        )


class JsonMessageSource(ArtifactMessageSource):
    """Serves ``messages_<locale>.json`` artifacts."""

    output_format = OutputFormat.JSON


class PropertiesMessageSource(ArtifactMessageSource):
    """Serves ``messages_<locale>.properties`` artifacts."""

    output_format = OutputFormat.PROPERTIES


class BinaryMessageSource(ArtifactMessageSource):
    """Serves ``messages_<locale>.bin`` artifacts."""

    output_format = OutputFormat.BINARY

    def _read_translations(self, path: Path) -> dict[str, str]:
        codec = cast("BinaryCodec", self._codec)
        artifact = codec.read_artifact(path)
        expected = path.name.removeprefix(f"{ARTIFACT_BASENAME}_").removesuffix(".bin")
        if artifact.locale != expected:
            logger.debug("Artifact %s declares locale %s", path, artifact.locale)
        return artifact.translations


class NullMessageSource:
    """Source with no translations: every lookup misses."""

    __slots__ = ()

    @property
    def supported_locales(self) -> tuple[str, ...]:
        return ()

    def resolve(
        self, identifier: str, fallback_text: str, locale: str  # noqa: ARG002
    ) -> TranslationResult:
        return TranslationResult.miss()

    def exists(self, identifier: str, locale: str) -> bool:  # noqa: ARG002
        return False

    def warm_up(self, locales: Iterable[str] | None = None) -> LoadSummary:
        return LoadSummary(
            tuple(LocaleLoadResult(locale, LoadStatus.NOT_FOUND) for locale in locales or ())
        )

    def reload(self) -> LoadSummary:
        return LoadSummary()

    def get_load_summary(self) -> LoadSummary:
        return LoadSummary()
