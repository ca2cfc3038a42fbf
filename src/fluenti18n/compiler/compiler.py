"""Catalog compiler: PO catalogs -> runtime artifacts.

For each configured locale the compiler reads ``messages_<locale>.po``,
writes one artifact per configured output format and records completeness
statistics. Compilation works from catalog files alone, without
re-running extraction, and recompiling unchanged catalogs produces
byte-identical artifacts.

Per-locale outcomes:
    catalog absent   -> recorded in missing_catalogs, locale skipped
    parse/I-O error  -> CompilationFailure, locale aborted, others continue
    encode error     -> CompilationFailure, no artifact of the locale written
    compiled         -> artifacts, stats, missing-translation issues

Python 3.13+.
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from fluenti18n.catalog.pofile import catalog_path, read_catalog
from fluenti18n.catalog.validation import MISSING_TRANSLATION
from fluenti18n.compiler.codecs import artifact_entries, get_codec
from fluenti18n.compiler.result import (
    CompilationFailure,
    CompilationResult,
    GeneratedArtifact,
    TranslationStats,
)
from fluenti18n.constants import DEFAULT_ENCODING, DEFAULT_LOCALE
from fluenti18n.diagnostics import CatalogParseError, ValidationIssue
from fluenti18n.enums import MessageSourceType, OutputFormat

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fluenti18n.catalog.models import TranslationData
    from fluenti18n.compiler.codecs import ArtifactCodec
    from fluenti18n.config.settings import FluentConfig
    from fluenti18n.core.hashing import HashGenerator

__all__ = ["CompilerConfig", "TranslationCompiler"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompilerConfig:
    """Immutable compiler configuration.

    Attributes:
        catalog_dir: Directory holding messages_<locale>.po files
        output_dir: Directory receiving runtime artifacts
        supported_locales: Locales to compile, in order
        default_locale: Source language of the natural texts
        output_formats: Artifact formats to write per locale
        encoding: Text encoding of JSON and properties artifacts
    """

    catalog_dir: Path
    output_dir: Path
    supported_locales: tuple[str, ...] = (DEFAULT_LOCALE,)
    default_locale: str = DEFAULT_LOCALE
    output_formats: tuple[OutputFormat, ...] = (OutputFormat.JSON,)
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        """Normalize and validate.

        Raises:
            ValueError: If no locale or no output format is configured
        """
        object.__setattr__(self, "catalog_dir", Path(self.catalog_dir))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(self, "supported_locales", tuple(self.supported_locales))
        object.__setattr__(
            self,
            "output_formats",
            tuple(dict.fromkeys(OutputFormat(fmt) for fmt in self.output_formats)),
        )
        if not self.supported_locales:
            msg = "supported_locales must not be empty"
            raise ValueError(msg)
        if not self.output_formats:
            msg = "output_formats must not be empty"
            raise ValueError(msg)

    @classmethod
    def from_fluent_config(
        cls,
        config: FluentConfig,
        *,
        catalog_dir: str | Path | None = None,
        output_dir: str | Path | None = None,
        output_formats: Iterable[OutputFormat | str] | None = None,
    ) -> CompilerConfig:
        """Derive compiler settings from runtime settings.

        Artifacts go to the runtime base path, catalogs default to its ``po``
        subdirectory, and the format follows the configured message source
        (JSON for auto-detection).
        """
        base = Path(config.base_path)
        if output_formats is None:
            source_type = config.message_source_type
            output_formats = (
                (OutputFormat.JSON,)
                if source_type is MessageSourceType.AUTO
                else (OutputFormat(source_type.value),)
            )
        return cls(
            catalog_dir=Path(catalog_dir) if catalog_dir is not None else base / "po",
            output_dir=Path(output_dir) if output_dir is not None else base,
            supported_locales=config.supported_locales,
            default_locale=config.default_locale,
            output_formats=tuple(OutputFormat(fmt) for fmt in output_formats),
            encoding=config.encoding,
        )


@dataclass(slots=True)
class _ResultBuilder:
    processed: list[str] = field(default_factory=list)
    files: list[GeneratedArtifact] = field(default_factory=list)
    errors: list[CompilationFailure] = field(default_factory=list)
    missing_catalogs: dict[str, Path] = field(default_factory=dict)
    stats: dict[str, TranslationStats] = field(default_factory=dict)
    missing_translations: list[ValidationIssue] = field(default_factory=list)

    def build(self) -> CompilationResult:
        return CompilationResult(
            processed_locales=tuple(self.processed),
            generated_files=tuple(self.files),
            errors=tuple(self.errors),
            missing_catalogs=self.missing_catalogs,
            translation_stats=self.stats,
            missing_translations=tuple(self.missing_translations),
        )


class TranslationCompiler:
    """Compiles PO catalogs into runtime artifacts.

    Example:
        >>> compiler = TranslationCompiler(CompilerConfig(
        ...     catalog_dir=Path("i18n/po"),
        ...     output_dir=Path("i18n"),
        ...     supported_locales=("en", "nb"),
        ...     output_formats=(OutputFormat.JSON, OutputFormat.BINARY),
        ... ))
        >>> result = compiler.compile()
    """

    __slots__ = ("_codecs", "_config", "_hash_generator")

    def __init__(
        self, config: CompilerConfig, *, hash_generator: HashGenerator | None = None
    ) -> None:
        self._config = config
        self._hash_generator = hash_generator
        self._codecs: dict[OutputFormat, ArtifactCodec] = {
            fmt: get_codec(fmt, config.encoding) for fmt in config.output_formats
        }

    @property
    def config(self) -> CompilerConfig:
        return self._config

    def compile(self) -> CompilationResult:
        """Compile every configured locale from its catalog file."""
        builder = _ResultBuilder()
        for locale in self._config.supported_locales:
            path = catalog_path(self._config.catalog_dir, locale)
            if not path.is_file():
                builder.missing_catalogs[locale] = path
                if locale == self._config.default_locale:
                    logger.debug("No catalog for default locale %s at %s", locale, path)
                else:
                    logger.warning("No catalog for locale %s at %s, skipping", locale, path)
                continue
            try:
                data = read_catalog(path, locale, hash_generator=self._hash_generator)
            except CatalogParseError as e:
                self._record_failure(builder, locale, f"Cannot parse {path}: {e}", e)
                continue
            except OSError as e:
                self._record_failure(builder, locale, f"Cannot read {path}: {e}", e)
                continue
            self._compile_locale(builder, locale, data)

        result = builder.build()
        logger.info(
            "Compiled %d locale(s) into %d file(s): %d error(s), %d missing catalog(s)",
            len(result.processed_locales),
            result.total_generated_files,
            len(result.errors),
            len(result.missing_catalogs),
        )
        return result

    def compile_data(self, data: TranslationData) -> CompilationResult:
        """Compile an in-memory catalog for data.locale."""
        builder = _ResultBuilder()
        self._compile_locale(builder, data.locale, data)
        return builder.build()

    def _compile_locale(
        self, builder: _ResultBuilder, locale: str, data: TranslationData
    ) -> None:
        is_default = locale == self._config.default_locale
        try:
            written = self._write_artifacts(locale, data, is_default=is_default)
        except (OSError, ValueError) as e:
            self._record_failure(builder, locale, f"Cannot write artifacts: {e}", e)
            return

        builder.files.extend(written)
        builder.processed.append(locale)
        translated = data.entry_count if is_default else data.translated_count
        stats = TranslationStats(locale=locale, total=data.entry_count, translated=translated)
        builder.stats[locale] = stats
        if not is_default:
            builder.missing_translations.extend(
                ValidationIssue(
                    code=MISSING_TRANSLATION,
                    locale=locale,
                    message="Missing translation",
                    identifier=entry.identifier,
                    text=entry.original_text,
                )
                for entry in data
                if not entry.has_translation
            )
        logger.debug("Compiled %s", stats)

    def _write_artifacts(
        self, locale: str, data: TranslationData, *, is_default: bool
    ) -> list[GeneratedArtifact]:
        """Write every configured artifact for locale, or none of them.

        Payloads are encoded before anything touches the disk, then staged
        as ``<name>.tmp`` files and renamed into place once all are written.

        Raises:
            ValueError: If a codec cannot encode the entries
            OSError: If staging or renaming fails; staged files are removed
        """
        entries = artifact_entries(data, is_default_locale=is_default)
        output_dir = self._config.output_dir
        payloads = [
            (fmt, output_dir / codec.filename(locale), codec.encode(locale, entries))
            for fmt, codec in self._codecs.items()
        ]
        output_dir.mkdir(parents=True, exist_ok=True)
        staged: list[Path] = []
        try:
            for _fmt, path, payload in payloads:
                temp = path.with_name(f"{path.name}.tmp")
                staged.append(temp)
                temp.write_bytes(payload)
            for temp, (_fmt, path, _payload) in zip(staged, payloads, strict=True):
                temp.replace(path)
        except OSError:
            for temp in staged:
                with contextlib.suppress(OSError):
                    temp.unlink(missing_ok=True)
            raise

        for fmt, path, _payload in payloads:
            logger.debug("Wrote %s artifact %s (%d entries)", fmt, path, len(entries))
        return [
            GeneratedArtifact(locale=locale, format=fmt, path=path) for fmt, path, _ in payloads
        ]

    @staticmethod
    def _record_failure(
        builder: _ResultBuilder, locale: str, message: str, error: Exception
    ) -> None:
        logger.error("Compilation of locale %s failed: %s", locale, message)
        builder.errors.append(CompilationFailure(locale=locale, message=message, error=error))
