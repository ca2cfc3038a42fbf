"""Runtime artifact codecs: shared contract and registry.

Every codec turns the same flat mapping ``identifier -> translation`` into
one locale's artifact bytes and back. The mapping is computed once from a
TranslationData by ``artifact_entries``:

- Default locale: the translation, or the original text when untranslated.
  The natural text is the source-language translation.
- Other locales: the translation, or "" when untranslated. The entry is
  still written so every locale carries the same identifier set and the
  runtime can tell "untranslated" from "unknown".

Entries are ordered by identifier, so encoding is deterministic.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol

from fluenti18n.constants import ARTIFACT_BASENAME
from fluenti18n.enums import OutputFormat

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fluenti18n.catalog.models import TranslationData

__all__ = [
    "ArtifactCodec",
    "OutputCodec",
    "artifact_entries",
    "artifact_filename",
    "get_codec",
]

logger = logging.getLogger(__name__)


def artifact_filename(locale: str, output_format: OutputFormat) -> str:
    """File name of the artifact for locale in output_format.

    Example:
        >>> artifact_filename("nb", OutputFormat.BINARY)
        'messages_nb.bin'
    """
    return f"{ARTIFACT_BASENAME}_{locale}.{output_format.extension}"


def artifact_entries(data: TranslationData, *, is_default_locale: bool) -> dict[str, str]:
    """identifier -> artifact value, ordered by identifier."""
    entries: dict[str, str] = {}
    for identifier in sorted(data.entries):
        entry = data.entries[identifier]
        if entry.has_translation:
            entries[identifier] = entry.translation
        elif is_default_locale:
            entries[identifier] = entry.original_text
        else:
            entries[identifier] = ""
    return entries


class OutputCodec(Protocol):
    """Protocol for runtime artifact formats."""

    format: OutputFormat

    def encode(self, locale: str, entries: Mapping[str, str]) -> bytes:
        """Serialize one locale's entries."""

    def decode(self, payload: bytes, *, path: str | Path | None = None) -> dict[str, str]:
        """Parse artifact bytes back into identifier -> translation.

        Raises:
            ArtifactFormatError: If the payload is not a valid artifact
        """

    def write(
        self,
        data: TranslationData,
        locale: str,
        output_dir: str | Path,
        *,
        is_default_locale: bool = False,
    ) -> Path:
        """Write the artifact for data into output_dir and return its path."""

    def read(self, path: str | Path) -> dict[str, str]:
        """Read and decode an artifact file.

        Raises:
            FileNotFoundError: If the artifact does not exist
            ArtifactFormatError: If the artifact is not valid
        """


class ArtifactCodec:
    """File handling shared by the concrete codecs.

    Subclasses implement ``encode`` and ``decode``.
    """

    format: ClassVar[OutputFormat]

    __slots__ = ("encoding",)

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def encode(self, locale: str, entries: Mapping[str, str]) -> bytes:
        raise NotImplementedError

    def decode(self, payload: bytes, *, path: str | Path | None = None) -> dict[str, str]:
        raise NotImplementedError

    def filename(self, locale: str) -> str:
        return artifact_filename(locale, self.format)

    def write(
        self,
        data: TranslationData,
        locale: str,
        output_dir: str | Path,
        *,
        is_default_locale: bool = False,
    ) -> Path:
        output = Path(output_dir)
        output.mkdir(parents=True, exist_ok=True)
        path = output / self.filename(locale)
        entries = artifact_entries(data, is_default_locale=is_default_locale)
        path.write_bytes(self.encode(locale, entries))
        logger.debug("Wrote %s artifact %s (%d entries)", self.format, path, len(entries))
        return path

    def read(self, path: str | Path) -> dict[str, str]:
        path = Path(path)
        return self.decode(path.read_bytes(), path=path)


def get_codec(output_format: OutputFormat | str, encoding: str = "utf-8") -> ArtifactCodec:
    """Codec instance for output_format.

    Raises:
        ValueError: If the format is unknown
    """
    # Deferred: the concrete codecs import this module
    from fluenti18n.compiler.binary_codec import BinaryCodec  # noqa: PLC0415
    from fluenti18n.compiler.json_codec import JsonCodec  # noqa: PLC0415
    from fluenti18n.compiler.properties_codec import PropertiesCodec  # noqa: PLC0415

    codecs: dict[OutputFormat, type[ArtifactCodec]] = {
        OutputFormat.JSON: JsonCodec,
        OutputFormat.PROPERTIES: PropertiesCodec,
        OutputFormat.BINARY: BinaryCodec,
    }
    try:
        fmt = OutputFormat(output_format)
    except ValueError:
        msg = f"Unknown output format: {output_format!r}"
        raise ValueError(msg) from None
    return codecs[fmt](encoding)
