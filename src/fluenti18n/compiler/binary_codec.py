"""Binary artifact codec (FL18, version 1).

Layout, little-endian::

    offset  size  field
    0       4     magic "FL18"
    4       2     version (1)
    6       2     locale length N
    8       N     locale (UTF-8)
    8+N     4     entry count M
    M times:
            2     identifier length H
            H     identifier (UTF-8)
            4     translation length T
            T     translation (UTF-8, may be empty)

The reader checks magic and version before trusting anything else. A
stream that ends inside an entry, or carries bytes after the last entry,
is rejected as a whole: there are no partial results.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from fluenti18n.compiler.codecs import ArtifactCodec
from fluenti18n.constants import BINARY_MAGIC, BINARY_VERSION
from fluenti18n.diagnostics import (
    ArtifactFormatError,
    TruncatedArtifactError,
    UnsupportedArtifactVersionError,
)
from fluenti18n.enums import OutputFormat

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["BinaryArtifact", "BinaryCodec"]

_HEADER = struct.Struct("<4sHH")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")

_MAX_U16 = 0xFFFF
_MAX_U32 = 0xFFFFFFFF


@dataclass(frozen=True, slots=True)
class BinaryArtifact:
    """Decoded binary artifact.

    Attributes:
        locale: Locale recorded in the header
        translations: identifier -> translation, in file order
    """

    locale: str
    translations: dict[str, str]


class _Reader:
    """Bounds-checked cursor over an artifact payload."""

    __slots__ = ("_offset", "_path", "_payload")

    def __init__(self, payload: bytes, path: str | Path | None) -> None:
        self._payload = payload
        self._offset = 0
        self._path = path

    @property
    def remaining(self) -> int:
        return len(self._payload) - self._offset

    def take(self, size: int, what: str) -> bytes:
        if size > self.remaining:
            msg = (
                f"Binary artifact truncated reading {what} at offset {self._offset}: "
                f"need {size} bytes, {self.remaining} left"
            )
            raise TruncatedArtifactError(msg, path=self._path)
        chunk = self._payload[self._offset : self._offset + size]
        self._offset += size
        return chunk

    def u16(self, what: str) -> int:
        return int(_U16.unpack(self.take(_U16.size, what))[0])

    def u32(self, what: str) -> int:
        return int(_U32.unpack(self.take(_U32.size, what))[0])

    def text(self, size: int, what: str) -> str:
        raw = self.take(size, what)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            msg = f"Binary artifact has invalid UTF-8 in {what}: {e}"
            raise ArtifactFormatError(msg, path=self._path) from e


def _encode_text(text: str, limit: int, what: str) -> bytes:
    raw = text.encode("utf-8")
    if len(raw) > limit:
        msg = f"{what} is {len(raw)} bytes, the binary format allows at most {limit}"
        raise ValueError(msg)
    return raw


class BinaryCodec(ArtifactCodec):
    """Encodes artifacts in the FL18 binary layout.

    Strings are always UTF-8; the ``encoding`` setting does not apply.
    """

    format = OutputFormat.BINARY

    __slots__ = ()

    def encode(self, locale: str, entries: Mapping[str, str]) -> bytes:
        """Serialize entries in identifier order.

        Raises:
            ValueError: If a string exceeds its length prefix
        """
        locale_raw = _encode_text(locale, _MAX_U16, "Locale")
        if len(entries) > _MAX_U32:
            msg = f"Too many entries for the binary format: {len(entries)}"
            raise ValueError(msg)
        parts = [
            _HEADER.pack(BINARY_MAGIC, BINARY_VERSION, len(locale_raw)),
            locale_raw,
            _U32.pack(len(entries)),
        ]
        for identifier in sorted(entries):
            key = _encode_text(identifier, _MAX_U16, "Identifier")
            value = _encode_text(entries[identifier], _MAX_U32, f"Translation of {identifier}")
            parts.extend((_U16.pack(len(key)), key, _U32.pack(len(value)), value))
        return b"".join(parts)

    def decode_artifact(
        self, payload: bytes, *, path: str | Path | None = None
    ) -> BinaryArtifact:
        """Parse a complete artifact, header included.

        Raises:
            ArtifactFormatError: Magic mismatch or invalid UTF-8
            UnsupportedArtifactVersionError: Version other than 1
            TruncatedArtifactError: Stream ends early or has trailing bytes
        """
        if len(payload) < len(BINARY_MAGIC) or payload[: len(BINARY_MAGIC)] != BINARY_MAGIC:
            msg = f"Not a binary translation artifact (bad magic){f': {path}' if path else ''}"
            raise ArtifactFormatError(msg, path=path)
        reader = _Reader(payload, path)
        reader.take(len(BINARY_MAGIC), "magic")
        version = reader.u16("version")
        if version != BINARY_VERSION:
            raise UnsupportedArtifactVersionError(version, BINARY_VERSION, path=path)
        locale = reader.text(reader.u16("locale length"), "locale")
        count = reader.u32("entry count")

        translations: dict[str, str] = {}
        for index in range(count):
            identifier = reader.text(reader.u16(f"entry {index} key length"), f"entry {index} key")
            translations[identifier] = reader.text(
                reader.u32(f"entry {index} value length"), f"entry {index} value"
            )
        if reader.remaining:
            msg = f"Binary artifact has {reader.remaining} trailing byte(s) after {count} entries"
            raise TruncatedArtifactError(msg, path=path)
        return BinaryArtifact(locale=locale, translations=translations)

    def decode(self, payload: bytes, *, path: str | Path | None = None) -> dict[str, str]:
        return self.decode_artifact(payload, path=path).translations

    def read_artifact(self, path: str | Path) -> BinaryArtifact:
        """Read and decode an artifact file, header included.

        Raises:
            FileNotFoundError: If the artifact does not exist
            ArtifactFormatError: If the artifact is not valid
        """
        path = Path(path)
        return self.decode_artifact(path.read_bytes(), path=path)
