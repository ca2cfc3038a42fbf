"""Flat-text (properties) artifact codec.

One ``identifier=translation`` line per entry after a short comment header.
Values escape backslash, newline, carriage return, tab and the ``=``/``:``
delimiters. Plural entries are written as their plural string.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from fluenti18n.compiler.codecs import ArtifactCodec
from fluenti18n.diagnostics import ArtifactFormatError
from fluenti18n.enums import OutputFormat

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

__all__ = ["PropertiesCodec", "escape_value", "unescape_value"]

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "=": "\\=", ":": "\\:"}
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t"}
_ESCAPE_PATTERN = re.compile(r"[\\\n\r\t=:]")
_UNESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)


def escape_value(value: str) -> str:
    r"""Escape a value for a properties line.

    Example:
        >>> escape_value("a=b\nc")
        'a\\=b\\nc'
    """
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], value)


def unescape_value(value: str) -> str:
    """Reverse escape_value; unknown escapes yield the escaped character."""
    return _UNESCAPE_PATTERN.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), value)


class PropertiesCodec(ArtifactCodec):
    """Encodes artifacts as ``identifier=value`` lines."""

    format = OutputFormat.PROPERTIES

    __slots__ = ()

    def encode(self, locale: str, entries: Mapping[str, str]) -> bytes:
        lines = [
            f"# Translations for locale: {locale}",
            f"# Entry count: {len(entries)}",
            "",
        ]
        lines.extend(f"{identifier}={escape_value(value)}" for identifier, value in entries.items())
        return ("\n".join(lines) + "\n").encode(self.encoding)

    def decode(self, payload: bytes, *, path: str | Path | None = None) -> dict[str, str]:
        try:
            text = payload.decode(self.encoding)
        except UnicodeDecodeError as e:
            msg = f"Invalid properties artifact{f' {path}' if path else ''}: {e}"
            raise ArtifactFormatError(msg, path=path) from e

        entries: dict[str, str] = {}
        for lineno, raw in enumerate(text.split("\n"), start=1):
            line = raw.removesuffix("\r")
            stripped = line.lstrip()
            if not stripped or stripped.startswith(("#", "!")):
                continue
            key, sep, value = stripped.partition("=")
            if not sep:
                msg = f"Line {lineno} has no '=' separator: {line!r}"
                raise ArtifactFormatError(msg, path=path)
            key = key.strip()
            if not key:
                msg = f"Line {lineno} has an empty key"
                raise ArtifactFormatError(msg, path=path)
            entries[key] = unescape_value(value)
        return entries
