"""Structured-text (JSON) artifact codec.

Layout: one object per locale, identifier -> translation. Plural entries
become a nested object of form -> text in canonical form order::

    {
      "eZk3mCcqVqY": "Lagre",
      "q0Jd7xS1bYc": {"one": "Ett element", "other": "{} elementer"}
    }

Keys are sorted and non-ASCII text is written as-is (UTF-8), so unchanged
input produces identical bytes.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fluenti18n.compiler.codecs import ArtifactCodec
from fluenti18n.core.plural import build_icu_plural, is_icu_plural, parse_icu_plural
from fluenti18n.diagnostics import ArtifactFormatError
from fluenti18n.enums import OutputFormat, PluralForm

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

__all__ = ["JsonCodec"]


def _nested_plural(value: str) -> dict[str, str] | None:
    """Form mapping for a canonical plural string; None for anything else."""
    if not is_icu_plural(value):
        return None
    forms = parse_icu_plural(value)
    if not forms or build_icu_plural(forms) != value:
        return None
    return {form.value: text for form, text in forms.items()}


class JsonCodec(ArtifactCodec):
    """Encodes artifacts as a JSON object."""

    format = OutputFormat.JSON

    __slots__ = ()

    def encode(self, locale: str, entries: Mapping[str, str]) -> bytes:  # noqa: ARG002
        document: dict[str, str | dict[str, str]] = {}
        for identifier, value in entries.items():
            nested = _nested_plural(value)
            document[identifier] = nested if nested is not None else value
        text = json.dumps(document, ensure_ascii=False, sort_keys=True, indent=2)
        return (text + "\n").encode(self.encoding)

    def decode(self, payload: bytes, *, path: str | Path | None = None) -> dict[str, str]:
        try:
            document = json.loads(payload.decode(self.encoding))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            msg = f"Invalid JSON artifact{f' {path}' if path else ''}: {e}"
            raise ArtifactFormatError(msg, path=path) from e
        if not isinstance(document, dict):
            msg = f"JSON artifact must be an object, got {type(document).__name__}"
            raise ArtifactFormatError(msg, path=path)

        entries: dict[str, str] = {}
        for identifier, value in document.items():
            if isinstance(value, str):
                entries[identifier] = value
            elif isinstance(value, dict):
                entries[identifier] = self._decode_plural(identifier, value, path)
            else:
                msg = f"Entry {identifier!r} must be a string or form object"
                raise ArtifactFormatError(msg, path=path)
        return entries

    @staticmethod
    def _decode_plural(
        identifier: str, forms: dict[str, object], path: str | Path | None
    ) -> str:
        parsed: dict[PluralForm, str] = {}
        for name, text in forms.items():
            if not isinstance(text, str):
                msg = f"Plural form {name!r} of {identifier!r} must be a string"
                raise ArtifactFormatError(msg, path=path)
            try:
                parsed[PluralForm(name)] = text
            except ValueError:
                msg = f"Unknown plural form {name!r} in entry {identifier!r}"
                raise ArtifactFormatError(msg, path=path) from None
        return build_icu_plural(parsed)
