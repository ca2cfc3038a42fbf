"""String literal bodies captured by extraction patterns.

Patterns capture the text between the quotes exactly as written in source.
The runtime sees the string after the interpreter has processed escapes, so
the captured body is decoded with Python's escape rules before it is hashed:
``"Say \\"hi\\""`` becomes ``Say "hi"`` and ``\\n`` becomes a newline.

Escapes Python does not define (``\\d``) are kept verbatim, as Python keeps
them. A malformed escape (unknown ``\\N{...}`` name, out-of-range ``\\U``)
is kept verbatim too.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
import unicodedata

__all__ = ["decode_literal"]

_ESCAPE = re.compile(
    r"""\\(?:
        (?P<newline>\r?\n)
      | (?P<simple>[\\'"abfnrtv])
      | (?P<octal>[0-7]{1,3})
      | x(?P<hex>[0-9A-Fa-f]{2})
      | u(?P<u4>[0-9A-Fa-f]{4})
      | U(?P<u8>[0-9A-Fa-f]{8})
      | N\{(?P<name>[^}]+)\}
    )""",
    re.VERBOSE,
)

_SIMPLE_ESCAPES = {
    "\\": "\\",
    "'": "'",
    '"': '"',
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def _replace(match: re.Match[str]) -> str:
    if match.group("newline") is not None:
        return ""
    if match.group("simple") is not None:
        return _SIMPLE_ESCAPES[match.group("simple")]
    if match.group("name") is not None:
        try:
            return unicodedata.lookup(match.group("name"))
        except KeyError:
            return match.group(0)
    digits = match.group("octal") or match.group("hex") or match.group("u4") or match.group("u8")
    base = 8 if match.group("octal") is not None else 16
    try:
        return chr(int(digits, base))
    except (ValueError, OverflowError):
        return match.group(0)


def decode_literal(body: str) -> str:
    """Text of a string literal given the characters between its quotes.

    Example:
        >>> decode_literal(r'Say \\"hi\\"')
        'Say "hi"'
        >>> decode_literal(r"Line one\\nLine two")
        'Line one\\nLine two'
    """
    if "\\" not in body:
        return body
    return _ESCAPE.sub(_replace, body)
