"""Locale utilities shared by the compiler and runtime.

Locale codes travel through this library as plain strings: in configuration,
in artifact file names and in the request-scoped locale. Babel needs POSIX
form (``en_US``) while callers often hand in BCP-47 (``en-US``), so everything
that talks to Babel goes through ``get_babel_locale``.

Python 3.13+.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "locale_candidates",
    "normalize_locale",
]


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 locale code to POSIX form.

    Args:
        locale_code: Locale code such as "en-US" or "pt_BR"

    Returns:
        POSIX-formatted locale code (e.g., "en_US")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("nb")
        'nb'
    """
    return locale_code.strip().replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Thread-safe via lru_cache internal locking.

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def locale_candidates(locale_code: str) -> tuple[str, ...]:
    """Artifact lookup candidates for a locale, most specific first.

    A regional locale may be served by its base-language artifact; the
    candidates never leave the requested language.

    Example:
        >>> locale_candidates("pt-BR")
        ('pt-BR', 'pt_BR', 'pt')
        >>> locale_candidates("en")
        ('en',)
    """
    normalized = normalize_locale(locale_code)
    candidates = [locale_code]
    if normalized != locale_code:
        candidates.append(normalized)
    language = normalized.split("_", 1)[0]
    if language and language not in candidates:
        candidates.append(language)
    return tuple(candidates)
