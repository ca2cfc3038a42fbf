"""Core primitives: identifiers, plural grammar, argument formatting.

Python 3.13+.
"""

from .formatter import MessageFormatter, simple_format
from .hashing import HashCache, HashCacheStats, HashGenerator, Sha256HashGenerator
from .plural import (
    build_icu_plural,
    coerce_plural_form,
    is_icu_plural,
    parse_icu_plural,
    select_plural_form,
)

__all__ = [
    "HashCache",
    "HashCacheStats",
    "HashGenerator",
    "MessageFormatter",
    "Sha256HashGenerator",
    "build_icu_plural",
    "coerce_plural_form",
    "is_icu_plural",
    "parse_icu_plural",
    "select_plural_form",
    "simple_format",
]
