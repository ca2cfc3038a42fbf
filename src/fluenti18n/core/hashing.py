"""Content-addressed identifiers for natural-language messages.

Every translatable string is keyed by a digest of its own text, so the same
literal in two files shares one catalog entry and moving a call site never
changes its identifier. A context label salts the digest: "Save" on a button
and "Save" in a menu get distinct identifiers.

Components:
    HashGenerator - Protocol for identifier generators (structural typing)
    Sha256HashGenerator - Default generator: SHA-256, URL-safe base64, truncated
    HashCache - Append-only (text, context) -> identifier cache for hot paths

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import base64
import hashlib
import threading
from dataclasses import dataclass
from typing import Protocol

from fluenti18n.constants import CONTEXT_SEPARATOR, HASH_LENGTH

__all__ = [
    "HashCache",
    "HashCacheStats",
    "HashGenerator",
    "Sha256HashGenerator",
]


class HashGenerator(Protocol):
    """Protocol for deterministic message identifier generators.

    Implementations must be pure functions of their inputs: the same text
    and context produce the same identifier in every process, forever.
    Extraction-time and runtime generators must agree, so swapping the
    implementation means recompiling every artifact.
    """

    def generate(self, text: str, context: str | None = None) -> str:
        """Return the identifier for text, optionally scoped by context.

        Raises:
            ValueError: If text is empty
        """


@dataclass(frozen=True, slots=True)
class Sha256HashGenerator:
    """SHA-256 identifier generator.

    The digest of the UTF-8 text (or ``f"{context}:{text}"`` for contextual
    messages) is URL-safe base64 encoded without padding and truncated.
    Identifiers therefore only contain ``[A-Za-z0-9_-]`` and need no escaping
    in any artifact format.

    Attributes:
        length: Number of base64 characters kept (1-43)

    Example:
        >>> gen = Sha256HashGenerator()
        >>> gen.generate("Hello") == gen.generate("Hello")
        True
        >>> gen.generate("Save", "button") != gen.generate("Save", "menu")
        True
    """

    length: int = HASH_LENGTH

    def __post_init__(self) -> None:
        """Validate identifier length.

        Raises:
            ValueError: If length is outside the encoded digest size
        """
        if not 1 <= self.length <= 43:
            msg = f"length must be between 1 and 43, got {self.length}"
            raise ValueError(msg)

    def generate(self, text: str, context: str | None = None) -> str:
        """Return the identifier for text, optionally scoped by context.

        Raises:
            ValueError: If text is empty or not a string
        """
        if not isinstance(text, str) or not text:
            msg = "Cannot generate an identifier for empty text"
            raise ValueError(msg)
        payload = f"{context}{CONTEXT_SEPARATOR}{text}" if context else text
        digest = hashlib.sha256(payload.encode("utf-8")).digest()
        encoded = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
        return encoded[: self.length]


@dataclass(frozen=True, slots=True)
class HashCacheStats:
    """Point-in-time HashCache statistics."""

    size: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        """Fraction of lookups served from cache (0.0 when unused)."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class HashCache:
    """Append-only identifier cache with compute-if-absent semantics.

    Every lookup takes the lock, so hit and miss counts stay exact under
    concurrency. A miss computes the identifier while holding it: callers
    racing on the same text observe the same value and the generator runs
    at most once per key.

    Entries are never evicted: the key space is bounded by the literals in
    the application's source.
    """

    __slots__ = ("_entries", "_generator", "_hits", "_lock", "_misses")

    def __init__(self, generator: HashGenerator | None = None) -> None:
        self._generator: HashGenerator = generator or Sha256HashGenerator()
        self._entries: dict[tuple[str, str | None], str] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def generator(self) -> HashGenerator:
        """Generator used to compute missing identifiers."""
        return self._generator

    def get(self, text: str, context: str | None = None) -> str:
        """Return the cached identifier for (text, context), computing it once.

        Raises:
            ValueError: If text is empty
        """
        key = (text, context or None)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._hits += 1
                return cached
            identifier = self._generator.generate(text, context or None)
            self._entries[key] = identifier
            self._misses += 1
            return identifier

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            return (key, None) in self._entries
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> dict[str, str]:
        """Copy of plain-text entries as {text: identifier}.

        Contextual entries are keyed ``"context:text"``, mirroring the hash input.
        """
        with self._lock:
            items = list(self._entries.items())
        return {
            (f"{context}{CONTEXT_SEPARATOR}{text}" if context else text): identifier
            for (text, context), identifier in items
        }

    @property
    def stats(self) -> HashCacheStats:
        """Current size, hits and misses."""
        with self._lock:
            return HashCacheStats(
                size=len(self._entries), hits=self._hits, misses=self._misses
            )
