"""Runtime configuration.

FluentConfig is the explicitly constructed settings object handed to the
I18n facade and the message source factory. It is immutable; derive
variants with ``replace``.

Python 3.13+.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from fluenti18n.constants import (
    DEFAULT_AUTO_RELOAD_INTERVAL,
    DEFAULT_BASE_PATH,
    DEFAULT_ENCODING,
    DEFAULT_LOCALE,
)
from fluenti18n.diagnostics import ConfigError
from fluenti18n.enums import MessageSourceType

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["FluentConfig"]


@dataclass(frozen=True, slots=True)
class FluentConfig:
    """Immutable runtime settings.

    Attributes:
        base_path: Directory holding runtime artifacts
        supported_locales: Locales the application serves
        default_locale: Source language of the natural texts, and the
            locale used when no request locale is set
        encoding: Text encoding of artifacts
        message_source_type: Artifact format to serve, or AUTO to detect
        enable_caching: Keep loaded locale tables in memory
        cache_timeout_seconds: Lifetime of a cached table; 0 never expires
        auto_reload: Reload a locale when its artifact changes on disk
        auto_reload_interval_seconds: Minimum time between change checks
        enable_fallback: resolve_key tries the default locale on a miss
        log_missing_translations: Log misses at INFO instead of DEBUG
        custom_properties: Free-form application settings, passed through

    Example:
        >>> config = FluentConfig(supported_locales=("en", "nb"))
        >>> config.replace(default_locale="nb").default_locale
        'nb'
    """

    base_path: str = DEFAULT_BASE_PATH
    supported_locales: tuple[str, ...] = (DEFAULT_LOCALE,)
    default_locale: str = DEFAULT_LOCALE
    encoding: str = DEFAULT_ENCODING
    message_source_type: MessageSourceType = MessageSourceType.AUTO
    enable_caching: bool = True
    cache_timeout_seconds: float = 0.0
    auto_reload: bool = False
    auto_reload_interval_seconds: float = DEFAULT_AUTO_RELOAD_INTERVAL
    enable_fallback: bool = True
    log_missing_translations: bool = False
    custom_properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize collections and validate values.

        Raises:
            ConfigError: If any value is invalid
        """
        if isinstance(self.supported_locales, str):
            object.__setattr__(self, "supported_locales", (self.supported_locales,))
        object.__setattr__(
            self,
            "supported_locales",
            tuple(dict.fromkeys(str(locale).strip() for locale in self.supported_locales)),
        )
        object.__setattr__(self, "base_path", str(self.base_path))
        object.__setattr__(
            self, "custom_properties", MappingProxyType(dict(self.custom_properties))
        )
        try:
            object.__setattr__(
                self, "message_source_type", MessageSourceType(self.message_source_type)
            )
        except ValueError:
            valid = ", ".join(t.value for t in MessageSourceType)
            msg = (
                f"Unknown message source type {self.message_source_type!r} "
                f"(expected one of: {valid})"
            )
            raise ConfigError(msg) from None

        if not self.base_path:
            msg = "base_path must not be empty"
            raise ConfigError(msg)
        if not self.supported_locales or not all(self.supported_locales):
            msg = "supported_locales must contain at least one non-empty locale"
            raise ConfigError(msg)
        if not self.default_locale:
            msg = "default_locale must not be empty"
            raise ConfigError(msg)
        if self.default_locale not in self.supported_locales:
            msg = (
                f"default_locale {self.default_locale!r} is not in supported_locales "
                f"{list(self.supported_locales)}"
            )
            raise ConfigError(msg)
        if not self.encoding:
            msg = "encoding must not be empty"
            raise ConfigError(msg)
        if self.cache_timeout_seconds < 0:
            msg = f"cache_timeout_seconds must be >= 0, got {self.cache_timeout_seconds}"
            raise ConfigError(msg)
        if self.auto_reload_interval_seconds < 0:
            msg = (
                "auto_reload_interval_seconds must be >= 0, "
                f"got {self.auto_reload_interval_seconds}"
            )
            raise ConfigError(msg)

    def replace(self, **changes: Any) -> FluentConfig:
        """Copy with the given fields changed (validated again)."""
        return dataclasses.replace(self, **changes)

    def is_supported(self, locale: str) -> bool:
        return locale in self.supported_locales
