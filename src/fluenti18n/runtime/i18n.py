"""Resolution facade.

I18n is an explicitly constructed object: configuration, message source,
identifier cache and formatter are injected (or built from configuration)
rather than held in module globals, so tests and multi-tenant applications
can run independent instances side by side. The only ambient state is the
request-scoped locale in ``locale_scope``.

Resolution order:
    translate(text)      identifier of text -> source(current locale)
                         -> text itself
    resolve_key(id)      source(current locale) -> source(default locale)
                         (when fallback is enabled) -> id itself

Neither raises for a missing translation; arguments are always formatted,
falling back to simple substitution when locale-aware formatting fails.

Thread Safety:
    All methods are safe to call concurrently. The locale comes from a
    ContextVar, so concurrent requests each see their own.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fluenti18n.config.loader import load_config
from fluenti18n.config.settings import FluentConfig
from fluenti18n.constants import DEFAULT_CONFIG_FILE
from fluenti18n.core.formatter import MessageFormatter
from fluenti18n.core.hashing import HashCache
from fluenti18n.runtime.builders import ContextBuilder, MessageDescriptor, PluralBuilder
from fluenti18n.runtime.factory import create_message_source
from fluenti18n.runtime.locale_scope import LocaleScope, get_current_locale
from fluenti18n.runtime.sources import LoadSummary, TranslationResult

if TYPE_CHECKING:
    from collections.abc import Iterable
    from decimal import Decimal
    from pathlib import Path

    from fluenti18n.core.hashing import HashGenerator
    from fluenti18n.runtime.sources import MessageSource

__all__ = ["I18n"]

logger = logging.getLogger(__name__)


class I18n:
    """Translates natural-language literals at runtime.

    Example:
        >>> i18n = I18n(FluentConfig(base_path="i18n", supported_locales=("en", "nb")))
        >>> with i18n.locale_scope("nb"):
        ...     i18n.translate("Hello, {}!", "Kari")
        'Hei, Kari!'
        >>> i18n.context("button").translate("Save")
        'Save'
        >>> i18n.plural(3).one("One file").other("{} files").format()
        '3 files'
    """

    __slots__ = ("_config", "_formatter", "_hashes", "_source")

    def __init__(
        self,
        config: FluentConfig | None = None,
        *,
        message_source: MessageSource | None = None,
        hash_generator: HashGenerator | None = None,
        formatter: MessageFormatter | None = None,
    ) -> None:
        """Initialize facade.

        Args:
            config: Runtime settings (defaults when None)
            message_source: Source to resolve from; built from config when None
            hash_generator: Identifier generator; must match the one used at
                extraction time
            formatter: Argument formatter
        """
        self._config = config if config is not None else FluentConfig()
        self._source: MessageSource = (
            message_source if message_source is not None else create_message_source(self._config)
        )
        self._hashes = HashCache(hash_generator)
        self._formatter = formatter if formatter is not None else MessageFormatter()

    @classmethod
    def from_config_file(cls, path: str | Path = DEFAULT_CONFIG_FILE, **kwargs: object) -> I18n:
        """Build a facade from a fluent.yml file (defaults if it is missing)."""
        return cls(load_config(path), **kwargs)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return (
            f"I18n(default_locale={self._config.default_locale!r}, "
            f"source={self._source!r})"
        )

    # ---------------------------------------------------------------- settings

    @property
    def config(self) -> FluentConfig:
        return self._config

    @property
    def message_source(self) -> MessageSource:
        return self._source

    @property
    def default_locale(self) -> str:
        return self._config.default_locale

    @property
    def current_locale(self) -> str:
        """Request locale if one is set, else the default locale."""
        return get_current_locale() or self._config.default_locale

    def locale_scope(self, locale: str) -> LocaleScope:
        """Context manager serving the block in locale."""
        return LocaleScope(locale)

    # -------------------------------------------------------------- resolution

    def translate(self, natural_text: str, *args: object, context: str | None = None) -> str:
        """Translate natural_text into the current locale.

        Returns the formatted natural text when no translation exists.
        """
        if not natural_text:
            return ""
        locale = self.current_locale
        identifier = self._hashes.get(natural_text, context)
        result = self.lookup(identifier, natural_text, locale)
        template = result.translation if result.found else natural_text
        return self.format(template, args, locale)

    t = translate

    def resolve_key(self, identifier: str, *args: object) -> str:
        """Translate by identifier when the natural text is not at hand."""
        locale = self.current_locale
        result = self.lookup(identifier, identifier, locale)
        if not result.found and self._config.enable_fallback and locale != self.default_locale:
            result = self._source.resolve(identifier, identifier, self.default_locale)
        template = result.translation if result.found else identifier
        return self.format(template, args, locale)

    def resolve(self, descriptor: MessageDescriptor, locale: str | None = None) -> str:
        """Translate a captured message into locale (current locale when None)."""
        locale = locale or self.current_locale
        result = self.lookup(descriptor.identifier, descriptor.natural_text, locale)
        template = result.translation if result.found else descriptor.natural_text
        return self.format(template, descriptor.args, locale)

    def lookup(
        self, identifier: str, fallback_text: str, locale: str | None = None
    ) -> TranslationResult:
        """Ask the message source, logging a miss."""
        locale = locale or self.current_locale
        result = self._source.resolve(identifier, fallback_text, locale)
        if not result.found:
            level = logging.INFO if self._config.log_missing_translations else logging.DEBUG
            logger.log(
                level, "Missing translation for %s (%r) in %s", identifier, fallback_text, locale
            )
        return result

    def format(self, template: str, args: Iterable[object], locale: str | None = None) -> str:
        """Substitute args into template; never raises."""
        return self._formatter.format_message(template, tuple(args), locale or self.current_locale)

    def has_translation(
        self, natural_text: str, locale: str | None = None, *, context: str | None = None
    ) -> bool:
        if not natural_text:
            return False
        identifier = self._hashes.get(natural_text, context)
        return self._source.exists(identifier, locale or self.current_locale)

    # ---------------------------------------------------------------- builders

    def context(self, label: str) -> ContextBuilder:
        return ContextBuilder(self, label)

    def plural(self, count: int | float | Decimal) -> PluralBuilder:
        return PluralBuilder(self, count)

    def describe(
        self, natural_text: str, *args: object, context: str | None = None
    ) -> MessageDescriptor:
        """Capture natural_text for resolution later, e.g. in another locale."""
        return MessageDescriptor(
            identifier=self._hashes.get(natural_text, context),
            natural_text=natural_text,
            args=args,
            context=context,
        )

    def variable(self, text: str, *args: object) -> MessageDescriptor:
        """Descriptor for text held in a variable.

        Extraction only sees literals, so such text must be in the catalog
        through some other literal to be translated.
        """
        return self.describe(text, *args)

    # ------------------------------------------------------------- identifiers

    def identifier_for(self, natural_text: str, context: str | None = None) -> str:
        """Identifier of natural_text, as extraction computes it.

        Raises:
            ValueError: If natural_text is empty
        """
        return self._hashes.get(natural_text, context)

    def register(self, natural_text: str, context: str | None = None) -> str:
        """Precompute and cache the identifier of natural_text."""
        return self.identifier_for(natural_text, context)

    def message_hashes(self) -> dict[str, str]:
        """Copy of every identifier computed so far, keyed by hash input."""
        return self._hashes.snapshot()

    # ----------------------------------------------------------------- loading

    def warm_up(self, locales: Iterable[str] | None = None) -> LoadSummary:
        """Load artifacts eagerly (all supported locales when None)."""
        targets = locales if locales is not None else self._config.supported_locales
        return self._source.warm_up(targets)

    def reload(self) -> LoadSummary:
        return self._source.reload()
