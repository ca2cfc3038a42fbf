"""Runtime translation lookup: message sources, locale scope and the I18n facade.

Python 3.13+.
"""

from .builders import ContextBuilder, MessageDescriptor, PluralBuilder
from .factory import create_message_source, detect_source_type
from .i18n import I18n
from .locale_scope import (
    LocaleScope,
    clear_current_locale,
    get_current_locale,
    reset_current_locale,
    set_current_locale,
)
from .rwlock import RWLock
from .sources import (
    ArtifactMessageSource,
    BinaryMessageSource,
    JsonMessageSource,
    LoadSummary,
    LocaleLoadResult,
    MessageSource,
    NullMessageSource,
    PropertiesMessageSource,
    TranslationResult,
)

__all__ = [
    "ArtifactMessageSource",
    "BinaryMessageSource",
    "ContextBuilder",
    "I18n",
    "JsonMessageSource",
    "LoadSummary",
    "LocaleLoadResult",
    "LocaleScope",
    "MessageDescriptor",
    "MessageSource",
    "NullMessageSource",
    "PluralBuilder",
    "PropertiesMessageSource",
    "RWLock",
    "TranslationResult",
    "clear_current_locale",
    "create_message_source",
    "detect_source_type",
    "get_current_locale",
    "reset_current_locale",
    "set_current_locale",
]
