"""Enumerations for fluenti18n type-safe constants.

Uses StrEnum for automatic string conversion, so members serialize directly
into YAML configuration, log records and JSON artifacts.

Python 3.13+.
"""

from enum import StrEnum


class MessageType(StrEnum):
    """Shape of a discovered message.

    StrEnum provides automatic string conversion: str(MessageType.SIMPLE) == "simple"
    """

    SIMPLE = "simple"
    """Plain call: i18n.translate("Save")"""

    CONTEXTUAL = "contextual"
    """Context-scoped call: i18n.context("button").translate("Save")"""

    PLURAL = "plural"
    """Plural builder chain folded into one canonical ICU string."""

    ANNOTATION = "annotation"
    """Decorator or annotation literal: @translatable("Order status")"""


class PluralForm(StrEnum):
    """CLDR plural categories in canonical order.

    Iteration order is the fixed order used by the canonical plural string.
    """

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


class OutputFormat(StrEnum):
    """Runtime artifact formats produced by the compiler."""

    JSON = "json"
    """Structured text: identifier -> translation or {form: text}."""

    PROPERTIES = "properties"
    """Flat text: identifier=escaped translation."""

    BINARY = "binary"
    """Fixed-layout little-endian binary (FL18 v1)."""

    @property
    def extension(self) -> str:
        """File extension used for artifacts of this format."""
        return "bin" if self is OutputFormat.BINARY else self.value


class MessageSourceType(StrEnum):
    """Runtime message source selection."""

    AUTO = "auto"
    """Detect from artifacts present: binary, then JSON, then properties."""

    BINARY = "binary"
    JSON = "json"
    PROPERTIES = "properties"


class LoadStatus(StrEnum):
    """Outcome of loading one locale's runtime artifact."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


__all__ = [
    "LoadStatus",
    "MessageSourceType",
    "MessageType",
    "OutputFormat",
    "PluralForm",
]
