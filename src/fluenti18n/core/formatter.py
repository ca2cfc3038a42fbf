"""Argument substitution for translated messages.

Two tiers:

1. Locale-aware formatting with Babel. Placeholders are indexed and may
   carry a type and style:

       {0}                       value formatted by its Python type
       {0,number}  {0,integer}   {0,percent}
       {0,currency,EUR}
       {0,date}  {0,date,short}  {0,time}  {0,datetime,long}

2. Simple substitution, used when tier 1 raises: in a single pass every
   ``{i}`` is replaced by ``str(args[i])`` and each ``{}`` takes the next
   argument. Placeholders with no matching argument stay as written.
   This tier never raises, so a translation with mismatched placeholders
   still renders something readable.

Python 3.13+. Uses Babel for CLDR number and date formatting.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from babel import UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from fluenti18n.diagnostics import FormattingError
from fluenti18n.locale_utils import get_babel_locale

if TYPE_CHECKING:
    from collections.abc import Sequence

    from babel import Locale

__all__ = ["MessageFormatter", "simple_format"]

logger = logging.getLogger(__name__)

_BRACED = re.compile(r"\{([^{}]*)\}")
_SIMPLE_PLACEHOLDER = re.compile(r"\{(\d*)\}")
_ARGUMENT = re.compile(
    r"\s*(\d+)\s*"
    r"(?:,\s*(number|integer|percent|currency|date|time|datetime)\s*"
    r"(?:,\s*([^,{}]*?)\s*)?)?"
)
_DATE_STYLES = frozenset({"short", "medium", "long", "full"})

# Errors Babel raises for values it cannot format
_BABEL_ERRORS = (TypeError, ValueError, ArithmeticError, InvalidOperation, KeyError)


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:  # noqa: BLE001 - fallback tier must not raise
        return object.__repr__(value)


def simple_format(template: str, args: Sequence[object]) -> str:
    """Positional substitution that never raises.

    Example:
        >>> simple_format("{0} of {1}", [3, 10])
        '3 of 10'
        >>> simple_format("Hello, {}!", ["Bob"])
        'Hello, Bob!'
    """
    rendered = [_safe_str(arg) for arg in args]
    sequential = iter(rendered)

    def substitute(match: re.Match[str]) -> str:
        digits = match.group(1)
        if not digits:
            return next(sequential, match.group(0))
        index = int(digits)
        return rendered[index] if index < len(rendered) else match.group(0)

    # One pass, so argument text is never substituted into again.
    return _SIMPLE_PLACEHOLDER.sub(substitute, template)


class MessageFormatter:
    """Formats message templates with locale-aware argument rendering.

    Stateless apart from Babel's own caches; one instance can be shared by
    every thread.
    """

    __slots__ = ()

    def format(self, template: str, args: Sequence[object], locale: str) -> str:
        """Format template with Babel, raising on any mismatch.

        Raises:
            FormattingError: Unknown placeholder syntax, missing argument,
                unknown locale, or a value Babel cannot format
        """
        try:
            babel_locale = get_babel_locale(locale)
        except (UnknownLocaleError, ValueError, TypeError) as e:
            msg = f"Unknown locale {locale!r}: {e}"
            raise FormattingError(msg, fallback_value=template) from e

        def substitute(match: re.Match[str]) -> str:
            argument = _ARGUMENT.fullmatch(match.group(1))
            if argument is None:
                msg = f"Unsupported placeholder {match.group(0)!r}"
                raise FormattingError(msg, fallback_value=template)
            index = int(argument.group(1))
            if index >= len(args):
                msg = f"Placeholder {match.group(0)!r} has no argument ({len(args)} given)"
                raise FormattingError(msg, fallback_value=template)
            return self._format_value(
                args[index], argument.group(2), argument.group(3), babel_locale
            )

        result = _BRACED.sub(substitute, template)
        # Braces left over after substitution mean nested or unbalanced syntax.
        if "{" in _BRACED.sub("", template) or "}" in _BRACED.sub("", template):
            msg = f"Unbalanced braces in template {template!r}"
            raise FormattingError(msg, fallback_value=template)
        return result

    def format_message(self, template: str, args: Sequence[object], locale: str) -> str:
        """Format template, falling back to simple substitution. Never raises."""
        if not args:
            return template
        try:
            return self.format(template, args, locale)
        except FormattingError as e:
            logger.debug("Locale-aware formatting failed, using simple substitution: %s", e)
            return simple_format(template, args)

    @staticmethod
    def _format_value(
        value: object, kind: str | None, style: str | None, locale: Locale
    ) -> str:
        try:
            return _render(value, kind, style or None, locale)
        except FormattingError:
            raise
        except _BABEL_ERRORS as e:
            msg = f"Cannot format {value!r} as {kind or type(value).__name__}: {e}"
            raise FormattingError(msg, fallback_value=_safe_str(value)) from e


def _render(value: object, kind: str | None, style: str | None, locale: Locale) -> str:
    is_number = isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)
    match kind:
        case None:
            if is_number:
                return babel_numbers.format_decimal(value, locale=locale)
            if isinstance(value, datetime):
                return babel_dates.format_datetime(value, locale=locale)
            if isinstance(value, date):
                return babel_dates.format_date(value, locale=locale)
            if isinstance(value, time):
                return babel_dates.format_time(value, locale=locale)
            return _safe_str(value)
        case "number" | "integer" | "percent" | "currency" if not is_number:
            msg = f"{kind} placeholder needs a number, got {type(value).__name__}"
            raise FormattingError(msg, fallback_value=_safe_str(value))
        case "number":
            return babel_numbers.format_decimal(value, format=style, locale=locale)
        case "integer":
            return babel_numbers.format_decimal(value, format="#,##0", locale=locale)
        case "percent":
            return babel_numbers.format_percent(value, format=style, locale=locale)
        case "currency":
            if not style:
                msg = "currency placeholder needs a currency code"
                raise FormattingError(msg, fallback_value=_safe_str(value))
            return babel_numbers.format_currency(value, style.upper(), locale=locale)
        case "date" | "datetime" | "time":
            return _render_temporal(value, kind, style, locale)
    msg = f"Unsupported placeholder type {kind!r}"
    raise FormattingError(msg, fallback_value=_safe_str(value))


def _render_temporal(value: object, kind: str, style: str | None, locale: Locale) -> str:
    fmt = style or "medium"
    if fmt not in _DATE_STYLES:
        msg = f"Unsupported {kind} style {fmt!r}"
        raise FormattingError(msg, fallback_value=_safe_str(value))
    if kind == "date" and isinstance(value, date):
        return babel_dates.format_date(value, format=fmt, locale=locale)
    if kind == "time" and isinstance(value, (datetime, time)):
        return babel_dates.format_time(value, format=fmt, locale=locale)
    if kind == "datetime" and isinstance(value, datetime):
        return babel_dates.format_datetime(value, format=fmt, locale=locale)
    msg = f"{kind} placeholder cannot format {type(value).__name__}"
    raise FormattingError(msg, fallback_value=_safe_str(value))
