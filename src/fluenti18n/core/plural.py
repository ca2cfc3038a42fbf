"""Canonical ICU plural strings and CLDR plural selection.

A plural message is stored, hashed and translated as one string:

    {0, plural, zero {No items} one {One item} other {{} items}}

Forms appear in fixed CLDR order (zero, one, two, few, many, other) and only
when supplied, so builder call order never changes the identifier. The
runtime picks the category for a count with Babel's CLDR rules and extracts
that form from the translated string.

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import TYPE_CHECKING

from babel.core import UnknownLocaleError

from fluenti18n.constants import ICU_PLURAL_PREFIX
from fluenti18n.enums import PluralForm
from fluenti18n.locale_utils import get_babel_locale

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "build_icu_plural",
    "coerce_plural_form",
    "is_icu_plural",
    "parse_icu_plural",
    "select_plural_form",
]

logger = logging.getLogger(__name__)

# Body of "{N, plural, ...}"; DOTALL so multi-line translations parse.
_ICU_CONTENT_PATTERN = re.compile(r"\{\d+,\s*plural,\s*(.*)\}$", re.DOTALL)

# "form {text}" where text may contain one level of nested braces ("{} items").
_FORM_PATTERN = re.compile(r"(\w+)\s*\{([^{}]*(?:\{[^{}]*\}[^{}]*)*)\}")


def coerce_plural_form(form: str | PluralForm) -> PluralForm:
    """Return the PluralForm for a category name.

    Raises:
        ValueError: If form is not a CLDR plural category
    """
    try:
        return PluralForm(str(form).lower())
    except ValueError:
        msg = f"Unknown plural form: {form!r}"
        raise ValueError(msg) from None


def build_icu_plural(forms: Mapping[PluralForm, str] | Mapping[str, str]) -> str:
    """Fold form texts into the canonical plural string.

    Forms with empty text are treated as not supplied.

    Args:
        forms: Mapping of plural category to text, any order

    Returns:
        Canonical string, or "" when no form has text

    Example:
        >>> build_icu_plural({"other": "{} items", "one": "One item"})
        '{0, plural, one {One item} other {{} items}}'
    """
    supplied = {coerce_plural_form(name): text for name, text in forms.items() if text}
    if not supplied:
        return ""
    parts = [f"{form.value} {{{supplied[form]}}}" for form in PluralForm if form in supplied]
    return f"{{0, plural, {' '.join(parts)}}}"


def is_icu_plural(text: str) -> bool:
    """True if text is a canonical-style plural string."""
    return text.startswith(ICU_PLURAL_PREFIX)


def parse_icu_plural(text: str) -> dict[PluralForm, str]:
    """Extract {form: text} from a plural string.

    Unknown category names are skipped. Text that is not a plural string
    yields an empty mapping. Form texts are kept exactly as written
    between their braces.

    Example:
        >>> parse_icu_plural("{0, plural, one {# file} other {# files}}")
        {<PluralForm.ONE: 'one'>: '# file', <PluralForm.OTHER: 'other'>: '# files'}
    """
    content = _ICU_CONTENT_PATTERN.search(text.strip())
    if content is None:
        return {}
    forms: dict[PluralForm, str] = {}
    for match in _FORM_PATTERN.finditer(content.group(1)):
        name = match.group(1).lower()
        try:
            form = PluralForm(name)
        except ValueError:
            logger.debug("Ignoring unknown plural form %r in %r", name, text)
            continue
        forms[form] = match.group(2)
    return {form: forms[form] for form in PluralForm if form in forms}


def select_plural_form(count: int | float | Decimal, locale: str) -> PluralForm:
    """Select the CLDR plural category for count in locale.

    Examples:
        >>> select_plural_form(1, "en")
        <PluralForm.ONE: 'one'>
        >>> select_plural_form(5, "ru")
        <PluralForm.MANY: 'many'>
        >>> select_plural_form(0, "lv")
        <PluralForm.ZERO: 'zero'>

    Unknown or invalid locales fall back to the one/other rule.
    """
    try:
        locale_obj = get_babel_locale(locale)
    except (UnknownLocaleError, ValueError, TypeError):
        return PluralForm.ONE if abs(count) == 1 else PluralForm.OTHER
    return PluralForm(locale_obj.plural_form(count))
