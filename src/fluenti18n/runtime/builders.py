"""Fluent builders returned by the I18n facade.

    i18n.context("button").translate("Save")
    i18n.plural(count).zero("No items").one("One item").other("{} items").format()
    i18n.describe("Order {0} shipped", order_id)    # resolved later

Builders hold a reference to the facade that created them and resolve
through it, so they follow its message source and current locale.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fluenti18n.core.plural import (
    build_icu_plural,
    is_icu_plural,
    parse_icu_plural,
    select_plural_form,
)
from fluenti18n.enums import PluralForm

if TYPE_CHECKING:
    from decimal import Decimal

    from fluenti18n.runtime.i18n import I18n

__all__ = ["ContextBuilder", "MessageDescriptor", "PluralBuilder"]


@dataclass(frozen=True, slots=True)
class MessageDescriptor:
    """A message captured for later resolution.

    Useful where the locale is not known yet, e.g. module-level constants or
    messages queued for a user whose locale is looked up at send time.

    Attributes:
        identifier: Content identifier of natural_text (with context)
        natural_text: Source-language text, also the fallback
        args: Formatting arguments
        context: Context label, when the message is contextual
    """

    identifier: str
    natural_text: str
    args: tuple[object, ...] = ()
    context: str | None = None

    def __str__(self) -> str:
        return self.natural_text

    def with_args(self, *args: object) -> MessageDescriptor:
        """Copy with args appended to the existing arguments."""
        return MessageDescriptor(
            identifier=self.identifier,
            natural_text=self.natural_text,
            args=(*self.args, *args),
            context=self.context,
        )


class ContextBuilder:
    """Resolves messages scoped by a context label.

    The same natural text under different labels gets different
    identifiers, so "Save" on a button and "Save" in a file menu can be
    translated differently.
    """

    __slots__ = ("_i18n", "_label", "description_text")

    def __init__(self, i18n: I18n, label: str) -> None:
        if not label:
            msg = "Context label must not be empty"
            raise ValueError(msg)
        self._i18n = i18n
        self._label = label
        self.description_text: str | None = None

    @property
    def label(self) -> str:
        return self._label

    def description(self, text: str) -> ContextBuilder:
        """Attach a human-readable note for translators; returns self."""
        self.description_text = text
        return self

    def translate(self, natural_text: str, *args: object) -> str:
        return self._i18n.translate(natural_text, *args, context=self._label)

    def describe(self, natural_text: str, *args: object) -> MessageDescriptor:
        return self._i18n.describe(natural_text, *args, context=self._label)


class PluralBuilder:
    """Collects plural form texts and resolves the one count needs.

    The forms fold into one canonical string (fixed form order, so call
    order does not matter) whose identifier is looked up. A translated
    plural string is split back into forms and the CLDR category of count
    in the current locale picks one; ``other`` covers missing categories.
    An explicit ``zero`` form is used for a count of 0 even in locales whose
    CLDR rules have no zero category.

    ``{0}``, ``{}`` and ``#`` in the chosen text are replaced by the count.
    """

    __slots__ = ("_count", "_forms", "_i18n")

    def __init__(self, i18n: I18n, count: int | float | Decimal) -> None:
        self._i18n = i18n
        self._count = count
        self._forms: dict[PluralForm, str] = {}

    @property
    def count(self) -> int | float | Decimal:
        return self._count

    @property
    def forms(self) -> dict[PluralForm, str]:
        """Supplied forms in canonical order."""
        return {form: self._forms[form] for form in PluralForm if form in self._forms}

    def form(self, form: PluralForm | str, natural_text: str) -> PluralBuilder:
        self._forms[PluralForm(form)] = natural_text
        return self

    def zero(self, natural_text: str) -> PluralBuilder:
        return self.form(PluralForm.ZERO, natural_text)

    def one(self, natural_text: str) -> PluralBuilder:
        return self.form(PluralForm.ONE, natural_text)

    def two(self, natural_text: str) -> PluralBuilder:
        return self.form(PluralForm.TWO, natural_text)

    def few(self, natural_text: str) -> PluralBuilder:
        return self.form(PluralForm.FEW, natural_text)

    def many(self, natural_text: str) -> PluralBuilder:
        return self.form(PluralForm.MANY, natural_text)

    def other(self, natural_text: str) -> PluralBuilder:
        return self.form(PluralForm.OTHER, natural_text)

    @property
    def canonical_text(self) -> str:
        """Canonical plural string of the supplied forms ("" if none)."""
        return build_icu_plural(self._forms)

    def format(self) -> str:
        canonical = self.canonical_text
        if not canonical:
            return str(self._count)

        locale = self._i18n.current_locale
        source_forms = {form: text for form, text in self._forms.items() if text}
        text = self._pick(source_forms, select_plural_form(self._count, self._i18n.default_locale))

        identifier = self._i18n.identifier_for(canonical)
        result = self._i18n.lookup(identifier, canonical, locale)
        if result.found:
            if is_icu_plural(result.translation):
                translated = parse_icu_plural(result.translation)
                text = self._pick(translated, select_plural_form(self._count, locale)) or text
            else:
                text = result.translation

        if text is None:
            return str(self._count)
        count = str(self._count)
        return text.replace("{0}", count).replace("{}", count).replace("#", count)

    def __str__(self) -> str:
        return self.format()

    def _pick(self, forms: dict[PluralForm, str], category: PluralForm) -> str | None:
        if self._count == 0 and forms.get(PluralForm.ZERO):
            return forms[PluralForm.ZERO]
        return forms.get(category) or forms.get(PluralForm.OTHER)
