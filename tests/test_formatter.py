"""Tests for message argument substitution (core.formatter)."""

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fluenti18n.core.formatter import MessageFormatter, simple_format
from fluenti18n.diagnostics import FormattingError
from tests.strategies import natural_texts


@pytest.fixture
def formatter() -> MessageFormatter:
    return MessageFormatter()


class TestLocaleAwareFormat:
    """Tier 1: Babel rendering of indexed placeholders."""

    def test_plain_argument(self, formatter: MessageFormatter) -> None:
        assert formatter.format("Hi {0}", ["Kari"], "en") == "Hi Kari"

    def test_number_grouping_follows_locale(self, formatter: MessageFormatter) -> None:
        """Numbers without a type use the locale's decimal format."""
        assert formatter.format("{0}", [1234], "en") == "1,234"
        assert formatter.format("{0}", [1234], "de") == "1.234"

    def test_typed_placeholders(self, formatter: MessageFormatter) -> None:
        assert formatter.format("{0,number}", [Decimal("1234.5")], "en") == "1,234.5"
        assert formatter.format("{0,integer}", [1234], "en") == "1,234"
        assert formatter.format("{0,percent}", [0.25], "en") == "25%"
        assert formatter.format("{0,currency,EUR}", [1234.5], "en") == "€1,234.50"

    def test_date_styles(self, formatter: MessageFormatter) -> None:
        day = date(2024, 3, 5)
        assert formatter.format("{0,date,short}", [day], "en") == "3/5/24"
        assert formatter.format("{0,date}", [day], "en") == "Mar 5, 2024"

    def test_argument_reuse_and_order(self, formatter: MessageFormatter) -> None:
        """Indices may repeat and appear in any order."""
        assert formatter.format("{1} {0} {1}", ["a", "b"], "en") == "b a b"

    @pytest.mark.parametrize(
        ("template", "args"),
        [
            ("{0,number}", ["many"]),
            ("{0,currency}", [5]),
            ("{0,date,tiny}", [date(2024, 1, 1)]),
            ("{0,date}", ["yesterday"]),
            ("{2}", ["a"]),
            ("Hello, {}!", ["Bob"]),
            ("{name}", ["Bob"]),
            ("{0} }", ["x"]),
        ],
    )
    def test_errors(self, formatter: MessageFormatter, template: str, args: list[object]) -> None:
        """Mismatched templates raise FormattingError carrying a fallback."""
        with pytest.raises(FormattingError) as exc_info:
            formatter.format(template, args, "en")
        assert exc_info.value.fallback_value

    def test_unknown_locale(self, formatter: MessageFormatter) -> None:
        with pytest.raises(FormattingError, match="Unknown locale"):
            formatter.format("{0}", [1], "xx")

    def test_bool_is_not_a_number(self, formatter: MessageFormatter) -> None:
        with pytest.raises(FormattingError):
            formatter.format("{0,number}", [True], "en")


class TestFormatMessage:
    """Tier 2 fallback through format_message."""

    def test_no_args_returns_template(self, formatter: MessageFormatter) -> None:
        """Templates are untouched without arguments, braces included."""
        assert formatter.format_message("Hello, {}!", [], "en") == "Hello, {}!"
        assert formatter.format_message("{0, plural, other {x}}", [], "en") == "{0, plural, other {x}}"

    def test_empty_placeholder_falls_back(self, formatter: MessageFormatter) -> None:
        assert formatter.format_message("Hello, {}!", ["Bob"], "en") == "Hello, Bob!"

    def test_indexed_uses_babel(self, formatter: MessageFormatter) -> None:
        assert formatter.format_message("{0} of {1}", [3, 10], "en") == "3 of 10"

    def test_missing_argument_leaves_placeholder(self, formatter: MessageFormatter) -> None:
        assert formatter.format_message("{0} and {1}", ["x"], "en") == "x and {1}"

    def test_unknown_locale_still_renders(self, formatter: MessageFormatter) -> None:
        assert formatter.format_message("Hi {0}", ["Ola"], "xx") == "Hi Ola"

    @given(text=natural_texts, args=st.lists(st.integers(), max_size=3))
    def test_never_raises(self, text: str, args: list[int]) -> None:
        """Brace-free text comes back unchanged whatever the arguments."""
        assert MessageFormatter().format_message(text, args, "en") == text


class TestSimpleFormat:
    """Positional substitution."""

    def test_indexed(self) -> None:
        assert simple_format("{0} of {1}", [3, 10]) == "3 of 10"

    def test_sequential(self) -> None:
        assert simple_format("{} and {}", ["a", "b"]) == "a and b"

    def test_extra_args_ignored(self) -> None:
        assert simple_format("Hello, {}!", ["Bob", "Alice"]) == "Hello, Bob!"

    def test_argument_text_is_not_substituted_again(self) -> None:
        """A placeholder inside an argument value is rendered as written."""
        assert simple_format("{0} and {1}", ["{1}", "x"]) == "{1} and x"
        assert simple_format("{} then {}", ["{}", "b"]) == "{} then b"

    def test_missing_arguments_left_in_place(self) -> None:
        assert simple_format("{0} {2}", ["a"]) == "a {2}"
        assert simple_format("{} {} {}", ["a"]) == "a {} {}"

    def test_unprintable_argument(self) -> None:
        """Arguments whose __str__ raises are rendered by repr."""

        class Broken:
            def __str__(self) -> str:
                raise RuntimeError

        assert simple_format("{0}", [Broken()]).startswith("<")
