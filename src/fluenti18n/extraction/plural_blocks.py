"""Plural builder block detection and folding.

A plural message is written as a builder chain::

    label = i18n.plural(count).zero("No items").one("One item").other("{} items")

The chain may span several lines. The scanner finds each builder-entry
marker, bounds the whole chained statement, pulls every ``.form("text")``
sub-call out of the block and folds the forms into the canonical plural
string, which is what gets hashed and translated.

Bounding a block:
    1. Balanced parenthesis scan from the marker to the end of the
       initiating call. Quoted strings (either quote style, with escapes)
       are opaque.
    2. Forward scan to the end of the statement: ``;``, a newline at
       nesting depth 0 whose next non-blank line does not continue the
       chain with ``.``, or a closing bracket that leaves the enclosing
       expression. Strings and ``#`` comments are opaque here as well.

A block whose forms are all missing or empty is dropped without error.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fluenti18n.constants import DEFAULT_PLURAL_MARKER
from fluenti18n.core.plural import build_icu_plural
from fluenti18n.enums import MessageType, PluralForm
from fluenti18n.extraction.literals import decode_literal
from fluenti18n.extraction.models import DiscoveredMessage, SourceLocation

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "PluralBlock",
    "PluralBlockScanner",
    "extract_plural_forms",
    "find_call_end",
    "find_statement_end",
    "plural_seed_text",
]

logger = logging.getLogger(__name__)

_QUOTES = frozenset("\"'")
_OPENERS = frozenset("([{")
_CLOSERS = frozenset(")]}")

# Checked first so a fallback text survives irregular spacing or extra arguments.
# The body is one literal; anything but "," or ")" after it drops the match.
_OTHER_FORM_PATTERN = re.compile(
    r"""\.other\s*\(\s*(["'])((?:(?!\1)[^\\]|\\[\s\S])*)\1\s*[,)]"""
)

_FORM_PATTERN = re.compile(
    r"""\.(zero|one|two|few|many|other)\s*\(\s*"""
    r"""(?:"((?:[^"\\]|\\[\s\S])*)"|'((?:[^'\\]|\\[\s\S])*)')\s*\)"""
)


def _skip_string(content: str, index: int) -> int:
    """Index just past the string literal whose opening quote is at index."""
    quote = content[index]
    i = index + 1
    length = len(content)
    while i < length:
        char = content[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        i += 1
    return length


def find_call_end(content: str, start: int) -> int | None:
    """Index just past the parenthesized call that begins at or after start.

    Returns:
        End offset, or None when the parentheses never balance
    """
    depth = 0
    i = start
    length = len(content)
    while i < length:
        char = content[i]
        if char in _QUOTES:
            i = _skip_string(content, i)
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None


def _continues_chain(content: str, newline: int) -> bool:
    """True if the first non-blank character after newline is a '.'."""
    i = newline + 1
    length = len(content)
    while i < length and content[i] in " \t\r\n":
        i += 1
    return i < length and content[i] == "."


def find_statement_end(content: str, start: int) -> int:
    """End offset (exclusive) of the statement that continues from start."""
    depth = 0
    i = start
    length = len(content)
    while i < length:
        char = content[i]
        if char in _QUOTES:
            i = _skip_string(content, i)
            continue
        if char == "#":
            newline = content.find("\n", i)
            i = length if newline == -1 else newline
            continue
        if char == "\\" and content.startswith("\n", i + 1):
            i += 2
            continue
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth < 0:
                return i
        elif char == ";" and depth == 0:
            return i + 1
        elif char == "\n" and depth == 0 and not _continues_chain(content, i):
            return i
        i += 1
    return length


def extract_plural_forms(block: str) -> dict[PluralForm, str]:
    """Collect form texts from the sub-calls in block.

    Texts are decoded like string literals. Empty texts count as not
    supplied. Later calls for the same form win.
    """
    forms: dict[PluralForm, str] = {}
    other = _OTHER_FORM_PATTERN.search(block)
    if other is not None and other.group(2):
        forms[PluralForm.OTHER] = decode_literal(other.group(2))
    for match in _FORM_PATTERN.finditer(block):
        body = match.group(2) if match.group(2) is not None else match.group(3)
        text = decode_literal(body)
        if text:
            forms[PluralForm(match.group(1))] = text
    return forms


def plural_seed_text(forms: Mapping[PluralForm, str]) -> str:
    """Representative text of a form set: one, else other, else the first form."""
    for form in (PluralForm.ONE, PluralForm.OTHER):
        if forms.get(form):
            return forms[form]
    return next(iter(forms.values()), "")


@dataclass(frozen=True, slots=True)
class PluralBlock:
    """A bounded plural builder chain.

    Attributes:
        start: Offset of the builder-entry marker
        end: Offset just past the statement
        start_line: 1-based line of the marker
        end_line: 1-based line of the last character in the block
        forms: Supplied form texts
    """

    start: int
    end: int
    start_line: int
    end_line: int
    forms: dict[PluralForm, str]

    @property
    def lines(self) -> range:
        """Line span covered by the block."""
        return range(self.start_line, self.end_line + 1)

    @property
    def canonical_text(self) -> str:
        """Canonical plural string for the supplied forms."""
        return build_icu_plural(self.forms)


class PluralBlockScanner:
    """Finds plural builder blocks in source text and folds them into messages."""

    __slots__ = ("_marker",)

    def __init__(self, marker: str | re.Pattern[str] = DEFAULT_PLURAL_MARKER) -> None:
        self._marker = re.compile(marker) if isinstance(marker, str) else marker

    def find_blocks(self, content: str) -> list[PluralBlock]:
        """All plural blocks in content that supply at least one form."""
        blocks: list[PluralBlock] = []
        for marker in self._marker.finditer(content):
            call_end = find_call_end(content, marker.start())
            if call_end is None:
                logger.debug("Unbalanced plural call at offset %d", marker.start())
                continue
            end = find_statement_end(content, call_end)
            forms = extract_plural_forms(content[marker.start() : end])
            if not forms:
                continue
            blocks.append(
                PluralBlock(
                    start=marker.start(),
                    end=end,
                    start_line=content.count("\n", 0, marker.start()) + 1,
                    end_line=content.count("\n", 0, max(end - 1, marker.start())) + 1,
                    forms=forms,
                )
            )
        return blocks

    def scan(self, content: str, file_path: str) -> tuple[list[DiscoveredMessage], set[int]]:
        """Fold plural blocks into PLURAL messages.

        The location of a folded message is the line of its marker, even when
        the forms sit on later lines.

        Returns:
            (messages, covered lines) where covered lines are every line that
            falls inside a block
        """
        messages: list[DiscoveredMessage] = []
        covered: set[int] = set()
        for block in self.find_blocks(content):
            covered.update(block.lines)
            message = DiscoveredMessage(
                natural_text=block.canonical_text,
                type=MessageType.PLURAL,
                plural_forms=dict(block.forms),
            )
            message.add_location(SourceLocation.from_offset(file_path, content, block.start))
            logger.debug(
                "Folded plural block %s:%d (%r) into %d form(s)",
                file_path,
                block.start_line,
                plural_seed_text(block.forms),
                len(block.forms),
            )
            messages.append(message)
        return messages, covered
