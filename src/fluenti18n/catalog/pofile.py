"""Gettext PO catalog reading and writing.

One file per locale, ``messages_<locale>.po``. Records look like::

    #: src/app/views.py:10
    #: templates/home.html:3
    #. hash: eZk3mCcqVqY
    msgctxt "button"
    msgid "Save"
    msgstr "Lagre"

Plural messages store the canonical plural string as msgid and the
translated plural string as msgstr. Messages that no longer occur in source
are written as obsolete ``#~`` records. Legacy gettext plural records
(``msgid_plural`` / ``msgstr[n]``) are read as one/other forms.

PO syntax (escapes, continuation lines, comments) is handled by Babel's
``babel.messages`` package; this module maps its Message objects to and
from CatalogEntry.

Python 3.13+. Uses Babel for PO I/O.
"""

from __future__ import annotations

import io
import logging
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from babel.core import UnknownLocaleError
from babel.messages.catalog import Catalog, Message
from babel.messages.pofile import PoFileError, read_po, write_po

from fluenti18n.catalog.models import CatalogEntry, TranslationData
from fluenti18n.constants import ARTIFACT_BASENAME, CATALOG_EXTENSION
from fluenti18n.core.hashing import Sha256HashGenerator
from fluenti18n.core.plural import build_icu_plural, is_icu_plural, parse_icu_plural
from fluenti18n.diagnostics import CatalogParseError
from fluenti18n.enums import PluralForm
from fluenti18n.extraction.models import SourceLocation
from fluenti18n.locale_utils import get_babel_locale

if TYPE_CHECKING:
    from fluenti18n.core.hashing import HashGenerator

__all__ = [
    "catalog_path",
    "format_catalog",
    "parse_catalog",
    "read_catalog",
    "write_catalog",
]

logger = logging.getLogger(__name__)

_HASH_COMMENT = re.compile(r"^hash:\s*(\S+)\s*$")
_CONTEXT_COMMENT = re.compile(r"^context:\s*(.+?)\s*$")
_FILE_LOCALE = re.compile(rf"^{ARTIFACT_BASENAME}_(.+)\.{CATALOG_EXTENSION}$")

_HEADER_COMMENT = "# {locale} translations\n# Generated by fluenti18n"


def catalog_path(catalog_dir: str | Path, locale: str) -> Path:
    """Path of the PO file for locale in catalog_dir."""
    return Path(catalog_dir) / f"{ARTIFACT_BASENAME}_{locale}.{CATALOG_EXTENSION}"


def _locale_from_path(path: Path) -> str | None:
    match = _FILE_LOCALE.match(path.name)
    return match.group(1) if match else None


# ============================================================================
# READING
# ============================================================================


def read_catalog(
    path: str | Path,
    locale: str | None = None,
    *,
    hash_generator: HashGenerator | None = None,
) -> TranslationData:
    """Parse the PO file at path.

    Args:
        path: Catalog file
        locale: Locale of the catalog (default: from the file name, then the
            Language header)
        hash_generator: Computes identifiers for entries without a hash comment

    Raises:
        FileNotFoundError: If the file does not exist
        CatalogParseError: If the content is not a valid catalog
    """
    path = Path(path)
    payload = path.read_bytes()
    return parse_catalog(
        payload,
        locale or _locale_from_path(path),
        path=path,
        hash_generator=hash_generator,
    )


def parse_catalog(
    payload: bytes | str,
    locale: str | None = None,
    *,
    path: str | Path | None = None,
    hash_generator: HashGenerator | None = None,
) -> TranslationData:
    """Parse PO content.

    Raises:
        CatalogParseError: If the content is not a valid catalog
    """
    generator = hash_generator or Sha256HashGenerator()
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    try:
        catalog = read_po(io.BytesIO(payload), locale=None, abort_invalid=True)
    except PoFileError as e:
        msg = f"Invalid catalog{f' {path}' if path else ''}: {e}"
        # Babel counts lines from 0.
        line = e.lineno + 1 if isinstance(e.lineno, int) else None
        raise CatalogParseError(msg, path=path, line=line) from e
    except (UnicodeDecodeError, ValueError) as e:
        msg = f"Cannot decode catalog{f' {path}' if path else ''}: {e}"
        raise CatalogParseError(msg, path=path) from e

    resolved_locale = locale or catalog.locale_identifier or ""
    entries: list[CatalogEntry] = []
    for message in catalog:
        if not message.id:
            continue  # header
        entry = _entry_from_message(message, generator, obsolete=False, path=path)
        if entry is not None:
            entries.append(entry)
    for message in catalog.obsolete.values():
        entry = _entry_from_message(message, generator, obsolete=True, path=path)
        if entry is not None:
            entries.append(entry)

    data = TranslationData.from_entries(
        resolved_locale,
        entries,
        metadata=dict(catalog.mime_headers),
        creation_date=catalog.creation_date,
        revision_date=catalog.revision_date,
    )
    logger.debug(
        "Parsed catalog %s: %d entries, %d obsolete",
        path or resolved_locale,
        data.entry_count,
        len(data.obsolete),
    )
    return data


def _entry_from_message(
    message: Message,
    generator: HashGenerator,
    *,
    obsolete: bool,
    path: str | Path | None,
) -> CatalogEntry | None:
    identifier: str | None = None
    context: str | None = message.context or None
    for comment in message.auto_comments:
        if (match := _HASH_COMMENT.match(comment)) is not None:
            identifier = match.group(1)
        elif context is None and (match := _CONTEXT_COMMENT.match(comment)) is not None:
            context = match.group(1)

    plural_forms: dict[PluralForm, str] | None = None
    translated_forms: dict[PluralForm, str] | None = None
    if isinstance(message.id, (list, tuple)):
        # Legacy gettext plural record: msgid/msgid_plural, msgstr[0]/msgstr[1]
        plural_forms = {PluralForm.ONE: message.id[0], PluralForm.OTHER: message.id[1]}
        strings = tuple(message.string or ())
        translated_forms = {
            form: text
            for form, text in zip((PluralForm.ONE, PluralForm.OTHER), strings, strict=False)
            if text
        }
        original = build_icu_plural(plural_forms)
        translation = build_icu_plural(translated_forms)
    else:
        original = message.id
        translation = message.string or ""
        if is_icu_plural(original):
            plural_forms = parse_icu_plural(original)
            translated_forms = parse_icu_plural(translation) if translation else {}

    if not original:
        logger.debug("Skipping entry with empty original text in %s", path)
        return None
    if identifier is None:
        identifier = generator.generate(original, context)

    locations = tuple(
        SourceLocation(filename, lineno if isinstance(lineno, int) and lineno > 0 else 1)
        for filename, lineno in message.locations
    )
    return CatalogEntry(
        identifier=identifier,
        original_text=original,
        translation=translation,
        context=context,
        plural_forms=plural_forms,
        translated_forms=translated_forms,
        source_locations=locations,
        flags=frozenset(message.flags),
        user_comments=tuple(message.user_comments),
        obsolete=obsolete,
    )


# ============================================================================
# WRITING
# ============================================================================


def _message_for(entry: CatalogEntry) -> Message:
    return Message(
        entry.original_text,
        entry.translation,
        locations=[(loc.file_path, loc.line) for loc in entry.source_locations],
        flags=sorted(entry.flags),
        auto_comments=[f"hash: {entry.identifier}"],
        user_comments=list(entry.user_comments),
        context=entry.context,
    )


def _catalog_locale(locale: str) -> str | None:
    try:
        return str(get_babel_locale(locale))
    except (UnknownLocaleError, ValueError, TypeError):
        return None


def format_catalog(data: TranslationData) -> bytes:
    """Serialize data as PO bytes, ordered by identifier.

    The header keeps the catalog's creation and revision dates, so writing
    unchanged data twice yields identical bytes.
    """
    catalog = Catalog(
        locale=_catalog_locale(data.locale) if data.locale else None,
        header_comment=_HEADER_COMMENT.format(locale=data.locale),
        creation_date=data.creation_date or datetime.now(UTC),
        revision_date=data.revision_date,
        last_translator=data.metadata.get("Last-Translator"),
        language_team=data.metadata.get("Language-Team"),
        fuzzy=False,
    )
    for entry in data.entries.values():
        # Babel keys contextual messages by (msgid, msgctxt).
        catalog[entry.original_text] = _message_for(entry)
    for entry in data.obsolete:
        key = (entry.original_text, entry.context) if entry.context else entry.original_text
        catalog.obsolete[key] = _message_for(entry)

    buffer = io.BytesIO()
    write_po(buffer, catalog, width=76)
    return buffer.getvalue()


def write_catalog(data: TranslationData, path: str | Path) -> Path:
    """Write data to path as a PO file, creating parent directories.

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(format_catalog(data))
    logger.debug("Wrote catalog %s (%d entries)", path, data.entry_count)
    return path
