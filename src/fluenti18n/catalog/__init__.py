"""Translation catalogs: PO file I/O, generation from extraction, validation.

Python 3.13+.
"""

from .generator import CatalogGenerationSummary, CatalogGenerator, LocaleCatalogSummary
from .models import CatalogEntry, TranslationData
from .pofile import catalog_path, format_catalog, parse_catalog, read_catalog, write_catalog
from .validation import count_placeholders, validate_catalog, validate_catalogs

__all__ = [
    "CatalogEntry",
    "CatalogGenerationSummary",
    "CatalogGenerator",
    "LocaleCatalogSummary",
    "TranslationData",
    "catalog_path",
    "count_placeholders",
    "format_catalog",
    "parse_catalog",
    "read_catalog",
    "validate_catalog",
    "validate_catalogs",
    "write_catalog",
]
