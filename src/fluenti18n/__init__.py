"""fluenti18n - natural-text internationalization.

Source code carries literal natural-language strings instead of symbolic
keys. The pipeline finds those literals, keys each one by a digest of its
text, maintains gettext PO catalogs for translators, compiles them into
compact runtime artifacts and resolves translations at runtime with locale
fallback and caching.

Pipeline:
    MessageExtractor - Scan a source tree into identifier-keyed messages
    CatalogGenerator - Merge extracted messages into messages_<locale>.po
    TranslationCompiler - Compile catalogs into JSON, properties or binary artifacts
    I18n - Resolve translations at runtime

Configuration:
    FluentConfig, load_config - Runtime settings and the fluent.yml loader
    ExtractionConfig, CompilerConfig - Build-time settings

Exceptions:
    FluentI18nError - Base exception class

Submodules:
    fluenti18n.core - Identifiers, plural grammar, argument formatting
    fluenti18n.extraction - Extractors and the extraction orchestrator
    fluenti18n.catalog - PO catalog models, I/O, merge and validation
    fluenti18n.compiler - Artifact codecs and the compiler
    fluenti18n.runtime - Message sources, locale scope, builders
    fluenti18n.diagnostics - Error types and validation reports
"""

from .catalog import CatalogGenerator, read_catalog, write_catalog
from .compiler import CompilationResult, CompilerConfig, TranslationCompiler
from .config import FluentConfig, load_config
from .core import HashCache, Sha256HashGenerator
from .diagnostics import FluentI18nError
from .enums import MessageSourceType, MessageType, OutputFormat, PluralForm
from .extraction import ExtractionConfig, MessageExtractor
from .runtime import (
    I18n,
    LocaleScope,
    MessageDescriptor,
    clear_current_locale,
    get_current_locale,
    set_current_locale,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("fluenti18n")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CatalogGenerator",
    "CompilationResult",
    "CompilerConfig",
    "ExtractionConfig",
    "FluentConfig",
    "FluentI18nError",
    "HashCache",
    "I18n",
    "LocaleScope",
    "MessageDescriptor",
    "MessageExtractor",
    "MessageSourceType",
    "MessageType",
    "OutputFormat",
    "PluralForm",
    "Sha256HashGenerator",
    "TranslationCompiler",
    "__version__",
    "clear_current_locale",
    "get_current_locale",
    "load_config",
    "read_catalog",
    "set_current_locale",
    "write_catalog",
]
