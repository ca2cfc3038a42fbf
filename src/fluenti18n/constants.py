"""Shared constants for fluenti18n.

Centralizes the values that more than one stage of the pipeline must agree on:
identifier shape, artifact naming, the binary artifact header, and the default
extraction patterns. Keeping them here avoids circular imports between the
extraction, compiler and runtime packages.

Constants are grouped by domain:
- Identifiers: content-addressed hash shape
- Artifacts: file naming and binary header
- Plural grammar: canonical ICU plural markers
- Extraction defaults: file, call, annotation, template and plural patterns
- Runtime defaults: configuration defaults shared by config and runtime

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Identifiers
    "HASH_LENGTH",
    "CONTEXT_SEPARATOR",
    # Artifacts
    "ARTIFACT_BASENAME",
    "CATALOG_EXTENSION",
    "BINARY_MAGIC",
    "BINARY_VERSION",
    # Plural grammar
    "ICU_PLURAL_PREFIX",
    # Extraction defaults
    "DEFAULT_SOURCE_DIRECTORIES",
    "DEFAULT_FILE_PATTERNS",
    "DEFAULT_CALL_PATTERNS",
    "DEFAULT_ANNOTATION_PATTERNS",
    "DEFAULT_TEMPLATE_PATTERNS",
    "DEFAULT_CONTEXT_PATTERN",
    "DEFAULT_PLURAL_MARKER",
    "DOUBLE_QUOTED_LITERAL",
    "SINGLE_QUOTED_LITERAL",
    "CONTEXT_MARKER",
    "SOURCE_EXTENSIONS",
    "TEMPLATE_EXTENSIONS",
    # Runtime defaults
    "DEFAULT_BASE_PATH",
    "DEFAULT_LOCALE",
    "DEFAULT_ENCODING",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_AUTO_RELOAD_INTERVAL",
]

# ============================================================================
# IDENTIFIERS
# ============================================================================

# SHA-256 digest, URL-safe base64 without padding, truncated to this length.
# 11 characters carry 66 bits of digest: accidental merges are not a practical concern.
HASH_LENGTH: int = 11

# Contextual identifiers hash f"{context}{CONTEXT_SEPARATOR}{text}".
CONTEXT_SEPARATOR: str = ":"

# ============================================================================
# ARTIFACTS
# ============================================================================

# Catalog files and runtime artifacts are named f"{ARTIFACT_BASENAME}_{locale}.{ext}".
ARTIFACT_BASENAME: str = "messages"
CATALOG_EXTENSION: str = "po"

# Binary artifact header (little-endian, fixed width prefixes).
BINARY_MAGIC: bytes = b"FL18"
BINARY_VERSION: int = 1

# ============================================================================
# PLURAL GRAMMAR
# ============================================================================

ICU_PLURAL_PREFIX: str = "{0, plural,"

# ============================================================================
# EXTRACTION DEFAULTS
# ============================================================================

DEFAULT_SOURCE_DIRECTORIES: tuple[str, ...] = ("src", "templates")

# Matched against the file name only (re.fullmatch).
DEFAULT_FILE_PATTERNS: tuple[str, ...] = (
    r".*\.py",
    r".*\.html",
    r".*\.jinja2?",
    r".*\.j2",
)

SOURCE_EXTENSIONS: tuple[str, ...] = (".py",)
TEMPLATE_EXTENSIONS: tuple[str, ...] = (".html", ".jinja", ".jinja2", ".j2")

# Body of a quoted literal (group 1). Escaped quotes do not end it.
DOUBLE_QUOTED_LITERAL: str = r'"((?:[^"\\]|\\[\s\S])+)"'
SINGLE_QUOTED_LITERAL: str = r"'((?:[^'\\]|\\[\s\S])+)'"


def _quoted(prefix: str) -> tuple[str, str]:
    return prefix + DOUBLE_QUOTED_LITERAL, prefix + SINGLE_QUOTED_LITERAL


DEFAULT_CALL_PATTERNS: tuple[str, ...] = (
    *_quoted(r"i18n\.translate\s*\(\s*"),
    *_quoted(r"i18n\.t\s*\(\s*"),
    *_quoted(r"i18n\.describe\s*\(\s*"),
    *_quoted(r"i18n\.context\([^)]+\)\.(?:translate|describe)\s*\(\s*"),
)

DEFAULT_ANNOTATION_PATTERNS: tuple[str, ...] = (
    *_quoted(r"@translatable\s*\(\s*"),
    *_quoted(r"@message\s*\(\s*"),
)

DEFAULT_TEMPLATE_PATTERNS: tuple[str, ...] = (
    *_quoted(r"\{\{\s*i18n\.(?:translate|t)\(\s*"),
    *_quoted(r"\{\{\s*_\(\s*"),
)

# Pulls the label out of a contextual call span.
DEFAULT_CONTEXT_PATTERN: str = r"""i18n\.context\(\s*["']([^"']+)["']\s*\)"""

# Substring that classifies a call match as contextual.
CONTEXT_MARKER: str = "context("

DEFAULT_PLURAL_MARKER: str = r"i18n\.plural\s*\([^)]*\)"

# ============================================================================
# RUNTIME DEFAULTS
# ============================================================================

DEFAULT_BASE_PATH: str = "i18n"
DEFAULT_LOCALE: str = "en"
DEFAULT_ENCODING: str = "utf-8"
DEFAULT_CONFIG_FILE: str = "fluent.yml"
DEFAULT_AUTO_RELOAD_INTERVAL: float = 60.0
