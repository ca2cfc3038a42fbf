"""Catalog compilation into runtime artifacts (JSON, properties, binary).

Python 3.13+.
"""

from .binary_codec import BinaryArtifact, BinaryCodec
from .codecs import ArtifactCodec, OutputCodec, artifact_entries, artifact_filename, get_codec
from .compiler import CompilerConfig, TranslationCompiler
from .json_codec import JsonCodec
from .properties_codec import PropertiesCodec
from .result import (
    CompilationFailure,
    CompilationResult,
    GeneratedArtifact,
    OverallTranslationStats,
    TranslationStats,
)

__all__ = [
    "ArtifactCodec",
    "BinaryArtifact",
    "BinaryCodec",
    "CompilationFailure",
    "CompilationResult",
    "CompilerConfig",
    "GeneratedArtifact",
    "JsonCodec",
    "OutputCodec",
    "OverallTranslationStats",
    "PropertiesCodec",
    "TranslationCompiler",
    "TranslationStats",
    "artifact_entries",
    "artifact_filename",
    "get_codec",
]
