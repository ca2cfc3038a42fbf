"""Source extraction: scanning source trees for natural-language literals.

Python 3.13+.
"""

from .config import ExtractionConfig
from .extractors import (
    AnnotationExtractor,
    MethodCallExtractor,
    PatternExtractor,
    SourceExtractor,
    TemplateExtractor,
    default_extractors,
)
from .models import DiscoveredMessage, ExtractionResult, FileExtractionFailure, SourceLocation
from .orchestrator import MessageExtractor
from .plural_blocks import PluralBlock, PluralBlockScanner

__all__ = [
    "AnnotationExtractor",
    "DiscoveredMessage",
    "ExtractionConfig",
    "ExtractionResult",
    "FileExtractionFailure",
    "MessageExtractor",
    "MethodCallExtractor",
    "PatternExtractor",
    "PluralBlock",
    "PluralBlockScanner",
    "SourceExtractor",
    "TemplateExtractor",
    "default_extractors",
]
