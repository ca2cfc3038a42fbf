"""Hypothesis strategies for fluenti18n property-based testing.

Usage:
    from tests.strategies import natural_texts, artifact_entries
"""

from .messages import (
    artifact_entries,
    artifact_values,
    canonical_plurals,
    context_labels,
    identifiers,
    locales,
    natural_texts,
    plural_form_maps,
)

__all__ = [
    "artifact_entries",
    "artifact_values",
    "canonical_plurals",
    "context_labels",
    "identifiers",
    "locales",
    "natural_texts",
    "plural_form_maps",
]
