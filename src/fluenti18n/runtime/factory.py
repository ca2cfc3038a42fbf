"""Message source selection from configuration.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fluenti18n.enums import MessageSourceType
from fluenti18n.runtime.sources import (
    ArtifactMessageSource,
    BinaryMessageSource,
    JsonMessageSource,
    NullMessageSource,
    PropertiesMessageSource,
)

if TYPE_CHECKING:
    from fluenti18n.config.settings import FluentConfig
    from fluenti18n.runtime.sources import MessageSource

__all__ = ["SOURCE_TYPES", "create_message_source", "detect_source_type"]

logger = logging.getLogger(__name__)

# Auto-detection order: binary loads fastest, properties is the last resort
SOURCE_TYPES: dict[MessageSourceType, type[ArtifactMessageSource]] = {
    MessageSourceType.BINARY: BinaryMessageSource,
    MessageSourceType.JSON: JsonMessageSource,
    MessageSourceType.PROPERTIES: PropertiesMessageSource,
}


def detect_source_type(base_path: str) -> MessageSourceType | None:
    """First artifact format present in base_path, or None."""
    for source_type, source_class in SOURCE_TYPES.items():
        if source_class.has_artifacts(base_path):
            return source_type
    return None


def create_message_source(config: FluentConfig) -> MessageSource:
    """Build the message source described by config.

    An explicit type is honoured even if no artifact exists yet (lookups
    miss until one is compiled). AUTO picks binary, then JSON, then
    properties; with nothing to serve it returns a NullMessageSource.
    """
    source_type = config.message_source_type
    if source_type is MessageSourceType.AUTO:
        detected = detect_source_type(config.base_path)
        if detected is None:
            logger.warning(
                "No translation artifacts found in %s; every lookup will miss",
                config.base_path,
            )
            return NullMessageSource()
        logger.debug("Detected %s artifacts in %s", detected, config.base_path)
        source_type = detected

    source_class = SOURCE_TYPES[source_type]
    return source_class(
        config.base_path,
        config.supported_locales,
        encoding=config.encoding,
        enable_caching=config.enable_caching,
        cache_timeout_seconds=config.cache_timeout_seconds,
        auto_reload=config.auto_reload,
        auto_reload_interval_seconds=config.auto_reload_interval_seconds,
    )
