"""Runtime settings and the fluent.yml loader.

Python 3.13+.
"""

from .loader import (
    config_from_mapping,
    config_to_mapping,
    create_default_config,
    load_config,
    save_config,
)
from .settings import FluentConfig

__all__ = [
    "FluentConfig",
    "config_from_mapping",
    "config_to_mapping",
    "create_default_config",
    "load_config",
    "save_config",
]
