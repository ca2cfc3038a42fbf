"""YAML configuration file (``fluent.yml``).

File layout (camelCase keys, every key optional)::

    basePath: i18n
    supportedLocales: [en, nb, de]
    defaultLocale: en
    encoding: utf-8
    messageSourceType: auto        # auto | json | properties | binary
    caching:
      enabled: true
      timeoutSeconds: 0            # 0 = never expire
    autoReload:
      enabled: false
      intervalSeconds: 60
    fallback: true
    logMissingTranslations: false
    custom:
      anything: goes

Loading never fails on the file itself: a missing file yields defaults
(logged at DEBUG) and an unreadable or malformed file yields defaults
(logged at WARNING). Values that are present but invalid raise ConfigError.

Python 3.13+. Uses PyYAML (safe_load / safe_dump).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from fluenti18n.config.settings import FluentConfig
from fluenti18n.constants import DEFAULT_CONFIG_FILE, DEFAULT_LOCALE
from fluenti18n.diagnostics import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "config_from_mapping",
    "config_to_mapping",
    "create_default_config",
    "load_config",
    "save_config",
]

logger = logging.getLogger(__name__)


def _section(root: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = root.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping, got {type(value).__name__}"
        raise ConfigError(msg)
    return value


def _boolean(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    msg = f"'{key}' must be true or false, got {value!r}"
    raise ConfigError(msg)


def _seconds(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"'{key}' must be a number of seconds, got {value!r}"
        raise ConfigError(msg)
    return float(value)


def config_from_mapping(root: Mapping[str, Any]) -> FluentConfig:
    """Build a FluentConfig from parsed YAML.

    When ``supportedLocales`` is given without ``defaultLocale``, the first
    supported locale becomes the default.

    Raises:
        ConfigError: If a present value has the wrong type or is invalid
    """
    values: dict[str, Any] = {}

    if "basePath" in root:
        values["base_path"] = str(root["basePath"])
    if "supportedLocales" in root:
        locales = root["supportedLocales"]
        if isinstance(locales, str):
            locales = [locales]
        if not isinstance(locales, list):
            msg = f"'supportedLocales' must be a list, got {type(locales).__name__}"
            raise ConfigError(msg)
        values["supported_locales"] = tuple(str(locale) for locale in locales)
        if locales and "defaultLocale" not in root:
            values["default_locale"] = str(locales[0])
    if "defaultLocale" in root:
        values["default_locale"] = str(root["defaultLocale"])
        # A default locale outside the list is served anyway
        supported = values.get("supported_locales", (DEFAULT_LOCALE,))
        if values["default_locale"] not in supported:
            values["supported_locales"] = (values["default_locale"], *supported)
    if "encoding" in root:
        values["encoding"] = str(root["encoding"])
    if "messageSourceType" in root:
        values["message_source_type"] = str(root["messageSourceType"]).lower()

    caching = _section(root, "caching")
    if "enabled" in caching:
        values["enable_caching"] = _boolean(caching["enabled"], "caching.enabled")
    if "timeoutSeconds" in caching:
        values["cache_timeout_seconds"] = _seconds(
            caching["timeoutSeconds"], "caching.timeoutSeconds"
        )

    auto_reload = _section(root, "autoReload")
    if "enabled" in auto_reload:
        values["auto_reload"] = _boolean(auto_reload["enabled"], "autoReload.enabled")
    if "intervalSeconds" in auto_reload:
        values["auto_reload_interval_seconds"] = _seconds(
            auto_reload["intervalSeconds"], "autoReload.intervalSeconds"
        )

    if "fallback" in root:
        values["enable_fallback"] = _boolean(root["fallback"], "fallback")
    if "logMissingTranslations" in root:
        values["log_missing_translations"] = _boolean(
            root["logMissingTranslations"], "logMissingTranslations"
        )
    values["custom_properties"] = dict(_section(root, "custom"))

    return FluentConfig(**values)


def config_to_mapping(config: FluentConfig) -> dict[str, Any]:
    """Inverse of config_from_mapping."""
    mapping: dict[str, Any] = {
        "basePath": config.base_path,
        "supportedLocales": list(config.supported_locales),
        "defaultLocale": config.default_locale,
        "encoding": config.encoding,
        "messageSourceType": config.message_source_type.value,
        "caching": {
            "enabled": config.enable_caching,
            "timeoutSeconds": config.cache_timeout_seconds,
        },
        "autoReload": {
            "enabled": config.auto_reload,
            "intervalSeconds": config.auto_reload_interval_seconds,
        },
        "fallback": config.enable_fallback,
        "logMissingTranslations": config.log_missing_translations,
    }
    if config.custom_properties:
        mapping["custom"] = dict(config.custom_properties)
    return mapping


def load_config(path: str | Path = DEFAULT_CONFIG_FILE) -> FluentConfig:
    """Load settings from a YAML file.

    Raises:
        ConfigError: If the file parses but holds invalid values
    """
    path = Path(path)
    if not path.is_file():
        logger.debug("Configuration file %s not found, using defaults", path)
        return FluentConfig()
    try:
        with path.open(encoding="utf-8") as f:
            root = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Cannot load configuration from %s, using defaults: %s", path, e)
        return FluentConfig()

    if root is None:
        return FluentConfig()
    if not isinstance(root, dict):
        logger.warning(
            "Configuration file %s does not hold a mapping, using defaults", path
        )
        return FluentConfig()
    config = config_from_mapping(root)
    logger.debug("Loaded configuration from %s", path)
    return config


def save_config(config: FluentConfig, path: str | Path) -> Path:
    """Write config as YAML, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(
            config_to_mapping(config), f, sort_keys=False, allow_unicode=True
        )
    return path


def create_default_config(path: str | Path = DEFAULT_CONFIG_FILE) -> bool:
    """Write a starter configuration unless path already exists.

    Returns:
        True if a file was written
    """
    path = Path(path)
    if path.exists():
        return False
    save_config(
        FluentConfig(cache_timeout_seconds=300.0, log_missing_translations=True), path
    )
    logger.info("Created default configuration %s", path)
    return True
