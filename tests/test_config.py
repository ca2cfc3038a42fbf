"""Tests for runtime settings and the fluent.yml loader (config package)."""

import logging
from pathlib import Path

import pytest
import yaml

from fluenti18n.config import (
    FluentConfig,
    config_from_mapping,
    config_to_mapping,
    create_default_config,
    load_config,
    save_config,
)
from fluenti18n.diagnostics import ConfigError
from fluenti18n.enums import MessageSourceType


class TestFluentConfig:
    def test_defaults(self) -> None:
        config = FluentConfig()
        assert config.base_path == "i18n"
        assert config.supported_locales == ("en",)
        assert config.default_locale == "en"
        assert config.message_source_type is MessageSourceType.AUTO
        assert config.enable_fallback
        assert not config.log_missing_translations

    def test_normalization(self) -> None:
        config = FluentConfig(
            supported_locales=(" en", "nb", "en "),
            message_source_type="json",  # type: ignore[arg-type]
            custom_properties={"theme": "dark"},
        )
        assert config.supported_locales == ("en", "nb")
        assert config.message_source_type is MessageSourceType.JSON
        with pytest.raises(TypeError):
            config.custom_properties["theme"] = "light"  # type: ignore[index]

    def test_single_locale_string(self) -> None:
        config = FluentConfig(supported_locales="en")  # type: ignore[arg-type]
        assert config.supported_locales == ("en",)

    @pytest.mark.parametrize(
        ("kwargs", "match"),
        [
            ({"message_source_type": "xml"}, "Unknown message source type"),
            ({"base_path": ""}, "base_path"),
            ({"supported_locales": ()}, "supported_locales"),
            ({"default_locale": "de"}, "is not in supported_locales"),
            ({"encoding": ""}, "encoding"),
            ({"cache_timeout_seconds": -1}, "cache_timeout_seconds"),
            ({"auto_reload_interval_seconds": -1}, "auto_reload_interval_seconds"),
        ],
    )
    def test_invalid(self, kwargs: dict[str, object], match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            FluentConfig(**kwargs)  # type: ignore[arg-type]

    def test_replace_revalidates(self) -> None:
        config = FluentConfig(supported_locales=("en", "nb"))
        assert config.replace(default_locale="nb").default_locale == "nb"
        with pytest.raises(ConfigError):
            config.replace(default_locale="fr")

    def test_is_supported(self) -> None:
        config = FluentConfig(supported_locales=("en", "nb"))
        assert config.is_supported("nb")
        assert not config.is_supported("de")


class TestMapping:
    """camelCase YAML keys to settings and back."""

    def test_full_mapping(self) -> None:
        config = config_from_mapping(
            {
                "basePath": "translations",
                "supportedLocales": ["en", "nb"],
                "defaultLocale": "nb",
                "messageSourceType": "BINARY",
                "caching": {"enabled": False, "timeoutSeconds": 30},
                "autoReload": {"enabled": True, "intervalSeconds": 5},
                "fallback": False,
                "logMissingTranslations": True,
                "custom": {"team": "web"},
            }
        )
        assert config.base_path == "translations"
        assert config.default_locale == "nb"
        assert config.message_source_type is MessageSourceType.BINARY
        assert not config.enable_caching
        assert config.cache_timeout_seconds == 30.0
        assert config.auto_reload
        assert config.auto_reload_interval_seconds == 5.0
        assert not config.enable_fallback
        assert config.log_missing_translations
        assert dict(config.custom_properties) == {"team": "web"}

    def test_first_locale_is_default(self) -> None:
        config = config_from_mapping({"supportedLocales": ["nb", "en"]})
        assert config.default_locale == "nb"

    def test_default_locale_added_to_supported(self) -> None:
        config = config_from_mapping({"supportedLocales": ["nb"], "defaultLocale": "en"})
        assert config.supported_locales == ("en", "nb")

    @pytest.mark.parametrize(
        ("root", "match"),
        [
            ({"supportedLocales": 5}, "must be a list"),
            ({"caching": "yes"}, "must be a mapping"),
            ({"caching": {"enabled": "yes"}}, "true or false"),
            ({"autoReload": {"intervalSeconds": "soon"}}, "number of seconds"),
            ({"fallback": 1}, "true or false"),
        ],
    )
    def test_wrong_types(self, root: dict[str, object], match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            config_from_mapping(root)

    def test_inverse(self) -> None:
        config = FluentConfig(
            supported_locales=("en", "nb"),
            message_source_type=MessageSourceType.PROPERTIES,
            custom_properties={"a": 1},
        )
        mapping = config_to_mapping(config)
        assert mapping["messageSourceType"] == "properties"
        assert config_from_mapping(mapping) == config


class TestConfigFile:
    def test_save_and_load(self, tmp_path: Path) -> None:
        config = FluentConfig(
            base_path="i18n",
            supported_locales=("en", "nb", "de"),
            cache_timeout_seconds=120.0,
        )
        path = save_config(config, tmp_path / "conf" / "fluent.yml")
        assert path.is_file()
        assert load_config(path) == config

    def test_written_yaml_uses_camel_case(self, tmp_path: Path) -> None:
        path = save_config(FluentConfig(), tmp_path / "fluent.yml")
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["basePath"] == "i18n"
        assert data["caching"] == {"enabled": True, "timeoutSeconds": 0.0}

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "absent.yml") == FluentConfig()

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "fluent.yml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == FluentConfig()

    @pytest.mark.parametrize("content", ["basePath: [unclosed\n", "- just\n- a list\n"])
    def test_malformed_file_gives_defaults(
        self, tmp_path: Path, content: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "fluent.yml"
        path.write_text(content, encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            assert load_config(path) == FluentConfig()
        assert "using defaults" in caplog.text

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "fluent.yml"
        path.write_text("messageSourceType: xml\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_create_default_config(self, tmp_path: Path) -> None:
        path = tmp_path / "fluent.yml"
        assert create_default_config(path)
        config = load_config(path)
        assert config.cache_timeout_seconds == 300.0
        assert config.log_missing_translations
        assert not create_default_config(path)
