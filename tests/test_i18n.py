"""Tests for the I18n resolution facade (runtime.i18n, runtime.builders).

The ``app`` fixture runs the whole pipeline on ``project_tree``: extract
messages, generate PO catalogs, translate a few nb entries, compile JSON
artifacts, then serve them through a facade.
"""

import logging
from pathlib import Path

import pytest

from fluenti18n.catalog import CatalogGenerator, catalog_path, read_catalog, write_catalog
from fluenti18n.catalog.models import TranslationData
from fluenti18n.compiler import CompilerConfig, TranslationCompiler
from fluenti18n.config import FluentConfig, save_config
from fluenti18n.core.hashing import Sha256HashGenerator
from fluenti18n.extraction import ExtractionConfig, MessageExtractor
from fluenti18n.runtime import I18n, MessageDescriptor, NullMessageSource

GEN = Sha256HashGenerator()
PLURAL = "{0, plural, zero {No items} one {One item} other {{} items}}"
NB_TRANSLATIONS = {
    GEN.generate("Welcome"): "Velkommen",
    GEN.generate("Hello, {}!"): "Hei, {}!",
    GEN.generate("Save", "button"): "Lagre",
    GEN.generate(PLURAL): "{0, plural, one {Ett element} other {{} elementer}}",
}


def _build(root: Path) -> FluentConfig:
    config = FluentConfig(base_path=str(root / "i18n"), supported_locales=("en", "nb"))
    compiler_config = CompilerConfig.from_fluent_config(config)

    result = MessageExtractor(ExtractionConfig(project_root=root)).extract()
    CatalogGenerator(compiler_config.catalog_dir, ("en", "nb"), "en").generate(result)

    nb_path = catalog_path(compiler_config.catalog_dir, "nb")
    data = read_catalog(nb_path)
    entries = [
        entry.with_translation(NB_TRANSLATIONS[entry.identifier])
        if entry.identifier in NB_TRANSLATIONS
        else entry
        for entry in data
    ]
    write_catalog(
        TranslationData.from_entries("nb", entries, creation_date=data.creation_date), nb_path
    )
    TranslationCompiler(compiler_config).compile()
    return config


@pytest.fixture
def config(project_tree: Path) -> FluentConfig:
    return _build(project_tree)


@pytest.fixture
def i18n(config: FluentConfig) -> I18n:
    return I18n(config)


# ============================================================================
# TRANSLATE
# ============================================================================


class TestTranslate:
    def test_default_locale(self, i18n: I18n) -> None:
        assert i18n.current_locale == "en"
        assert i18n.translate("Welcome") == "Welcome"
        assert i18n.translate("Hello, {}!", "Kari") == "Hello, Kari!"

    def test_request_locale(self, i18n: I18n) -> None:
        with i18n.locale_scope("nb"):
            assert i18n.current_locale == "nb"
            assert i18n.translate("Welcome") == "Velkommen"
            assert i18n.t("Hello, {}!", "Kari") == "Hei, Kari!"
        assert i18n.translate("Welcome") == "Welcome"

    def test_untranslated_falls_back_to_natural_text(self, i18n: I18n) -> None:
        with i18n.locale_scope("nb"):
            assert i18n.translate("Latest news") == "Latest news"
            assert i18n.translate("Never extracted {0}", 7) == "Never extracted 7"

    def test_empty_text(self, i18n: I18n) -> None:
        assert i18n.translate("") == ""

    def test_locale_aware_arguments(self, i18n: I18n) -> None:
        assert i18n.translate("{0,number} files", 1234) == "1,234 files"
        with i18n.locale_scope("de"):
            assert i18n.translate("{0,number} files", 1234) == "1.234 files"

    def test_missing_logged_at_info_when_enabled(
        self, config: FluentConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        i18n = I18n(config.replace(log_missing_translations=True))
        with caplog.at_level(logging.INFO, logger="fluenti18n.runtime.i18n"):
            i18n.translate("Never extracted")
        assert "Missing translation for" in caplog.text

    def test_missing_quiet_by_default(
        self, i18n: I18n, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="fluenti18n.runtime.i18n"):
            i18n.translate("Never extracted")
        assert "Missing translation" not in caplog.text


class TestContext:
    def test_context_selects_entry(self, i18n: I18n) -> None:
        with i18n.locale_scope("nb"):
            assert i18n.context("button").translate("Save") == "Lagre"
            assert i18n.translate("Save") == "Save"
            assert i18n.translate("Save", context="button") == "Lagre"

    def test_description_is_kept(self, i18n: I18n) -> None:
        builder = i18n.context("menu").description("File menu entry")
        assert builder.label == "menu"
        assert builder.description_text == "File menu entry"
        assert builder.translate("Save") == "Save"

    def test_empty_label(self, i18n: I18n) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            i18n.context("")


class TestPlural:
    @pytest.mark.parametrize(
        ("count", "expected"), [(0, "No items"), (1, "One item"), (5, "5 items")]
    )
    def test_default_locale(self, i18n: I18n, count: int, expected: str) -> None:
        assert i18n.plural(count).zero("No items").one("One item").other("{} items").format() == (
            expected
        )

    @pytest.mark.parametrize(
        ("count", "expected"), [(0, "0 elementer"), (1, "Ett element"), (3, "3 elementer")]
    )
    def test_translated(self, i18n: I18n, count: int, expected: str) -> None:
        builder = i18n.plural(count).other("{} items").one("One item").zero("No items")
        with i18n.locale_scope("nb"):
            assert str(builder) == expected

    def test_untranslated_uses_natural_forms(self, i18n: I18n) -> None:
        with i18n.locale_scope("nb"):
            assert i18n.plural(2).one("One file").other("# files").format() == "2 files"

    def test_no_forms(self, i18n: I18n) -> None:
        assert i18n.plural(4).format() == "4"

    def test_canonical_text(self, i18n: I18n) -> None:
        builder = i18n.plural(1).other("{} items").zero("No items").one("One item")
        assert builder.canonical_text == PLURAL
        assert list(builder.forms) == ["zero", "one", "other"]


# ============================================================================
# KEYS AND DESCRIPTORS
# ============================================================================


class TestResolveKey:
    def test_current_locale(self, i18n: I18n) -> None:
        with i18n.locale_scope("nb"):
            assert i18n.resolve_key(GEN.generate("Hello, {}!"), "Kari") == "Hei, Kari!"

    def test_falls_back_to_default_locale(self, i18n: I18n) -> None:
        with i18n.locale_scope("nb"):
            assert i18n.resolve_key(GEN.generate("Latest news")) == "Latest news"

    def test_fallback_disabled(self, config: FluentConfig) -> None:
        i18n = I18n(config.replace(enable_fallback=False))
        identifier = GEN.generate("Latest news")
        with i18n.locale_scope("nb"):
            assert i18n.resolve_key(identifier) == identifier

    def test_unknown_identifier(self, i18n: I18n) -> None:
        assert i18n.resolve_key("zzzzzzzzzzz") == "zzzzzzzzzzz"


class TestDescriptors:
    def test_describe_and_resolve(self, i18n: I18n) -> None:
        descriptor = i18n.describe("Hello, {}!", "Kari")
        assert descriptor.identifier == GEN.generate("Hello, {}!")
        assert str(descriptor) == "Hello, {}!"
        assert i18n.resolve(descriptor) == "Hello, Kari!"
        assert i18n.resolve(descriptor, "nb") == "Hei, Kari!"

    def test_current_locale_used_when_none(self, i18n: I18n) -> None:
        descriptor = i18n.describe("Welcome")
        with i18n.locale_scope("nb"):
            assert i18n.resolve(descriptor) == "Velkommen"

    def test_contextual(self, i18n: I18n) -> None:
        descriptor = i18n.context("button").describe("Save")
        assert descriptor.context == "button"
        assert i18n.resolve(descriptor, "nb") == "Lagre"

    def test_with_args(self) -> None:
        descriptor = MessageDescriptor("abc", "{0} of {1}", (1,))
        assert descriptor.with_args(2).args == (1, 2)

    def test_variable(self, i18n: I18n) -> None:
        text = "Welcome"
        assert i18n.resolve(i18n.variable(text), "nb") == "Velkommen"


class TestIdentifiers:
    def test_match_extraction(self, i18n: I18n) -> None:
        assert i18n.identifier_for("Save", "button") == GEN.generate("Save", "button")
        assert i18n.register("Welcome") == GEN.generate("Welcome")

    def test_empty_text_rejected(self, i18n: I18n) -> None:
        with pytest.raises(ValueError):
            i18n.identifier_for("")

    def test_message_hashes(self) -> None:
        i18n = I18n(message_source=NullMessageSource())
        i18n.register("Welcome")
        i18n.register("Save", "button")
        assert i18n.message_hashes() == {
            "Welcome": GEN.generate("Welcome"),
            "button:Save": GEN.generate("Save", "button"),
        }

    def test_has_translation(self, i18n: I18n) -> None:
        assert i18n.has_translation("Welcome", "nb")
        assert not i18n.has_translation("Latest news", "nb")
        assert i18n.has_translation("Save", "nb", context="button")
        assert not i18n.has_translation("", "nb")


# ============================================================================
# LOADING AND CONSTRUCTION
# ============================================================================


class TestLoading:
    def test_warm_up_and_reload(self, i18n: I18n) -> None:
        summary = i18n.warm_up()
        assert summary.all_successful
        assert summary.total_attempted == 2
        assert i18n.reload().successful == 2

    def test_null_source(self) -> None:
        i18n = I18n(message_source=NullMessageSource())
        assert i18n.translate("Hello, {}!", "Kari") == "Hello, Kari!"
        assert i18n.warm_up().not_found == 1

    def test_from_config_file(self, config: FluentConfig, tmp_path: Path) -> None:
        path = save_config(config, tmp_path / "fluent.yml")
        i18n = I18n.from_config_file(path)
        assert i18n.config == config
        with i18n.locale_scope("nb"):
            assert i18n.translate("Welcome") == "Velkommen"

    def test_from_missing_config_file(self, tmp_path: Path) -> None:
        i18n = I18n.from_config_file(tmp_path / "absent.yml")
        assert i18n.config == FluentConfig()
