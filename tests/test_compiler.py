"""Tests for catalog compilation (compiler.compiler, compiler.result).

Catalogs are produced the normal way: extract ``project_tree``, generate
PO files, then edit one translation as a translator would.
"""

import json
import logging
from pathlib import Path

import pytest

from fluenti18n.catalog import CatalogGenerator, catalog_path, read_catalog
from fluenti18n.catalog.models import CatalogEntry, TranslationData
from fluenti18n.catalog.pofile import write_catalog
from fluenti18n.compiler import (
    BinaryCodec,
    CompilerConfig,
    PropertiesCodec,
    TranslationCompiler,
)
from fluenti18n.config import FluentConfig
from fluenti18n.core.hashing import Sha256HashGenerator
from fluenti18n.enums import MessageSourceType, OutputFormat
from fluenti18n.extraction import ExtractionConfig, MessageExtractor

GEN = Sha256HashGenerator()
PLURAL = "{0, plural, zero {No items} one {One item} other {{} items}}"


@pytest.fixture
def catalogs(project_tree: Path) -> Path:
    """PO catalogs for en and nb with one nb translation."""
    catalog_dir = project_tree / "i18n" / "po"
    result = MessageExtractor(ExtractionConfig(project_root=project_tree)).extract()
    CatalogGenerator(catalog_dir, ("en", "nb"), "en").generate(result)

    nb_path = catalog_path(catalog_dir, "nb")
    data = read_catalog(nb_path)
    welcome = GEN.generate("Welcome")
    entries = [
        entry.with_translation("Velkommen") if entry.identifier == welcome else entry
        for entry in data
    ]
    write_catalog(
        TranslationData.from_entries("nb", entries, creation_date=data.creation_date), nb_path
    )
    return catalog_dir


def _compiler(
    catalog_dir: Path, *formats: OutputFormat, locales: tuple[str, ...] = ("en", "nb")
) -> TranslationCompiler:
    return TranslationCompiler(
        CompilerConfig(
            catalog_dir=catalog_dir,
            output_dir=catalog_dir.parent,
            supported_locales=locales,
            default_locale="en",
            output_formats=formats or (OutputFormat.JSON,),
        )
    )


class TestCompile:
    """Compiling catalog files into artifacts."""

    def test_all_formats_written(self, catalogs: Path) -> None:
        result = _compiler(
            catalogs, OutputFormat.JSON, OutputFormat.PROPERTIES, OutputFormat.BINARY
        ).compile()
        assert result.is_successful
        assert result.processed_locales == ("en", "nb")
        assert result.total_generated_files == 6
        assert {p.name for p in result.files_for("nb")} == {
            "messages_nb.json",
            "messages_nb.properties",
            "messages_nb.bin",
        }

    def test_json_values(self, catalogs: Path) -> None:
        _compiler(catalogs).compile()
        output = catalogs.parent
        nb = json.loads((output / "messages_nb.json").read_text(encoding="utf-8"))
        en = json.loads((output / "messages_en.json").read_text(encoding="utf-8"))

        assert len(nb) == len(en) == 6
        assert nb[GEN.generate("Welcome")] == "Velkommen"
        assert nb[GEN.generate("Save", "button")] == ""
        assert en[GEN.generate("Save", "button")] == "Save"
        assert en[GEN.generate(PLURAL)] == {
            "zero": "No items",
            "one": "One item",
            "other": "{} items",
        }

    def test_binary_and_properties_agree(self, catalogs: Path) -> None:
        _compiler(catalogs, OutputFormat.PROPERTIES, OutputFormat.BINARY).compile()
        output = catalogs.parent
        binary = BinaryCodec().read_artifact(output / "messages_nb.bin")
        properties = PropertiesCodec().read(output / "messages_nb.properties")
        assert binary.locale == "nb"
        assert binary.translations == properties

    def test_statistics(self, catalogs: Path) -> None:
        result = _compiler(catalogs).compile()
        assert result.translation_stats["en"].translated == 6
        nb = result.translation_stats["nb"]
        assert (nb.total, nb.translated, nb.missing) == (6, 1, 5)
        assert result.summary("nb") == "nb: 1/6 translated (16.7%)"
        overall = result.overall_stats
        assert (overall.locale_count, overall.total_entries, overall.translated_entries) == (
            2,
            12,
            7,
        )
        assert len(result.missing_translations) == 5
        assert {issue.locale for issue in result.missing_translations} == {"nb"}

    def test_recompile_byte_identical(self, catalogs: Path) -> None:
        compiler = _compiler(catalogs, OutputFormat.JSON, OutputFormat.BINARY)
        first = {f.path: f.path.read_bytes() for f in compiler.compile().generated_files}
        second = {f.path: f.path.read_bytes() for f in compiler.compile().generated_files}
        assert first == second

    def test_missing_catalog(self, catalogs: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            result = _compiler(catalogs, locales=("en", "nb", "de")).compile()
        assert result.is_successful
        assert result.has_missing_catalogs
        assert result.missing_catalogs == {"de": catalog_path(catalogs, "de")}
        assert result.summary("de") == "de: catalog not found"
        assert "No catalog for locale de" in caplog.text

    def test_parse_failure_isolated(self, catalogs: Path) -> None:
        """A broken catalog aborts only its own locale."""
        catalog_path(catalogs, "nb").write_text("not a catalog\n", encoding="utf-8")
        result = _compiler(catalogs).compile()
        assert not result.is_successful
        [failure] = result.errors
        assert failure.locale == "nb"
        assert result.processed_locales == ("en",)
        assert result.summary("nb").startswith("nb: failed")
        assert result.summary("fr") == "fr: not compiled"

    def test_compile_data(self, tmp_path: Path) -> None:
        data = TranslationData.from_entries("nb", [])
        compiler = _compiler(tmp_path / "po")
        result = compiler.compile_data(data)
        assert result.processed_locales == ("nb",)
        assert result.translation_stats["nb"].completion_percentage == 100.0
        assert (tmp_path / "messages_nb.json").read_text(encoding="utf-8") == "{}\n"

    def test_encoding_failure_writes_nothing(self, tmp_path: Path) -> None:
        """A payload one codec cannot encode leaves no artifact for the locale."""
        entry = CatalogEntry(identifier="x" * 70000, original_text="Hi", translation="Hei")
        data = TranslationData.from_entries("nb", [entry])
        compiler = _compiler(tmp_path / "po", OutputFormat.JSON, OutputFormat.BINARY)
        result = compiler.compile_data(data)

        [failure] = result.errors
        assert isinstance(failure.error, ValueError)
        assert result.processed_locales == ()
        assert not (tmp_path / "messages_nb.json").exists()
        assert list(tmp_path.glob("*.tmp")) == []

    def test_staging_failure_removes_partial_files(self, tmp_path: Path) -> None:
        """When one artifact cannot be staged, the others are not published."""
        (tmp_path / "messages_nb.bin.tmp").mkdir()
        data = TranslationData.from_entries("nb", [])
        compiler = _compiler(tmp_path / "po", OutputFormat.JSON, OutputFormat.BINARY)
        result = compiler.compile_data(data)

        [failure] = result.errors
        assert isinstance(failure.error, OSError)
        assert failure.message.startswith("Cannot write artifacts")
        assert not (tmp_path / "messages_nb.json").exists()
        assert not (tmp_path / "messages_nb.json.tmp").exists()
        assert not (tmp_path / "messages_nb.bin").exists()


class TestCompilerConfig:
    def test_normalization(self, tmp_path: Path) -> None:
        config = CompilerConfig(
            catalog_dir=str(tmp_path),  # type: ignore[arg-type]
            output_dir=tmp_path,
            output_formats=("json", OutputFormat.JSON, "binary"),  # type: ignore[arg-type]
        )
        assert config.catalog_dir == tmp_path
        assert config.output_formats == (OutputFormat.JSON, OutputFormat.BINARY)

    def test_empty_locales(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="supported_locales"):
            CompilerConfig(catalog_dir=tmp_path, output_dir=tmp_path, supported_locales=())

    def test_from_fluent_config(self, tmp_path: Path) -> None:
        fluent = FluentConfig(
            base_path=str(tmp_path / "i18n"),
            supported_locales=("en", "nb"),
            default_locale="en",
            message_source_type=MessageSourceType.BINARY,
        )
        config = CompilerConfig.from_fluent_config(fluent)
        assert config.catalog_dir == tmp_path / "i18n" / "po"
        assert config.output_dir == tmp_path / "i18n"
        assert config.output_formats == (OutputFormat.BINARY,)
        assert config.supported_locales == ("en", "nb")

    def test_auto_source_compiles_json(self, tmp_path: Path) -> None:
        fluent = FluentConfig(base_path=str(tmp_path))
        assert CompilerConfig.from_fluent_config(fluent).output_formats == (OutputFormat.JSON,)
