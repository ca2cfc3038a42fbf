"""Tests for source tree extraction (extraction.orchestrator).

Uses the shared ``project_tree`` fixture: two Python modules and one
template that together hold six distinct messages.
"""

import logging
from pathlib import Path

import pytest

from fluenti18n.core.hashing import Sha256HashGenerator
from fluenti18n.diagnostics import InvalidPatternError
from fluenti18n.enums import MessageType
from fluenti18n.extraction import (
    DiscoveredMessage,
    ExtractionConfig,
    ExtractionResult,
    MessageExtractor,
)

PLURAL_TEXT = "{0, plural, zero {No items} one {One item} other {{} items}}"


def _locations(result: ExtractionResult) -> dict[str, list[tuple[str, int]]]:
    return {
        identifier: [(loc.file_path, loc.line) for loc in message.locations]
        for identifier, message in result.messages.items()
    }


def _extract(root: Path, **kwargs: object) -> ExtractionResult:
    return MessageExtractor(ExtractionConfig(project_root=root, **kwargs)).extract()  # type: ignore[arg-type]


class TestMessageExtractor:
    """End-to-end extraction over a project tree."""

    def test_discover_files_sorted(self, project_tree: Path) -> None:
        extractor = MessageExtractor(ExtractionConfig(project_root=project_tree))
        relative = [p.relative_to(project_tree).as_posix() for p in extractor.discover_files()]
        assert relative == ["src/app/models.py", "src/app/views.py", "templates/home.html"]

    def test_message_set(self, project_tree: Path) -> None:
        result = _extract(project_tree)
        texts = sorted(m.natural_text for m in result)
        assert texts == sorted(
            ["Welcome", "Hello, {}!", "Save", "Order status", PLURAL_TEXT, "Latest news"]
        )
        assert result.message_count == 6
        assert result.total_occurrences == 8
        assert result.files_scanned == 3
        assert not result.has_errors

    def test_duplicates_merge_locations(self, project_tree: Path) -> None:
        """Repeated literals fold into one entry, locations in file order."""
        gen = Sha256HashGenerator()
        locations = _locations(_extract(project_tree))
        assert locations[gen.generate("Hello, {}!")] == [
            ("src/app/models.py", 12),
            ("src/app/views.py", 3),
        ]
        assert locations[gen.generate("Welcome")] == [
            ("src/app/views.py", 2),
            ("templates/home.html", 1),
        ]

    def test_message_kinds(self, project_tree: Path) -> None:
        gen = Sha256HashGenerator()
        result = _extract(project_tree)

        save = result.get(gen.generate("Save", "button"))
        assert save is not None
        assert save.type is MessageType.CONTEXTUAL
        assert save.context == "button"
        assert gen.generate("Save") not in result

        plural = result.get(gen.generate(PLURAL_TEXT))
        assert plural is not None
        assert plural.type is MessageType.PLURAL
        assert [(loc.file_path, loc.line) for loc in plural.locations] == [("src/app/models.py", 5)]

        annotation = result.get(gen.generate("Order status"))
        assert annotation is not None
        assert annotation.type is MessageType.ANNOTATION

    def test_identifiers_assigned_and_sorted(self, project_tree: Path) -> None:
        result = _extract(project_tree)
        assert list(result.messages) == sorted(result.messages)
        for identifier, message in result.messages.items():
            assert message.identifier == identifier

    def test_repeat_runs_identical(self, project_tree: Path) -> None:
        """An unchanged tree extracts to the same identifiers and locations."""
        assert _locations(_extract(project_tree)) == _locations(_extract(project_tree))

    def test_thread_pool_matches_sequential(self, project_tree: Path) -> None:
        assert _locations(_extract(project_tree, max_workers=4)) == _locations(
            _extract(project_tree)
        )

    def test_supported_locales_carried(self, project_tree: Path) -> None:
        result = _extract(project_tree, supported_locales=("en", "nb"))
        assert result.supported_locales == ("en", "nb")

    def test_unreadable_file_recorded(
        self, project_tree: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A file that fails to decode is skipped and reported."""
        (project_tree / "src" / "broken.py").write_bytes(b'i18n.translate("\xff\xfe")\n')
        with caplog.at_level(logging.WARNING):
            result = _extract(project_tree)
        assert result.has_errors
        [failure] = result.errors
        assert failure.file_path == "src/broken.py"
        assert "src/broken.py" in str(failure)
        assert result.message_count == 6
        assert result.files_scanned == 3
        assert "Skipping src/broken.py" in caplog.text

    def test_missing_source_directory(self, tmp_path: Path) -> None:
        result = _extract(tmp_path, source_directories=("nowhere",))
        assert result.message_count == 0
        assert result.files_scanned == 0

    def test_file_patterns_filter(self, project_tree: Path) -> None:
        result = _extract(project_tree, file_patterns=(r".*\.html",))
        assert sorted(m.natural_text for m in result) == ["Latest news", "Welcome"]

    def test_extract_content(self) -> None:
        extractor = MessageExtractor(ExtractionConfig())
        result = extractor.extract_content(
            'i18n.translate("Hi")\ni18n.translate("Hi")\n', "inline.py"
        )
        [message] = list(result)
        assert [loc.line for loc in message.locations] == [1, 2]

    def test_escaped_literals_match_runtime_identifiers(self, tmp_path: Path) -> None:
        """Identifiers come from the decoded text the program passes at runtime."""
        source = tmp_path / "src"
        source.mkdir()
        (source / "app.py").write_text(
            'i18n.translate("Say \\"hi\\"")\ni18n.translate("Line one\\nLine two")\n',
            encoding="utf-8",
        )
        result = _extract(tmp_path)
        generator = Sha256HashGenerator()
        assert set(result.messages) == {
            generator.generate('Say "hi"'),
            generator.generate("Line one\nLine two"),
        }

    def test_custom_extractors(self, project_tree: Path) -> None:
        """Custom extractors run after the defaults and merge by identifier."""

        class OrderExtractor:
            def can_process(self, path: Path) -> bool:
                return path.suffix == ".py"

            def extract(self, content: str, file_path: str) -> list[DiscoveredMessage]:
                if "class Order" not in content:
                    return []
                return [DiscoveredMessage(natural_text="Order status")]

        config = ExtractionConfig(project_root=project_tree, custom_extractors=(OrderExtractor(),))
        result = MessageExtractor(config).extract()
        assert result.message_count == 6
        assert len(MessageExtractor(config).extractors) == 4


class TestExtractionConfig:
    def test_invalid_file_pattern(self) -> None:
        with pytest.raises(InvalidPatternError, match="file pattern"):
            ExtractionConfig(file_patterns=("*.py",))

    def test_invalid_plural_marker(self) -> None:
        with pytest.raises(InvalidPatternError, match="plural marker"):
            ExtractionConfig(plural_marker="i18n.plural(")

    def test_max_workers(self) -> None:
        with pytest.raises(ValueError, match="max_workers"):
            ExtractionConfig(max_workers=0)

    def test_resolved_source_directories(self, tmp_path: Path) -> None:
        absolute = tmp_path / "abs"
        config = ExtractionConfig(project_root=tmp_path, source_directories=("src", absolute))
        assert config.resolved_source_directories() == (tmp_path / "src", absolute)
