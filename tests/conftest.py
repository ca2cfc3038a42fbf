"""Pytest configuration for the fluenti18n test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: CI runs with 50 examples (fast feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Fuzzing Test Separation:
Tests marked with @pytest.mark.fuzz are excluded from normal test runs.
Run them via: pytest -m fuzz
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from hypothesis import Phase, Verbosity, settings

from fluenti18n.runtime.locale_scope import clear_current_locale

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested with -m fuzz."""
    marker_expr = config.getoption("-m", default="")
    if "fuzz" in str(marker_expr):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_current_locale() -> Iterator[None]:
    """Every test starts and ends without a request locale."""
    clear_current_locale()
    yield
    clear_current_locale()


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """Small project with Python sources and a template.

    Layout:
        src/app/views.py      plain, contextual and duplicated calls
        src/app/models.py     annotation, plural chain, duplicate greeting
        templates/home.html   template expressions
    """
    views = tmp_path / "src" / "app" / "views.py"
    views.parent.mkdir(parents=True)
    views.write_text(
        "def greet(i18n, name):\n"
        '    i18n.translate("Welcome")\n'
        '    return i18n.translate("Hello, {}!", name)\n'
        "\n"
        "def toolbar(i18n):\n"
        '    return i18n.context("button").translate("Save")\n',
        encoding="utf-8",
    )
    models = tmp_path / "src" / "app" / "models.py"
    models.write_text(
        '@translatable("Order status")\n'
        "class Order:\n"
        "    def label(self, i18n, count):\n"
        "        return (\n"
        "            i18n.plural(count)\n"
        '            .zero("No items")\n'
        '            .one("One item")\n'
        '            .other("{} items")\n'
        "        )\n"
        "\n"
        "    def hello(self, i18n):\n"
        '        return i18n.t("Hello, {}!", "Kari")\n',
        encoding="utf-8",
    )
    home = tmp_path / "templates" / "home.html"
    home.parent.mkdir(parents=True)
    home.write_text(
        "<h1>{{ _('Welcome') }}</h1>\n<p>{{ i18n.translate(\"Latest news\") }}</p>\n",
        encoding="utf-8",
    )
    return tmp_path
