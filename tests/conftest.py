"""Shared test fixtures for step-binder tests."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from step_binder.config import AppConfig


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch) -> AppConfig:
    """Config built from defaults only, ignoring the developer's environment."""
    for key in ("BATCH_CONCURRENCY", "OUTPUT_ENCODING", "SKIP_CONJUNCTIONS", "STEP_PREFIXES"):
        monkeypatch.delenv(f"STEP_BINDER_{key}", raising=False)
    return AppConfig(_env_file=None)


@pytest.fixture
def feature_file(tmp_path: Path) -> Path:
    """Write a small feature file mixing steps, continuations and other lines."""
    path = tmp_path / "login.feature"
    path.write_text(
        "Feature: Login\n"
        "\n"
        "  Scenario: Greeting\n"
        '    Given the user "bob" exists\n'
        "    And the page is open\n"
        '    When Message "Hello" is displayed\n'
        "    # a comment\n"
        "    Then the login succeeds\n",
        encoding="utf-8",
    )
    return path
