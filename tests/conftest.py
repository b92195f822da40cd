"""Global test configuration for markchunk tests."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a test (or CLI invocation) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch, tmp_path):
    """Keep stray MARKCHUNK_* variables and local config files out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("MARKCHUNK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def cli_runner():
    """Provide a CLI runner for the markchunk app."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def write_markdown(tmp_path):
    """Write a Markdown document into the test's temp dir and return its path."""

    def _write(text: str, name: str = "doc.md"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
