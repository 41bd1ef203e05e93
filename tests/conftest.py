from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

import ideo.options as options_module

_ENV_NAMES = ("IDEOGRAM_API_KEY", "IDEOGRAM_API_URL", "IDEO_ADD_PROMPT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> Iterator[None]:
    """Keep real credentials out of tests and undo anything load_dotenv sets."""

    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    yield
    for name in _ENV_NAMES:
        os.environ.pop(name, None)


@pytest.fixture()
def test_env_file(tmp_path, monkeypatch) -> Path:
    """Provide an isolated .env file for each test that needs CLI parsing."""

    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "IDEOGRAM_API_KEY=test-key",
                "IDEOGRAM_API_URL=https://example.com/generate",
            ]
        )
    )
    monkeypatch.setattr(options_module, "_DOTENV_FILE", env_path)
    return env_path


@pytest.fixture()
def empty_env_file(tmp_path, monkeypatch) -> Path:
    """Point .env loading at a file that does not exist."""

    env_path = tmp_path / "missing.env"
    monkeypatch.setattr(options_module, "_DOTENV_FILE", env_path)
    return env_path
