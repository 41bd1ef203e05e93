"""Environment lookups for the ideo CLI."""

from __future__ import annotations

import os

from .errors import ConfigurationError

API_KEY_VARIABLE = "IDEOGRAM_API_KEY"
API_URL_VARIABLE = "IDEOGRAM_API_URL"
ADD_PROMPT_VARIABLE = "IDEO_ADD_PROMPT"
DEFAULT_API_URL = "https://api.ideogram.ai/v1/ideogram-v3/generate"


def api_key() -> str:
    value = os.getenv(API_KEY_VARIABLE, "").strip()
    if not value:
        raise ConfigurationError(
            f"{API_KEY_VARIABLE} environment variable is not set"
        )
    return value


def api_url() -> str:
    value = os.getenv(API_URL_VARIABLE, "").strip()
    return value or DEFAULT_API_URL


def add_prompt_enabled() -> bool:
    value = os.getenv(ADD_PROMPT_VARIABLE, "")
    if not value.strip():
        return False
    try:
        return as_boolean(value, key=ADD_PROMPT_VARIABLE)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def as_boolean(value: str, *, key: str | None = None) -> bool:
    if not key:
        key = "key"
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(
        f"value {value} for {key} must be one of 1, 0, true, false, yes, no, on, off"
    )
